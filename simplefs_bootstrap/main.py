from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from .bootstrap_config import BootstrapConfig, load_bootstrap_config
from .lib.command import StepFailed
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .steps import InstallPackagesStep, InstallToolchainStep

logger = logging.getLogger(__name__)


def build_steps(cfg: BootstrapConfig):
    return [
        InstallPackagesStep(),
        InstallToolchainStep(user=cfg.user),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    dry_run: bool = False,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    verbose: bool = False,
) -> Dict[str, Any]:
    """Provision the host. Raises StepFailed on the first failing command."""

    log_setup = configure_logging(log_path, verbose=verbose)

    cfg = load_bootstrap_config(config_path)
    raw = dict(cfg.raw)
    if dry_run:
        raw["dry_run"] = True

    state: Dict[str, Any] = {
        "config": raw,
        "execution": {"logging": log_setup.as_state()},
    }

    try:
        result = run_pipeline(
            state=state,
            steps=build_steps(cfg),
            start_at=start_at,
            stop_after=stop_after,
        )
    except StepFailed as e:
        logger.exception("Bootstrap failed")
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": state["execution"].get("failed_step"),
                "exit_code": e.exit_code,
                "error": str(e),
            }
        )
        raise

    state = result.state
    state["execution"]["ran_steps"] = result.ran_steps
    logger.info("Bootstrap complete (steps=%s)", ",".join(result.ran_steps))
    return state


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="simplefs-bootstrap",
        description="Provision a Debian host for building simplefs (apt packages + rustup).",
    )
    p.add_argument("--config", default=None, help="YAML file overriding the built-in defaults")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to bootstrap log")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 20_install_toolchain)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("-v", "--verbose", action="store_true", help="Log captured command output")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            log_path=args.log,
            dry_run=bool(args.dry_run),
            start_at=args.start_at,
            stop_after=args.stop_after,
            verbose=bool(args.verbose),
        )
    except (FileNotFoundError, ValueError) as e:
        # Bad --config or step id; nothing has run yet.
        p.error(str(e))
    except StepFailed as e:
        # A child killed by signal N reports -N; the shell convention is 128+N.
        return e.exit_code if e.exit_code > 0 else 128 - e.exit_code
    return 0
