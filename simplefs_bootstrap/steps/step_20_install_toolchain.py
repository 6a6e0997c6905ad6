from __future__ import annotations

import hashlib
import logging
from typing import Any, Dict

from ..bootstrap_config import BootstrapConfig
from ..lib.command import StepFailed, run_cmd
from ..lib.net import fetch_bytes
from ..lib.privilege import as_user

logger = logging.getLogger(__name__)


class InstallToolchainStep:
    """Fetch the remote toolchain installer and pipe it into sh as cfg.user."""

    step_id = "20_install_toolchain"

    def __init__(self, user: str | None = None) -> None:
        self.privilege = user or "root"

    def _verify(self, cfg: BootstrapConfig, script: bytes, decisions: Dict[str, Any]) -> None:
        # Digest of the bytes as served, so it matches `curl ... | sha256sum`.
        digest = hashlib.sha256(script).hexdigest()
        decisions["installer_sha256"] = digest
        expected = cfg.installer_sha256
        if expected is None:
            logger.warning(
                "Installer %s is not pinned (sha256=%s); set toolchain.installer_sha256 to pin it",
                cfg.installer_url,
                digest,
            )
        elif digest != expected:
            raise StepFailed(
                1,
                message=f"Installer checksum mismatch for {cfg.installer_url}: expected {expected}, got {digest}",
            )

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = BootstrapConfig(raw=state.get("config") or {})
        decisions = state.setdefault("execution", {}).setdefault("decisions", {})

        script = fetch_bytes(
            cfg.installer_url,
            user=cfg.user,
            tls_min_version=cfg.tls_min_version,
            dry_run=cfg.dry_run,
        )

        # Nothing was fetched under dry-run, so there is nothing to verify.
        if not cfg.dry_run:
            self._verify(cfg, script, decisions)

        run_cmd(
            as_user(cfg.user, ["sh", "-s", "--", *cfg.installer_args]),
            input_data=script,
            capture=False,
            binary=True,
            dry_run=cfg.dry_run,
        )

        logger.info("Toolchain installed (user=%s url=%s)", cfg.user or "<current>", cfg.installer_url)
        return state
