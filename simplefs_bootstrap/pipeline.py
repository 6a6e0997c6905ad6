from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .lib.command import StepFailed

logger = logging.getLogger(__name__)

PENDING = "pending"
DONE = "done"
FAILED = "failed"


class Step(Protocol):
    """A single must-succeed provisioning step."""

    step_id: str
    privilege: str

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class PipelineResult:
    state: Dict[str, Any]
    ran_steps: List[str]
    exit_code: int = 0


def _select(steps: Sequence[Step], start_at: Optional[str], stop_after: Optional[str]) -> List[Step]:
    ids = [s.step_id for s in steps]
    for name, value in (("start_at", start_at), ("stop_after", stop_after)):
        if value is not None and value not in ids:
            raise ValueError(f"Unknown {name} step: {value} (known: {', '.join(ids)})")

    lo = ids.index(start_at) if start_at is not None else 0
    hi = ids.index(stop_after) + 1 if stop_after is not None else len(ids)
    if hi <= lo:
        raise ValueError(f"stop_after {stop_after} comes before start_at {start_at}")
    return list(steps[lo:hi])


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order, halting on the first failure.

    There is no recovery or rollback: a StepFailed marks its step failed,
    leaves every later step pending and propagates.
    """

    selected = _select(steps, start_at, stop_after)

    exe = state.setdefault("execution", {})
    status: Dict[str, str] = exe.setdefault("steps", {})
    for step in selected:
        status[step.step_id] = PENDING

    ran: List[str] = []
    for step in selected:
        exe["current_step"] = step.step_id
        logger.info("Running step %s (as %s)", step.step_id, step.privilege)
        try:
            state = step.run(state)
        except StepFailed as e:
            status[step.step_id] = FAILED
            exe["failed_step"] = step.step_id
            exe["exit_code"] = e.exit_code
            logger.error("Step %s failed with exit status %d", step.step_id, e.exit_code)
            raise
        status[step.step_id] = DONE
        ran.append(step.step_id)

    exe["current_step"] = None
    exe["exit_code"] = 0
    return PipelineResult(state=state, ran_steps=ran, exit_code=0)
