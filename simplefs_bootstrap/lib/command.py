from __future__ import annotations

import errno
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence, Union

logger = logging.getLogger(__name__)

Output = Union[str, bytes]


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: Output
    stderr: str


class StepFailed(RuntimeError):
    """A provisioning command exited non-zero.

    exit_code is propagated as the runner's own exit status.
    """

    def __init__(self, exit_code: int, argv: Sequence[str] = (), stderr: str = "", message: str | None = None):
        self.exit_code = exit_code
        self.argv = list(argv)
        self.stderr = stderr
        if message is None:
            message = f"Command failed ({exit_code}): {fmt_argv(self.argv)}"
            if stderr:
                message += f"\n{stderr}"
        super().__init__(message)


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    input_data: Output | None = None,
    capture: bool = True,
    binary: bool = False,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - capture=False lets the child write straight to our stdout/stderr,
      so its own output is what the user sees on failure.
    - binary=True passes stdin/stdout through as bytes, untouched.
    - A missing or non-executable program fails like the shell would (127/126).
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", fmt_argv(argv_list))

    empty: Output = b"" if binary else ""
    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout=empty, stderr="")

    try:
        p = subprocess.run(
            argv_list,
            input=input_data,
            text=not binary,
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.PIPE if capture else None,
            env=dict(os.environ, **(env or {})),
        )
    except OSError as e:
        code = 127 if e.errno == errno.ENOENT else 126
        raise StepFailed(code, argv_list, str(e)) from e

    stdout: Output = p.stdout if p.stdout is not None else empty
    stderr = p.stderr or ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")

    if stdout:
        if binary:
            logger.debug("STDOUT <%d bytes>", len(stdout))
        else:
            logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise StepFailed(p.returncode, argv_list, stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
