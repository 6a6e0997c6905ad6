from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default

FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

_installed: List[logging.Handler] = []


@dataclass(frozen=True)
class LogSetup:
    requested: str
    actual: Optional[str]
    fell_back: bool

    def as_state(self) -> Dict[str, Any]:
        return asdict(self)


def _open_file(path: Path) -> Optional[logging.FileHandler]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path)
    except OSError:
        return None


def reset_logging() -> None:
    """Detach and close the handlers configure_logging installed."""

    root = logging.getLogger()
    while _installed:
        h = _installed.pop()
        root.removeHandler(h)
        h.close()


def configure_logging(log_path: str = DEFAULT_LOG_PATH, *, verbose: bool = False) -> LogSetup:
    """Send logs to log_path and the console.

    Candidates for the file are log_path, then ./simplefs-bootstrap.log (a
    non-root --dry-run cannot write /var/log); if neither opens, logging is
    console only. Captured command output is DEBUG and, with verbose, reaches
    the file alone; the console stays at INFO.

    Calling it again replaces the previous handlers.
    """

    reset_logging()
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    fmt = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)

    actual: Optional[str] = None
    fell_back = True
    for i, candidate in enumerate((Path(log_path), Path.cwd() / PATHS.log_fallback_name)):
        file_handler = _open_file(candidate)
        if file_handler is not None:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(fmt)
            _installed.append(file_handler)
            actual = str(candidate)
            fell_back = i > 0
            break

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(fmt)
    _installed.append(console)

    for h in _installed:
        root.addHandler(h)

    setup = LogSetup(requested=log_path, actual=actual, fell_back=fell_back)
    log = logging.getLogger(__name__)
    if actual is None:
        log.warning("No writable log file (tried %s); logging to console only", log_path)
    elif setup.fell_back:
        log.warning("Cannot write %s; logging to %s", log_path, actual)
    return setup
