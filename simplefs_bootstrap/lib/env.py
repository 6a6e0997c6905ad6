from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    log_default: str = "/var/log/simplefs-bootstrap.log"
    log_fallback_name: str = "simplefs-bootstrap.log"


PATHS = Paths()
