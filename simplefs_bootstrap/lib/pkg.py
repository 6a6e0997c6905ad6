from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "-y", "update"], env=APT_ENV, capture=False, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        logger.info("No packages requested; skipping apt-get install")
        return
    run_cmd(
        ["apt-get", "-y", "install", *packages],
        env=APT_ENV,
        capture=False,
        dry_run=dry_run,
    )
