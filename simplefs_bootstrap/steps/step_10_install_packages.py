from __future__ import annotations

import logging
from typing import Any, Dict

from ..bootstrap_config import BootstrapConfig
from ..lib.pkg import apt_install, apt_update

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "10_install_packages"
    privilege = "root"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = BootstrapConfig(raw=state.get("config") or {})
        packages = cfg.packages

        # The index is always refreshed before install; a failed update aborts here.
        apt_update(dry_run=cfg.dry_run)
        apt_install(packages, dry_run=cfg.dry_run)

        state.setdefault("execution", {}).setdefault("decisions", {})["packages"] = packages
        logger.info("Installed packages: %s", " ".join(packages))
        return state
