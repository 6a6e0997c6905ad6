from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .lib.net import TLS_VERSIONS

DEFAULTS_PATH = Path(__file__).resolve().parent / "manifests" / "bootstrap.yaml"


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any]

    @property
    def packages(self) -> List[str]:
        return [str(p).strip() for p in (self.raw.get("packages") or []) if str(p).strip()]

    @property
    def _toolchain(self) -> Dict[str, Any]:
        return self.raw.get("toolchain") or {}

    @property
    def user(self) -> Optional[str]:
        user = self._toolchain.get("user")
        return str(user) if user else None

    @property
    def installer_url(self) -> str:
        return str(self._toolchain.get("installer_url") or "https://sh.rustup.rs")

    @property
    def installer_args(self) -> List[str]:
        return [str(a) for a in (self._toolchain.get("installer_args") or [])]

    @property
    def installer_sha256(self) -> Optional[str]:
        digest = self._toolchain.get("installer_sha256")
        if digest is None or str(digest).strip() == "":
            return None
        return str(digest).strip().lower()

    @property
    def tls_min_version(self) -> str:
        return str(self._toolchain.get("tls_min_version") or "1.2")

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    def validate(self) -> "BootstrapConfig":
        if self.tls_min_version not in TLS_VERSIONS:
            raise ValueError(
                f"toolchain.tls_min_version must be one of {', '.join(TLS_VERSIONS)}, got {self.tls_min_version!r}"
            )
        if not self.installer_url.startswith("https://"):
            raise ValueError(f"toolchain.installer_url must be https, got {self.installer_url!r}")
        return self


def _read_yaml(p: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{p}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"cannot read {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")
    return raw


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_bootstrap_config(path: Optional[str] = None) -> BootstrapConfig:
    """Load built-in defaults, overlaid by the YAML file at path if given."""

    raw = _read_yaml(DEFAULTS_PATH)
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("bootstrap config must be YAML")
        raw = _merge(raw, _read_yaml(p))

    return BootstrapConfig(raw=raw).validate()
