from __future__ import annotations

import logging
from typing import Optional

from .command import run_cmd
from .privilege import as_user

logger = logging.getLogger(__name__)

TLS_VERSIONS = ("1.0", "1.1", "1.2", "1.3")


def curl_argv(url: str, *, tls_min_version: str = "1.2") -> list[str]:
    """curl invocation that only speaks https and fails on HTTP errors.

    -f turns a 4xx/5xx response into exit 22 instead of printing the error page.
    """

    if tls_min_version not in TLS_VERSIONS:
        raise ValueError(f"Unsupported TLS version: {tls_min_version}")
    return ["curl", "--proto", "=https", f"--tlsv{tls_min_version}", "-sSf", url]


def fetch_bytes(
    url: str,
    *,
    user: Optional[str] = None,
    tls_min_version: str = "1.2",
    dry_run: bool = False,
) -> bytes:
    """Body of url exactly as curl received it."""

    r = run_cmd(
        as_user(user, curl_argv(url, tls_min_version=tls_min_version)),
        binary=True,
        dry_run=dry_run,
    )
    logger.info("Fetched %s (%d bytes)", url, len(r.stdout))
    return bytes(r.stdout)
