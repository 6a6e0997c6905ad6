"""simplefs host bootstrap (Python-first, fail-fast).

Core design goals:
- Strictly sequential provisioning steps
- Fail fast: the first failing command's exit status is the run's exit status
- No rollback, no retries
- Privilege drop for the toolchain installer
- Centralized logging
"""

__all__ = []
