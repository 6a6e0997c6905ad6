from __future__ import annotations

from typing import Optional, Sequence

from .command import fmt_argv


def as_user(user: Optional[str], argv: Sequence[str]) -> list[str]:
    """Wrap argv so it runs as `user` via su.

    An empty user means no privilege drop: argv runs as the invoking identity.
    """

    if not user:
        return list(argv)
    return ["su", user, "-c", fmt_argv(argv)]
