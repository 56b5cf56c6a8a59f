"""Helpers for space-delimited OAuth scope strings.

Scope tokens compare case-insensitively.  ``offline_access`` is the sentinel
asking the provider for a refresh token.
"""

from __future__ import annotations

from typing import Final

OFFLINE_ACCESS: Final[str] = "offline_access"
DEFAULT_SCOPE: Final[str] = "openid"


def scope_has_offline_access(scope: str | None) -> bool:
    """Return *True* if *scope* contains ``offline_access`` in any case."""
    return any(token.lower() == OFFLINE_ACCESS for token in (scope or "").split())


def with_offline_access(scope: str | None, with_refresh_token: bool) -> str:
    """Append ``offline_access`` when a refresh token is wanted and missing.

    Idempotent: applying it to its own output never duplicates the token.
    """
    scope = scope or ""
    if with_refresh_token and not scope_has_offline_access(scope):
        scope = f"{scope} {OFFLINE_ACCESS}" if scope else OFFLINE_ACCESS
    return scope
