"""ID token claim decoding and expiry checks.

The client holds no key material for the tenant, so the token is decoded
**without** signature verification: the result is only used to decide whether
the token is worth sending back to the provider, never to trust its identity
claims.  No network access happens here.
"""

from __future__ import annotations

from typing import Any

import jwt

from auth0_client.clock import Clock, default_clock
from auth0_client.errors import ProtocolError


def decode_claims(token: str) -> dict[str, Any]:
    """Return the unverified claim set of *token*.

    Raises
    ------
    ProtocolError
        If *token* is not a decodable JWT.
    """
    try:
        return jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
            algorithms=["HS256", "RS256"],
        )
    except jwt.InvalidTokenError as exc:
        raise ProtocolError(f"Malformed id_token: {exc}") from exc


def expires_at(token: str) -> float | None:
    """Return the ``exp`` claim as UNIX seconds, or ``None`` if absent."""
    exp = decode_claims(token).get("exp")
    if exp is None:
        return None
    try:
        return float(exp)
    except (TypeError, ValueError):
        raise ProtocolError("id_token exp claim is not numeric") from None


def has_expired(token: str, *, clock: Clock = default_clock, leeway: float = 0) -> bool:
    """Return *True* once ``exp`` (+ *leeway* seconds) is not in the future.

    A token without an ``exp`` claim never expires.
    """
    exp = expires_at(token)
    if exp is None:
        return False
    return clock() >= exp + leeway
