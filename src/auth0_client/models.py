"""Typed records used by the auth client."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from auth0_client.clock import Clock, default_clock
from auth0_client import token_validator


@dataclass(slots=True)
class Session:
    """The logged-in user as seen by :class:`~auth0_client.client.AuthClient`.

    ``id_token`` is updated in place by refresh/renew; every other field is
    only set when the session is (re-)established.
    """

    access_token: str = ""
    id_token: str = ""
    refresh_token: str = ""
    profile: dict[str, Any] | None = None

    @classmethod
    def from_account_properties(cls, props: Mapping[str, Any]) -> "Session":
        """Build a session from token-response / redirect account properties.

        ``profile`` may be a mapping or the raw JSON text of the user-info
        response.
        """
        profile = props.get("profile")
        if isinstance(profile, (str, bytes)):
            profile = json.loads(profile)
        return cls(
            access_token=str(props.get("access_token") or ""),
            id_token=str(props.get("id_token") or ""),
            refresh_token=str(props.get("refresh_token") or ""),
            profile=dict(profile) if profile is not None else None,
        )

    def is_expired(self, *, clock: Clock = default_clock) -> bool:
        """Return *True* if the ID token's ``exp`` claim has passed."""
        return token_validator.has_expired(self.id_token, clock=clock)

    def to_dict(self) -> dict[str, Any]:
        """Serialisable snapshot for caller-owned persistence."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Session":
        return cls.from_account_properties(data)
