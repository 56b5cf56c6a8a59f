"""Exception types raised by the auth client.

Only lightweight, **data-carrying** exceptions live here so that UI/CLI layers
can transform them into user-facing messages.  Every exception carries an
:class:`ErrorKind`, letting callers branch on ``exc.kind`` (or on
:attr:`auth0_client.outcome.Outcome.kind`) instead of on the class hierarchy.
"""

from __future__ import annotations

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    """Failure categories surfaced by public :class:`AuthClient` operations."""

    INVALID_STATE = "invalid_state"
    AUTHENTICATION = "authentication"
    PROTOCOL = "protocol"
    CANCELLED = "cancelled"
    TRANSPORT = "transport"


class AuthClientError(Exception):
    """Base class for every failure raised by the auth client."""

    kind: ErrorKind = ErrorKind.PROTOCOL

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.kind.value, "message": str(self)}


class InvalidStateError(AuthClientError):
    """Operation invoked without a prior login or with conflicting arguments.

    Always raised before any network call is made.
    """

    kind = ErrorKind.INVALID_STATE


class AuthenticationError(AuthClientError):
    """The identity provider explicitly rejected the request."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(
        self,
        message: str,
        *,
        error: str | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.description = description

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "AuthenticationError":
        error = str(data.get("error"))
        description = data.get("error_description")
        message = f"Error authenticating: {error}"
        if description:
            message = f"{message} ({description})"
        return cls(message, error=error, description=description)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.error:
            payload["provider_error"] = self.error
        return payload


class ProtocolError(AuthClientError):
    """Well-formed response that lacks a field the flow depends on."""

    kind = ErrorKind.PROTOCOL


class LoginCancelled(AuthClientError):
    """The user dismissed an interactive login.  Not a failure as such."""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Login cancelled by user.")


class TransportError(AuthClientError):
    """Connectivity problem or an HTTP status the flow does not interpret."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        return payload
