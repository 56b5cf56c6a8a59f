"""Interactive login launcher contract and shared redirect parsing.

A launcher presents the provider's authorize page to the user by whatever
means its host environment offers, waits for the redirect back to the
callback URL and reports the outcome.  The client only ever depends on
:class:`InteractiveLoginLauncher`; concrete launchers live beside this module.
"""

from __future__ import annotations

import enum
import hmac
import logging
from dataclasses import dataclass, field
from typing import Mapping, Protocol, runtime_checkable
from urllib.parse import parse_qsl, urlsplit

_LOG = logging.getLogger("auth0-client.launchers")


class LoginStatus(str, enum.Enum):
    SUCCESS = "success"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass(frozen=True)
class LoginResult:
    """What the launcher observed at the end of the interactive flow."""

    status: LoginStatus
    account_properties: dict[str, str] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def success(cls, props: Mapping[str, str]) -> "LoginResult":
        return cls(LoginStatus.SUCCESS, dict(props))

    @classmethod
    def cancelled(cls) -> "LoginResult":
        return cls(LoginStatus.CANCELLED)

    @classmethod
    def failed(cls, error: str) -> "LoginResult":
        return cls(LoginStatus.ERROR, error=error)


@runtime_checkable
class InteractiveLoginLauncher(Protocol):
    """Host-environment capability used by ``AuthClient.login_interactive``."""

    async def launch(
        self, authorize_url: str, callback_url: str, *, title: str | None = None
    ) -> LoginResult: ...

    def clear_cookies(self) -> None: ...


def state_from_url(url: str) -> str | None:
    """Return the ``state`` query parameter embedded in an authorize URL."""
    return dict(parse_qsl(urlsplit(url).query)).get("state")


def parse_redirect_params(url: str) -> dict[str, str]:
    """Collect query *and* fragment parameters from a callback URL.

    ``response_type=token`` delivers tokens in the fragment; errors and
    ``response_mode=query`` use the query string.  Fragment values win.
    """
    parts = urlsplit(url)
    params = dict(parse_qsl(parts.query))
    params.update(parse_qsl(parts.fragment))
    return params


def state_matches(params: Mapping[str, str], expected_state: str | None) -> bool:
    """Return *True* when the redirect echoes *expected_state* (or none is expected)."""
    if expected_state is None:
        return True
    return hmac.compare_digest(params.get("state", ""), expected_state)


def result_from_redirect(
    params: Mapping[str, str], expected_state: str | None
) -> LoginResult:
    """Turn redirect parameters into a :class:`LoginResult`.

    The echoed ``state`` must match the one sent on the authorize URL, error
    redirects included.
    """
    if not state_matches(params, expected_state):
        _LOG.warning("Redirect state mismatch; discarding callback")
        return LoginResult.failed("state mismatch")

    if params.get("error"):
        description = params.get("error_description")
        error = params["error"]
        return LoginResult.failed(f"{error}: {description}" if description else error)

    props = {k: v for k, v in params.items() if k != "state"}
    if not props.get("access_token") and not props.get("id_token"):
        return LoginResult.failed("redirect carried no tokens")
    return LoginResult.success(props)
