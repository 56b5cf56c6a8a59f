"""Shared fixtures and fakes for the auth client test-suite."""

from __future__ import annotations

import json
import time
from typing import Any, Mapping

import jwt
import pytest

from auth0_client.client import AuthClient
from auth0_client.device import StaticDeviceIdProvider
from auth0_client.launchers.base import LoginResult
from auth0_client.transport import HttpResponse

DOMAIN = "tenant.example.com"
CLIENT_ID = "client-abc123456789"
_SIGNING_KEY = "test-signing-key-that-is-long-enough-for-hs256"


# --------------------------------------------------------------------------- #
# pytest configuration                                                        #
# --------------------------------------------------------------------------- #
def pytest_configure(config):
    """Add integration marker."""
    config.addinivalue_line(
        "markers", "integration: mark test as exercising real sockets / servers"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly requested.

    Tests marked with 'ci_safe' are always run (even inside the integration
    directory) because they stub all external calls and are safe for CI.
    """
    if not config.getoption("--integration", default=False):
        skip_integration = pytest.mark.skip(reason="Need --integration option to run")
        for item in items:
            if "integration" in item.keywords and "ci_safe" not in item.keywords:
                item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Add integration option to pytest."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #
def make_id_token(exp_offset: float | None = 3600, **claims: Any) -> str:
    """Return a signed JWT expiring *exp_offset* seconds from now."""
    payload: dict[str, Any] = {"sub": "auth0|user-1", **claims}
    if exp_offset is not None:
        payload["exp"] = int(time.time() + exp_offset)
    return jwt.encode(payload, _SIGNING_KEY, algorithm="HS256")


def json_response(data: Any, status_code: int = 200) -> HttpResponse:
    return HttpResponse(status_code=status_code, text=json.dumps(data))


class FakeExchange:
    """Record requests and answer from a queue of canned responses."""

    def __init__(self, *responses: HttpResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, str, dict[str, str] | None]] = []

    def queue(self, *responses: HttpResponse | Exception) -> None:
        self.responses.extend(responses)

    async def request(
        self, method: str, url: str, data: Mapping[str, str] | None = None
    ) -> HttpResponse:
        self.calls.append((method, url, dict(data) if data is not None else None))
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


class FakeLauncher:
    """Launcher returning a preset result and remembering what it was asked."""

    def __init__(self, result: LoginResult) -> None:
        self.result = result
        self.launched: list[tuple[str, str, str | None]] = []
        self.cookies_cleared = 0

    async def launch(
        self, authorize_url: str, callback_url: str, *, title: str | None = None
    ) -> LoginResult:
        self.launched.append((authorize_url, callback_url, title))
        return self.result

    def clear_cookies(self) -> None:
        self.cookies_cleared += 1


# --------------------------------------------------------------------------- #
# Fixtures                                                                    #
# --------------------------------------------------------------------------- #
@pytest.fixture
def http() -> FakeExchange:
    return FakeExchange()


@pytest.fixture
def client(http: FakeExchange) -> AuthClient:
    return AuthClient(
        DOMAIN,
        CLIENT_ID,
        http=http,
        device_id_provider=StaticDeviceIdProvider("Linux test-box"),
    )
