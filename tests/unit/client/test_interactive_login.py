"""Unit tests for AuthClient.login_interactive and authorize URL assembly."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

import pytest

from auth0_client.client import AuthClient
from auth0_client.device import StaticDeviceIdProvider
from auth0_client.errors import AuthenticationError, InvalidStateError, LoginCancelled
from auth0_client.launchers.base import LoginResult
from auth0_client.transport import HttpResponse
from conftest import CLIENT_ID, DOMAIN, FakeExchange, FakeLauncher, json_response, make_id_token


def _client(http: FakeExchange, launcher: FakeLauncher | None, **kwargs) -> AuthClient:
    return AuthClient(
        DOMAIN,
        CLIENT_ID,
        http=http,
        launcher=launcher,
        device_id_provider=StaticDeviceIdProvider("Darwin my laptop"),
        **kwargs,
    )


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


# --------------------------------------------------------------------------- #
# Authorize URL                                                               #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_authorize_url_with_connection(http: FakeExchange) -> None:
    client = _client(http, None)
    url = await client.build_authorize_url("google-oauth2", "openid profile")

    parsed = urlparse(url)
    assert parsed.netloc == DOMAIN
    assert parsed.path == "/authorize"
    q = _query(url)
    assert q["client_id"] == [CLIENT_ID]
    assert q["redirect_uri"] == [f"https://{DOMAIN}/mobile"]
    assert q["response_type"] == ["token"]
    assert q["connection"] == ["google-oauth2"]
    assert q["scope"] == ["openid profile"]
    assert "device" not in q
    assert re.fullmatch(r"[a-z]{16}", q["state"][0])


@pytest.mark.anyio
async def test_authorize_url_without_connection_uses_login_widget(http: FakeExchange) -> None:
    client = _client(http, None)
    url = await client.build_authorize_url("", "openid offline_access")

    assert urlparse(url).path == "/login/"
    q = _query(url)
    assert q["client"] == [CLIENT_ID]
    assert "connection" not in q
    assert q["device"] == ["Darwin my laptop"]


@pytest.mark.anyio
async def test_authorize_url_state_is_fresh_each_time(http: FakeExchange) -> None:
    client = _client(http, None)
    first = _query(await client.build_authorize_url("c"))["state"][0]
    second = _query(await client.build_authorize_url("c"))["state"][0]
    assert first != second


def test_callback_url_prefers_configuration_then_launcher(http: FakeExchange) -> None:
    launcher = FakeLauncher(LoginResult.cancelled())
    launcher.callback_url = "http://127.0.0.1:5555/callback"  # type: ignore[attr-defined]

    assert _client(http, launcher).callback_url == "http://127.0.0.1:5555/callback"
    assert (
        _client(http, launcher, callback_url="myapp://callback").callback_url
        == "myapp://callback"
    )
    assert _client(http, None).callback_url == f"https://{DOMAIN}/mobile"


# --------------------------------------------------------------------------- #
# Launcher outcomes                                                           #
# --------------------------------------------------------------------------- #
@pytest.mark.anyio
async def test_interactive_login_requires_launcher(http: FakeExchange) -> None:
    with pytest.raises(InvalidStateError):
        await _client(http, None).login_interactive("c")
    assert http.calls == []


@pytest.mark.anyio
async def test_interactive_login_cancelled(http: FakeExchange) -> None:
    client = _client(http, FakeLauncher(LoginResult.cancelled()))
    with pytest.raises(LoginCancelled):
        await client.login_interactive("c")
    assert client.current_user is None


@pytest.mark.anyio
async def test_interactive_login_error(http: FakeExchange) -> None:
    client = _client(http, FakeLauncher(LoginResult.failed("access_denied: user said no")))
    with pytest.raises(AuthenticationError, match="access_denied"):
        await client.login_interactive("c")
    assert client.current_user is None


@pytest.mark.anyio
async def test_interactive_login_success_fetches_profile(http: FakeExchange) -> None:
    id_token = make_id_token()
    launcher = FakeLauncher(LoginResult.success({"access_token": "at", "id_token": id_token}))
    client = _client(http, launcher)
    http.queue(json_response({"name": "Jane"}))

    session = await client.login_interactive(
        "google-oauth2", with_refresh_token=True, title="Sign in"
    )

    authorize_url, callback_url, title = launcher.launched[0]
    assert callback_url == f"https://{DOMAIN}/mobile"
    assert title == "Sign in"
    assert _query(authorize_url)["scope"] == ["openid offline_access"]
    assert session.access_token == "at"
    assert session.id_token == id_token
    assert session.profile == {"name": "Jane"}


@pytest.mark.anyio
async def test_interactive_login_swallows_profile_failure(http: FakeExchange) -> None:
    launcher = FakeLauncher(
        LoginResult.success({"access_token": "at", "id_token": make_id_token(), "refresh_token": "rt"})
    )
    client = _client(http, launcher)
    http.queue(HttpResponse(status_code=500, text="boom"))

    session = await client.login_interactive("c")

    assert client.current_user is session
    assert session.profile is None
    assert session.refresh_token == "rt"


@pytest.mark.anyio
async def test_interactive_login_survives_raw_exchange_error(http: FakeExchange) -> None:
    launcher = FakeLauncher(LoginResult.success({"access_token": "at", "id_token": make_id_token()}))
    client = _client(http, launcher)
    http.queue(ConnectionError("socket reset"))

    session = await client.login_interactive("c")

    assert client.current_user is session
    assert session.access_token == "at"
    assert session.profile is None


@pytest.mark.anyio
async def test_password_login_propagates_raw_exchange_error(http: FakeExchange) -> None:
    client = _client(http, None)
    http.queue(json_response({"access_token": "at"}), ConnectionError("socket reset"))

    with pytest.raises(ConnectionError):
        await client.login("db", "jane", "pw")
    assert client.current_user is None
