"""Unit tests for the scripts/auth0_login.py command-line helper."""

from __future__ import annotations

import json
import os

import pytest

import auth0_login

from auth0_client.launchers.base import LoginResult
from conftest import FakeExchange, json_response, make_id_token


@pytest.fixture(autouse=True)
def _env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH0_DOMAIN", "tenant.example.com")
    monkeypatch.setenv("AUTH0_CLIENT_ID", "cid")
    monkeypatch.setenv("AUTH0_PASSWORD", "pw")


def _patch_http(monkeypatch: pytest.MonkeyPatch, fake: FakeExchange) -> None:
    monkeypatch.setattr("auth0_client.client.HttpxExchange", lambda timeout: fake)


def test_missing_config_exits_2(monkeypatch: pytest.MonkeyPatch, capsys, tmp_path) -> None:
    monkeypatch.delenv("AUTH0_DOMAIN")
    code = auth0_login.main(["--env-file", str(tmp_path / "none"), "refresh"])
    assert code == 2
    assert "AUTH0_DOMAIN" in capsys.readouterr().err


def test_password_login_prints_session(monkeypatch: pytest.MonkeyPatch, capsys, tmp_path) -> None:
    id_token = make_id_token()
    fake = FakeExchange(
        json_response({"access_token": "at", "id_token": id_token}),
        json_response({"name": "Jane"}),
    )
    _patch_http(monkeypatch, fake)

    code = auth0_login.main(
        ["--env-file", str(tmp_path / "none"), "password", "--connection", "db", "--username", "jane"]
    )

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["access_token"] == "at"
    assert out["profile"] == {"name": "Jane"}
    assert fake.calls[0][2]["password"] == "pw"  # type: ignore[index]


def test_refresh_without_token_reports_invalid_state(
    monkeypatch: pytest.MonkeyPatch, capsys, tmp_path
) -> None:
    monkeypatch.delenv("AUTH0_REFRESH_TOKEN", raising=False)
    _patch_http(monkeypatch, FakeExchange())

    code = auth0_login.main(["--env-file", str(tmp_path / "none"), "refresh"])

    assert code == 1
    assert json.loads(capsys.readouterr().err)["error"] == "invalid_state"


def test_env_file_does_not_override_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    env = tmp_path / ".env"
    env.write_text("# comment\nAUTH0_DOMAIN=other\nAUTH0_EXTRA_SETTING = yes\n", encoding="utf-8")
    monkeypatch.delenv("AUTH0_EXTRA_SETTING", raising=False)

    auth0_login._load_env_file(env)

    assert os.environ["AUTH0_DOMAIN"] == "tenant.example.com"
    assert os.environ["AUTH0_EXTRA_SETTING"] == "yes"
    monkeypatch.delenv("AUTH0_EXTRA_SETTING")


class _StubBrowserLauncher:
    """Stands in for BrowserLoginLauncher without binding a socket."""

    instances: list["_StubBrowserLauncher"] = []

    def __init__(self, *, timeout: float, logout_url: str) -> None:
        self.callback_url = "http://127.0.0.1:50999/callback"
        self.launched_with: list[str] = []
        self.instances.append(self)

    async def launch(self, authorize_url: str, callback_url: str, *, title=None) -> LoginResult:
        self.launched_with.append(callback_url)
        return LoginResult.success({"access_token": "at", "id_token": make_id_token()})

    def clear_cookies(self) -> None:
        pass


def test_browser_login_ignores_configured_callback_url(
    monkeypatch: pytest.MonkeyPatch, capsys, tmp_path
) -> None:
    monkeypatch.setenv("AUTH0_CALLBACK_URL", "myapp://callback")
    monkeypatch.setattr(auth0_login, "BrowserLoginLauncher", _StubBrowserLauncher)
    _StubBrowserLauncher.instances.clear()
    _patch_http(monkeypatch, FakeExchange(json_response({"name": "Jane"})))

    code = auth0_login.main(["--env-file", str(tmp_path / "none"), "browser"])

    assert code == 0
    launcher = _StubBrowserLauncher.instances[0]
    assert launcher.launched_with == ["http://127.0.0.1:50999/callback"]
    assert json.loads(capsys.readouterr().out)["profile"] == {"name": "Jane"}
