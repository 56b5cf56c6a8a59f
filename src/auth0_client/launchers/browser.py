"""System-browser launcher with a loopback redirect receiver.

The authorize URL is opened in the user's default browser.  The provider
redirects back to ``http://127.0.0.1:<port>/callback`` where a tiny Starlette
app, served by uvicorn for the duration of :meth:`BrowserLoginLauncher.launch`,
collects the result:

1. ``GET /callback`` with ``error`` or token parameters in the query string is
   handled directly.
2. Otherwise (``response_type=token`` puts tokens in the URL *fragment*, which
   browsers never send to servers) a relay page posts ``location.hash`` back to
   ``POST /callback``.

SECURITY NOTE
-------------
Tokens and the state value are never logged.  The server binds to loopback
only and is torn down as soon as one result has been recorded.
"""

from __future__ import annotations

import html
import logging
import socket
import sys
import webbrowser
from typing import Callable
from urllib.parse import parse_qsl, urlencode

import anyio
import anyio.to_thread
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, Response
from starlette.routing import Route

from auth0_client.errors import InvalidStateError
from auth0_client.launchers.base import (
    LoginResult,
    result_from_redirect,
    state_from_url,
    state_matches,
)

_LOG = logging.getLogger("auth0-client.launchers.browser")

DEFAULT_LOGIN_TIMEOUT = 300  # seconds

_RELAY_SCRIPT = (
    "<script>"
    "fetch(window.location.pathname,{method:'POST',"
    "headers:{'Content-Type':'application/x-www-form-urlencoded'},"
    "body:window.location.hash.substring(1)})"
    ".then(function(r){return r.text();})"
    ".then(function(t){document.open();document.write(t);document.close();});"
    "</script>"
)


def _html_page(title: str, body: str, status: int = 200) -> HTMLResponse:
    """Return a tiny success / error HTML page; *title* and *body* are escaped."""
    title, body = html.escape(title), html.escape(body)
    content = (
        "<!doctype html><html lang='en'>"
        "<head><meta charset='utf-8'><title>"
        f"{title}</title></head><body><h1>{title}</h1><p>{body}</p></body></html>"
    )
    return HTMLResponse(content, status_code=status)


def find_free_port(host: str = "127.0.0.1") -> int:
    """Ask the OS for an unused TCP port on *host*."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((host, 0))
        return s.getsockname()[1]


def build_callback_app(
    expected_state: str | None,
    on_result: Callable[[LoginResult], None],
    *,
    title: str | None = None,
    path: str = "/callback",
) -> Starlette:
    """Return the Starlette app receiving the provider redirect."""
    heading = title or "Sign in"

    def _finish(params: dict[str, str]) -> Response:
        if not state_matches(params, expected_state):
            _LOG.warning("Callback with unexpected state ignored")
            return _html_page(heading, "Unexpected authorization response.", 400)
        result = result_from_redirect(params, expected_state)
        on_result(result)
        if result.error:
            return _html_page(f"{heading}: authorization failed", result.error, 400)
        return _html_page(f"{heading}: authorization successful", "You may close this window.")

    async def _callback_get(request: Request) -> Response:
        params = dict(request.query_params)
        if params.get("error") or params.get("access_token") or params.get("id_token"):
            return _finish(params)
        return HTMLResponse(
            f"<!doctype html><html><head><title>{html.escape(heading)}</title></head>"
            f"<body>{_RELAY_SCRIPT}</body></html>"
        )

    async def _callback_post(request: Request) -> Response:
        body = (await request.body()).decode("utf-8")
        params = dict(parse_qsl(body))
        if not params:
            return _html_page(heading, "No authorization data received.", 400)
        return _finish(params)

    return Starlette(
        routes=[
            Route(path, _callback_get, methods=["GET"]),
            Route(path, _callback_post, methods=["POST"]),
        ]
    )


class BrowserLoginLauncher:
    """:class:`~auth0_client.launchers.base.InteractiveLoginLauncher` for desktops.

    Args:
        host: Loopback interface to bind.
        port: Port to bind; ``0`` picks a free one at construction time so that
            :attr:`callback_url` is known before the first login.
        timeout: Seconds to wait for the redirect before reporting the login
            as cancelled.
        logout_url: Provider logout endpoint opened by :meth:`clear_cookies`
            to drop the browser's SSO session.  Nothing is opened when unset.
        open_browser: Replaceable opener, defaults to :func:`webbrowser.open`.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 0,
        *,
        timeout: float = DEFAULT_LOGIN_TIMEOUT,
        logout_url: str | None = None,
        open_browser: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self.host = host
        self.port = port or find_free_port(host)
        self.timeout = timeout
        self.logout_url = logout_url
        self._open_browser = open_browser

    @property
    def callback_url(self) -> str:
        return f"http://{self.host}:{self.port}/callback"

    async def launch(
        self, authorize_url: str, callback_url: str, *, title: str | None = None
    ) -> LoginResult:
        if callback_url != self.callback_url:
            raise InvalidStateError(
                f"callback_url must be {self.callback_url} for this launcher, got {callback_url}"
            )

        results: list[LoginResult] = []
        done = anyio.Event()

        def _record(result: LoginResult) -> None:
            if not results:
                results.append(result)
                done.set()

        app = build_callback_app(state_from_url(authorize_url), _record, title=title)
        server = uvicorn.Server(
            uvicorn.Config(app, host=self.host, port=self.port, log_level="warning")
        )

        async with anyio.create_task_group() as tg:
            tg.start_soon(server.serve)
            with anyio.move_on_after(5):
                while not server.started:
                    await anyio.sleep(0.05)
            opened = await anyio.to_thread.run_sync(self._open_browser, authorize_url)
            if not opened:
                print(
                    "Could not open a browser. Visit this URL to sign in:\n"
                    f"  {authorize_url}",
                    file=sys.stderr,
                )
            with anyio.move_on_after(self.timeout):
                await done.wait()
            server.should_exit = True

        if not results:
            _LOG.info("No redirect received within %ss; treating login as cancelled", self.timeout)
            return LoginResult.cancelled()
        return results[0]

    def clear_cookies(self) -> None:
        """Open the provider logout URL (fire-and-forget) to end the SSO session."""
        if not self.logout_url:
            return
        if not self._open_browser(self.logout_url):
            _LOG.warning("Could not open browser for logout")


def logout_url_for(domain: str, client_id: str, return_to: str | None = None) -> str:
    """Build the tenant's ``/v2/logout`` URL."""
    params = {"client_id": client_id}
    if return_to:
        params["returnTo"] = return_to
    return f"https://{domain}/v2/logout?{urlencode(params)}"
