"""Headless launcher: the user opens the URL and pastes the redirect back.

Useful over SSH or in containers where no browser can be started.  An empty
line (or EOF) cancels the login.
"""

from __future__ import annotations

import sys
from typing import Callable, TextIO

import anyio.to_thread

from auth0_client.launchers.base import (
    LoginResult,
    parse_redirect_params,
    result_from_redirect,
    state_from_url,
)


class ManualLoginLauncher:
    """Print the authorize URL and read the final redirect URL from a stream."""

    def __init__(
        self,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout

    def _prompt(self, authorize_url: str, callback_url: str, title: str | None) -> str:
        out = self._stdout or sys.stdout
        inp = self._stdin or sys.stdin
        if title:
            print(title, file=out)
        print("Open this URL in a browser and sign in:", file=out)
        print(f"  {authorize_url}", file=out)
        print(
            f"Then paste the full URL you were redirected to (starts with {callback_url}):",
            file=out,
        )
        out.flush()
        return inp.readline().strip()

    async def launch(
        self, authorize_url: str, callback_url: str, *, title: str | None = None
    ) -> LoginResult:
        prompt: Callable[[], str] = lambda: self._prompt(authorize_url, callback_url, title)  # noqa: E731
        pasted = await anyio.to_thread.run_sync(prompt)
        if not pasted:
            return LoginResult.cancelled()
        if not pasted.startswith(callback_url):
            return LoginResult.failed("pasted URL does not match the callback URL")
        return result_from_redirect(
            parse_redirect_params(pasted), state_from_url(authorize_url)
        )

    def clear_cookies(self) -> None:
        """The user's browser is out of reach; nothing to clear."""
