"""HTTP exchange collaborators.

The client treats HTTP as a single request/response cycle: method, URL and
optional form parameters in; status code and body text out.  Two adapters are
provided:

* :class:`HttpxExchange` – native async, backed by :class:`httpx.AsyncClient`.
  This is the default.
* :class:`RequestsExchange` – wraps a :class:`requests.Session` and runs the
  blocking call in a worker thread, for callers that already configure proxies,
  certificates or adapters on a requests session.

Both translate library exceptions into :class:`~auth0_client.errors.TransportError`.
Request bodies are never logged; only method, URL path and status are.
"""

from __future__ import annotations

import functools
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Protocol, runtime_checkable
from urllib.parse import urlsplit

import anyio.to_thread
import httpx
import requests

from auth0_client.config import DEFAULT_TIMEOUT
from auth0_client.errors import TransportError

_LOG = logging.getLogger("auth0-client.transport")


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and body text of a completed exchange."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse the body.  Raises :class:`ValueError` on invalid JSON."""
        return json.loads(self.text)


@runtime_checkable
class HttpExchange(Protocol):
    """Single request/response cycle; form-encodes *data* when given."""

    async def request(
        self, method: str, url: str, data: Mapping[str, str] | None = None
    ) -> HttpResponse: ...


def _path(url: str) -> str:
    # Query strings may carry access tokens (user-info endpoint).
    return urlsplit(url).path or "/"


class HttpxExchange:
    """:class:`HttpExchange` backed by :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=5.0),
            headers={"Accept": "application/json"},
        )

    async def request(
        self, method: str, url: str, data: Mapping[str, str] | None = None
    ) -> HttpResponse:
        try:
            resp = await self._client.request(
                method, url, data=dict(data) if data is not None else None
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {_path(url)} failed: {exc}") from exc
        _LOG.debug("%s %s -> %s", method, _path(url), resp.status_code)
        return HttpResponse(status_code=resp.status_code, text=resp.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxExchange":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class RequestsExchange:
    """:class:`HttpExchange` running a :class:`requests.Session` off the event loop."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._timeout = (5, timeout)

    async def request(
        self, method: str, url: str, data: Mapping[str, str] | None = None
    ) -> HttpResponse:
        call = functools.partial(
            self._session.request,
            method,
            url,
            data=dict(data) if data is not None else None,
            headers={"Accept": "application/json"},
            timeout=self._timeout,
        )
        try:
            resp = await anyio.to_thread.run_sync(call)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {_path(url)} failed: {exc}") from exc
        _LOG.debug("%s %s -> %s", method, _path(url), resp.status_code)
        return HttpResponse(status_code=resp.status_code, text=resp.text)

    async def aclose(self) -> None:
        if self._owns_session:
            self._session.close()
