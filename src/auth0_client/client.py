"""AuthClient – token/session lifecycle against an Auth0-style tenant.

The client logs a user in (resource-owner password grant or browser redirect),
exchanges ID/refresh tokens for fresh ID tokens through the delegation
endpoint, checks ID-token expiry and logs out.  The outcome of a login is the
:class:`~auth0_client.models.Session` exposed as :attr:`AuthClient.current_user`.

Collaborators are injected and only used through their protocols:

* :class:`~auth0_client.transport.HttpExchange` for every network round-trip,
* :class:`~auth0_client.device.DeviceIdProvider` when offline access is asked,
* :class:`~auth0_client.launchers.InteractiveLoginLauncher` for browser login.

Concurrency
-----------
The session is a single-owner cell.  At most one session-mutating call
(login, delegation, refresh, renew, logout) may be in flight per client;
overlapping calls race and are not serialised here.

Errors are raised as :class:`~auth0_client.errors.AuthClientError` subclasses;
wrap a call in :func:`auth0_client.outcome.capture` to branch on kind instead.
"""

from __future__ import annotations

import logging
from typing import Any, Final, Mapping
from urllib.parse import quote, urlencode

from auth0_client import token_validator
from auth0_client.clock import Clock, default_clock
from auth0_client.config import DEFAULT_TIMEOUT, ClientConfig
from auth0_client.device import DeviceIdProvider, PlatformDeviceIdProvider
from auth0_client.errors import (
    AuthenticationError,
    InvalidStateError,
    LoginCancelled,
    ProtocolError,
    TransportError,
)
from auth0_client.launchers.base import InteractiveLoginLauncher, LoginStatus
from auth0_client.log_utils import get_auth_logger, mask_sensitive
from auth0_client.models import Session
from auth0_client.scope import DEFAULT_SCOPE, scope_has_offline_access, with_offline_access
from auth0_client.state import generate_state
from auth0_client.transport import HttpExchange, HttpResponse, HttpxExchange

_LOG = logging.getLogger("auth0-client.client")

RESOURCE_OWNER_PATH: Final[str] = "/oauth/ro"
DELEGATION_PATH: Final[str] = "/delegation"
USER_INFO_PATH: Final[str] = "/userinfo"
AUTHORIZE_PATH: Final[str] = "/authorize"
LOGIN_WIDGET_PATH: Final[str] = "/login/"

PASSWORD_GRANT: Final[str] = "password"
JWT_BEARER_GRANT: Final[str] = "urn:ietf:params:oauth:grant-type:jwt-bearer"


def _drop_empty(params: Mapping[str, Any]) -> dict[str, str]:
    """Remove keys whose value is ``None`` or ``""``; absent beats empty on the wire."""
    return {k: str(v) for k, v in params.items() if v is not None and v != ""}


class AuthClient:
    """Authenticate users of one application against one tenant."""

    def __init__(
        self,
        domain: str,
        client_id: str,
        *,
        callback_url: str | None = None,
        http: HttpExchange | None = None,
        device_id_provider: DeviceIdProvider | None = None,
        launcher: InteractiveLoginLauncher | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Clock = default_clock,
    ) -> None:
        self.config = ClientConfig(
            domain=domain, client_id=client_id, callback_url=callback_url, timeout=timeout
        )
        self._owns_http = http is None
        self.http: HttpExchange = http or HttpxExchange(timeout=timeout)
        self.device_id_provider: DeviceIdProvider = (
            device_id_provider or PlatformDeviceIdProvider()
        )
        self.launcher = launcher
        self._clock = clock
        self._session: Session | None = None

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "AuthClient":
        return cls(
            config.domain,
            config.client_id,
            callback_url=config.callback_url,
            timeout=config.timeout,
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # Session cell                                                        #
    # ------------------------------------------------------------------ #
    @property
    def current_user(self) -> Session | None:
        """The active session, or ``None`` when logged out."""
        return self._session

    def restore_session(self, session: Session) -> None:
        """Adopt a session the caller persisted from an earlier run."""
        if not session.id_token:
            raise InvalidStateError("Cannot restore a session without an id_token.")
        self._session = session

    @property
    def client_id(self) -> str:
        return self.config.client_id

    @property
    def callback_url(self) -> str:
        """Redirect URI used for interactive login.

        Explicit configuration wins, then a launcher that dictates its own
        callback (loopback receivers), then ``https://{domain}/mobile``.
        """
        if self.config.callback_url:
            return self.config.callback_url
        launcher_url = getattr(self.launcher, "callback_url", None)
        if isinstance(launcher_url, str) and launcher_url:
            return launcher_url
        return self.config.resolved_callback_url

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    # ------------------------------------------------------------------ #
    # Login                                                               #
    # ------------------------------------------------------------------ #
    async def login(
        self,
        connection: str,
        username: str,
        password: str,
        *,
        with_refresh_token: bool = False,
        scope: str = DEFAULT_SCOPE,
    ) -> Session:
        """Log in with the resource-owner password grant.

        Raises
        ------
        AuthenticationError
            The provider answered with an ``error``.
        ProtocolError
            The response carried no ``access_token``.
        TransportError
            Network failure, or the user-info fetch did not return 200.
        """
        log = get_auth_logger(
            base_logger_name="auth0-client.client",
            client_id=self.client_id,
            connection=connection,
            grant_type=PASSWORD_GRANT,
        )
        scope = with_offline_access(scope, with_refresh_token)
        params: dict[str, str] = {
            "client_id": self.client_id,
            "connection": connection,
            "username": username,
            "password": password,
            "grant_type": PASSWORD_GRANT,
            "scope": scope,
        }
        if scope_has_offline_access(scope):
            params["device"] = await self.device_id_provider.get_device_id()

        log.debug("Requesting token with params=%s", sorted(params))
        resp = await self.http.request("POST", self._url(RESOURCE_OWNER_PATH), params)
        data = self._parse_token_response(resp)

        if not data.get("access_token"):
            raise ProtocolError(
                "Expected access_token in access token response, but did not receive one."
            )

        session = await self._establish_session(data, best_effort_profile=False)
        log.info("Logged in user=%s", mask_sensitive(username, 3))
        return session

    async def build_authorize_url(self, connection: str = "", scope: str = DEFAULT_SCOPE) -> str:
        """Return the authorize (or login widget) URL with a fresh ``state``.

        *scope* is used verbatim; apply :func:`with_offline_access` first when a
        refresh token is wanted.
        """
        if connection:
            base = self._url(AUTHORIZE_PATH)
            query: dict[str, str] = {
                "client_id": self.client_id,
                "redirect_uri": self.callback_url,
                "response_type": "token",
                "connection": connection,
                "scope": scope,
            }
        else:
            base = self._url(LOGIN_WIDGET_PATH)
            query = {
                "client": self.client_id,
                "redirect_uri": self.callback_url,
                "response_type": "token",
                "scope": scope,
            }

        if scope_has_offline_access(scope):
            query["device"] = await self.device_id_provider.get_device_id()
        query["state"] = generate_state()
        return f"{base}?{urlencode(query, quote_via=quote)}"

    async def login_interactive(
        self,
        connection: str = "",
        *,
        with_refresh_token: bool = False,
        scope: str = DEFAULT_SCOPE,
        title: str | None = None,
    ) -> Session:
        """Log in through the configured :class:`InteractiveLoginLauncher`.

        Raises
        ------
        InvalidStateError
            No launcher is configured.
        LoginCancelled
            The user abandoned the flow.
        AuthenticationError
            The launcher reported an error.
        """
        if self.launcher is None:
            raise InvalidStateError("An interactive login launcher must be configured.")

        log = get_auth_logger(
            base_logger_name="auth0-client.client",
            client_id=self.client_id,
            connection=connection or None,
            grant_type="implicit",
        )
        scope = with_offline_access(scope, with_refresh_token)
        authorize_url = await self.build_authorize_url(connection, scope)

        log.debug("Launching interactive login")
        result = await self.launcher.launch(authorize_url, self.callback_url, title=title)

        if result.status is LoginStatus.CANCELLED:
            log.info("Interactive login cancelled by user")
            raise LoginCancelled()
        if result.status is LoginStatus.ERROR:
            raise AuthenticationError(
                f"Error authenticating: {result.error or 'unknown error'}",
                error=result.error,
            )

        session = await self._establish_session(
            result.account_properties, best_effort_profile=True
        )
        log.info("Interactive login completed")
        return session

    # ------------------------------------------------------------------ #
    # Delegation, renew & refresh                                         #
    # ------------------------------------------------------------------ #
    async def get_delegation_token(
        self,
        api: str = "",
        id_token: str = "",
        refresh_token: str = "",
        target_client_id: str = "",
        options: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Exchange an ID token *or* a refresh token at the delegation endpoint.

        With neither token given, the current session's ID token is used.  When
        the response carries an ``id_token`` the session is updated (or created,
        seeded with *refresh_token*).  The full parsed response is returned.
        """
        if id_token and refresh_token:
            raise InvalidStateError(
                "You must provide either the id_token parameter or the "
                "refresh_token parameter, not both."
            )
        if not id_token and not refresh_token:
            if self._session is None or not self._session.id_token:
                raise InvalidStateError(
                    "You need to login first or specify a value for id_token "
                    "or refresh_token parameter."
                )
            id_token = self._session.id_token

        params = dict(options or {})
        params.update(
            {
                "id_token": id_token,
                "api_type": api,
                "refresh_token": refresh_token,
                "target": target_client_id,
                "grant_type": JWT_BEARER_GRANT,
                "client_id": self.client_id,
            }
        )
        params = _drop_empty(params)

        log = get_auth_logger(
            base_logger_name="auth0-client.client",
            client_id=self.client_id,
            grant_type=JWT_BEARER_GRANT,
        )
        log.debug("Requesting delegation token with params=%s", sorted(params))
        resp = await self.http.request("POST", self._url(DELEGATION_PATH), params)
        data = self._parse_token_response(resp)

        new_id_token = data.get("id_token")
        if not new_id_token:
            return data

        if self._session is None:
            self._session = Session(refresh_token=refresh_token)
        self._session.id_token = str(new_id_token)
        log.info("Received delegated id_token (api=%s)", api or "-")
        return data

    async def renew_id_token(self, options: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Renew the (still valid) session ID token."""
        if self._session is None or not self._session.id_token:
            raise InvalidStateError("You need to login first.")

        opts = dict(options or {})
        opts.setdefault("scope", "passthrough")
        return await self.get_delegation_token(
            api="app", id_token=self._session.id_token, options=opts
        )

    async def refresh_token(
        self, refresh_token: str = "", options: Mapping[str, str] | None = None
    ) -> dict[str, Any]:
        """Mint a new ID token from *refresh_token* or the session's one."""
        if not refresh_token:
            if self._session is None or not self._session.refresh_token:
                raise InvalidStateError(
                    "The current user's refresh token could not be retrieved "
                    "or no refresh token was provided as parameter."
                )
            refresh_token = self._session.refresh_token

        return await self.get_delegation_token(
            api="app", refresh_token=refresh_token, options=options
        )

    # ------------------------------------------------------------------ #
    # Expiry & logout                                                     #
    # ------------------------------------------------------------------ #
    def has_token_expired(self) -> bool:
        """Return *True* if the session ID token's ``exp`` has passed."""
        if self._session is None or not self._session.id_token:
            raise InvalidStateError("You need to login first.")
        return token_validator.has_expired(self._session.id_token, clock=self._clock)

    def logout(self) -> None:
        """Forget the session and ask the launcher to drop browser cookies."""
        if self._session is None:
            return
        self._session = None
        if self.launcher is not None:
            self.launcher.clear_cookies()
        _LOG.info("Logged out")

    # ------------------------------------------------------------------ #
    # Resource management                                                 #
    # ------------------------------------------------------------------ #
    async def aclose(self) -> None:
        """Close the HTTP exchange if this client created it."""
        if self._owns_http and hasattr(self.http, "aclose"):
            await self.http.aclose()  # type: ignore[union-attr]

    async def __aenter__(self) -> "AuthClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---------------- internal helpers --------------------------------- #
    @staticmethod
    def _parse_token_response(resp: HttpResponse) -> dict[str, Any]:
        """Parse a token/delegation response, mapping provider errors."""
        try:
            data = resp.json()
        except ValueError:
            if not resp.ok:
                raise TransportError(
                    f"Token endpoint returned {resp.status_code}: {resp.text[:200]}",
                    status_code=resp.status_code,
                ) from None
            raise ProtocolError("Token endpoint returned a non-JSON body") from None

        if not isinstance(data, dict):
            raise ProtocolError("Token endpoint returned JSON that is not an object")
        if data.get("error"):
            raise AuthenticationError.from_response(data)
        if not resp.ok:
            raise TransportError(
                f"Token endpoint returned {resp.status_code}", status_code=resp.status_code
            )
        return data

    async def _fetch_profile(self, access_token: str) -> dict[str, Any]:
        url = f"{self._url(USER_INFO_PATH)}?{urlencode({'access_token': access_token})}"
        resp = await self.http.request("GET", url)
        if resp.status_code != 200:
            raise TransportError(
                f"User info endpoint returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        try:
            profile = resp.json()
        except ValueError:
            raise ProtocolError("User info endpoint returned a non-JSON body") from None
        if not isinstance(profile, dict):
            raise ProtocolError("User info endpoint returned JSON that is not an object")
        return profile

    async def _establish_session(
        self, account_properties: Mapping[str, Any], *, best_effort_profile: bool
    ) -> Session:
        """Fetch the profile, then replace the session in a single assignment."""
        props = dict(account_properties)
        access_token = str(props.get("access_token") or "")
        try:
            if not access_token:
                raise ProtocolError("No access_token available to fetch the user profile")
            props["profile"] = await self._fetch_profile(access_token)
        except Exception as exc:
            # interactive login keeps the session whatever the exchange raised
            if not best_effort_profile:
                raise
            _LOG.warning("Profile fetch failed; continuing without profile: %s", exc)

        session = Session.from_account_properties(props)
        self._session = session
        return session
