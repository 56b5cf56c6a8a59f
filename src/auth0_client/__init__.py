"""Client-side OAuth/OpenID authentication helper for Auth0-style tenants.

Sub-modules
-----------
client
    :class:`AuthClient`, the login / delegation / refresh state machine.
models
    The :class:`Session` record produced by a successful login.
token_validator
    Unverified ID-token claim decoding and expiry checks.
scope
    Scope-string helpers (``offline_access`` handling).
state
    CSRF ``state`` generation for the redirect flow.
transport
    HTTP exchange protocol with httpx and requests adapters.
device
    Device identifier providers.
launchers
    Interactive login launchers (system browser, manual paste).
config
    :class:`ClientConfig` and environment loading.
errors / outcome
    Exception types with an :class:`ErrorKind`, and the :func:`capture`
    result wrapper.
log_utils
    Logging helpers that never emit secrets.

The most used objects are re-exported here for convenience.
"""

from __future__ import annotations

from .client import AuthClient  # noqa: F401
from .clock import Clock, default_clock  # noqa: F401
from .config import ClientConfig  # noqa: F401
from .device import DeviceIdProvider, PlatformDeviceIdProvider, StaticDeviceIdProvider  # noqa: F401
from .errors import (  # noqa: F401
    AuthClientError,
    AuthenticationError,
    ErrorKind,
    InvalidStateError,
    LoginCancelled,
    ProtocolError,
    TransportError,
)
from .launchers import (  # noqa: F401
    BrowserLoginLauncher,
    InteractiveLoginLauncher,
    LoginResult,
    LoginStatus,
    ManualLoginLauncher,
)
from .log_utils import get_auth_logger  # noqa: F401
from .models import Session  # noqa: F401
from .outcome import Outcome, capture  # noqa: F401
from .transport import HttpExchange, HttpResponse, HttpxExchange, RequestsExchange  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    # client
    "AuthClient",
    "ClientConfig",
    "Session",
    # clock
    "Clock",
    "default_clock",
    # collaborators
    "DeviceIdProvider",
    "PlatformDeviceIdProvider",
    "StaticDeviceIdProvider",
    "HttpExchange",
    "HttpResponse",
    "HttpxExchange",
    "RequestsExchange",
    "InteractiveLoginLauncher",
    "BrowserLoginLauncher",
    "ManualLoginLauncher",
    "LoginResult",
    "LoginStatus",
    # errors
    "AuthClientError",
    "AuthenticationError",
    "ErrorKind",
    "InvalidStateError",
    "LoginCancelled",
    "ProtocolError",
    "TransportError",
    "Outcome",
    "capture",
    # logging helpers
    "get_auth_logger",
]
