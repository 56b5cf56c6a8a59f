"""Interactive login launchers, one per host environment."""

from __future__ import annotations

from .base import (  # noqa: F401
    InteractiveLoginLauncher,
    LoginResult,
    LoginStatus,
    parse_redirect_params,
    result_from_redirect,
)
from .browser import BrowserLoginLauncher, logout_url_for  # noqa: F401
from .manual import ManualLoginLauncher  # noqa: F401

__all__ = [
    "InteractiveLoginLauncher",
    "LoginResult",
    "LoginStatus",
    "parse_redirect_params",
    "result_from_redirect",
    "BrowserLoginLauncher",
    "ManualLoginLauncher",
    "logout_url_for",
]
