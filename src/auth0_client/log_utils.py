"""Structured logging helpers for auth client components.

This module purposefully restricts **which** contextual attributes are attached
to log records in order to avoid accidentally leaking secrets.  All helpers
ONLY inject the following *non-sensitive* fields:

- ``client_id``      – The application client id (first 8 chars kept)
- ``connection``     – Identity-provider connection name
- ``grant_type``     – Grant used for the current token request (URN grants
  shortened to their last segment)
- ``correlation_id`` – Optional caller-provided request identifier

Usage
-----
>>> from auth0_client.log_utils import get_auth_logger
>>> log = get_auth_logger(
...     base_logger_name="auth0-client.client",
...     client_id="2f1c0b9e8a7d6c5b4a39",
...     connection="Username-Password-Authentication",
... )
>>> log.info("Starting login")
INFO auth0-client.client client_id=2f1c0b9e connection=Username-Password-Authentication ...

The adapter is a thin wrapper around :class:`logging.LoggerAdapter`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, MutableMapping


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return *value* with everything after the first *keep* chars masked."""
    if not value:
        return "<empty>"
    if len(value) <= keep:
        return "*" * len(value)
    return f"{value[:keep]}****"


def _short_grant(grant_type: str) -> str:
    # urn:ietf:params:oauth:grant-type:jwt-bearer -> jwt-bearer
    return grant_type.rsplit(":", 1)[-1]


# client_id is cut to its first 8 chars
_CONTEXT_FORMATTERS: dict[str, Callable[[str], str]] = {
    "client_id": lambda value: value[:8],
    "connection": str,
    "grant_type": _short_grant,
    "correlation_id": str,
}


class _AuthLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted auth context into log records."""

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        context = {
            key: fmt(str(extra[key]))
            for key, fmt in _CONTEXT_FORMATTERS.items()
            if extra and extra.get(key)
        }
        super().__init__(logger, context)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        # call-site extras win over the bound context
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_auth_logger(
    *,
    base_logger_name: str = "auth0-client",
    client_id: str | None = None,
    connection: str | None = None,
    grant_type: str | None = None,
    correlation_id: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with auth context."""
    logger = logging.getLogger(base_logger_name)
    return _AuthLoggerAdapter(
        logger,
        {
            "client_id": client_id,
            "connection": connection,
            "grant_type": grant_type,
            "correlation_id": correlation_id,
        },
    )
