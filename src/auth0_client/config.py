"""Client configuration resolved from arguments or environment variables.

Environment variables
---------------------
AUTH0_DOMAIN
    Tenant domain, e.g. ``example.eu.auth0.com`` (scheme optional).
AUTH0_CLIENT_ID
    Application client id.
AUTH0_CALLBACK_URL
    Redirect URI for interactive login.  Defaults to
    ``https://{domain}/mobile``.
AUTH0_HTTP_TIMEOUT
    Seconds before an HTTP round-trip is abandoned (default ``30``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Final

logger = logging.getLogger("auth0-client.config")

DEFAULT_TIMEOUT: Final[float] = 30.0
DEFAULT_CALLBACK_PATH: Final[str] = "/mobile"


def normalize_domain(domain: str) -> str:
    """Strip scheme and trailing slashes so ``https://{domain}`` is well formed."""
    domain = (domain or "").strip()
    for scheme in ("https://", "http://"):
        if domain.lower().startswith(scheme):
            domain = domain[len(scheme) :]
    return domain.rstrip("/")


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Identity-provider coordinates for a single application."""

    domain: str
    client_id: str
    callback_url: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "domain", normalize_domain(self.domain))
        if not self.domain:
            raise ValueError("domain is required")
        if not self.client_id:
            raise ValueError("client_id is required")

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}"

    @property
    def resolved_callback_url(self) -> str:
        return self.callback_url or f"{self.base_url}{DEFAULT_CALLBACK_PATH}"

    @classmethod
    def from_env(cls, prefix: str = "AUTH0_") -> "ClientConfig":
        """Build a config from ``{prefix}DOMAIN``, ``{prefix}CLIENT_ID``, ...

        Raises
        ------
        ValueError
            If the domain or client id variable is missing, or the timeout is
            not a number.
        """
        domain = os.getenv(f"{prefix}DOMAIN", "")
        client_id = os.getenv(f"{prefix}CLIENT_ID", "")
        if not domain or not client_id:
            raise ValueError(
                f"{prefix}DOMAIN and {prefix}CLIENT_ID environment variables must be set"
            )

        raw_timeout = os.getenv(f"{prefix}HTTP_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ValueError(f"{prefix}HTTP_TIMEOUT must be a number") from None

        cfg = cls(
            domain=domain,
            client_id=client_id,
            callback_url=os.getenv(f"{prefix}CALLBACK_URL") or None,
            timeout=timeout,
        )
        logger.debug("Loaded client config for domain=%s from environment", cfg.domain)
        return cfg
