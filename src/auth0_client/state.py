"""State parameter helper for the browser redirect flow.

The *state* parameter protects the user against CSRF.  The client only
*generates* it; the interactive launcher compares the value echoed back on the
callback with the one embedded in the authorize URL.

The value is a fixed-length run of lowercase ASCII letters drawn from
:mod:`secrets`, so it never needs URL escaping.

Logging
-------
Only a masked prefix of the state is ever logged.
"""

from __future__ import annotations

import logging
import secrets
import string
from typing import Final

from auth0_client.log_utils import mask_sensitive

_LOG = logging.getLogger("auth0-client.state")

STATE_LENGTH: Final[int] = 16
_ALPHABET: Final[str] = string.ascii_lowercase


def generate_state(length: int = STATE_LENGTH) -> str:
    """Return a cryptographically random alphabetic state token.

    Raises
    ------
    ValueError
        If *length* is not positive.
    """
    if length <= 0:
        raise ValueError("state length must be positive")
    state = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    _LOG.debug("Generated state=%s", mask_sensitive(state, 3))
    return state
