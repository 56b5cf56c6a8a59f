"""Clock abstraction for testable time handling in the auth client.

This module defines a `Clock` protocol representing callables that return the
current UNIX timestamp as ``float``.  Expiry decisions inside the auth0_client
package depend on an injected ``Clock`` instance rather than calling
``time.time()`` directly, so tests can freeze time.

Example
-------
>>> from auth0_client.clock import default_clock
>>> now = default_clock()
>>> isinstance(now, float)
True
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Callable protocol returning *seconds* since the UNIX epoch."""

    def __call__(self) -> float: ...


def default_clock() -> float:
    """Default implementation that delegates to ``time.time()``."""
    return time.time()


def fixed_clock(now: float) -> Clock:
    """Return a clock frozen at *now* (handy for callers replaying sessions)."""
    return lambda now=now: now
