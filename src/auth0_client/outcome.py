"""Explicit result channel for auth client operations.

Public :class:`~auth0_client.client.AuthClient` coroutines raise
:class:`~auth0_client.errors.AuthClientError` subclasses.  Callers that would
rather branch on a failure *kind* than on exception types wrap the call in
:func:`capture`:

>>> outcome = await capture(client.refresh_token())      # doctest: +SKIP
>>> if outcome.cancelled or outcome.kind is ErrorKind.INVALID_STATE:
...     ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar

from auth0_client.errors import AuthClientError, ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or an :class:`AuthClientError`, never both."""

    value: T | None = None
    error: AuthClientError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        """Failure kind, or ``None`` on success."""
        return self.error.kind if self.error is not None else None

    @property
    def cancelled(self) -> bool:
        return self.kind is ErrorKind.CANCELLED

    def unwrap(self) -> T:
        """Return the value or re-raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


async def capture(awaitable: Awaitable[T]) -> Outcome[T]:
    """Await *awaitable* and fold auth failures into an :class:`Outcome`.

    Only :class:`AuthClientError` is captured; programming errors propagate.
    """
    try:
        value = await awaitable
    except AuthClientError as exc:
        return Outcome(error=exc)
    return Outcome(value=value)
