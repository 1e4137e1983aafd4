"""
Exception taxonomy for the dispatch engine.

- UsageError: the caller used the API incorrectly (raised synchronously)
- UnknownEventError: emit on a name with no listeners under strict settings
- HandlerFailure: a registered handler raised or its awaitable failed
"""

from __future__ import annotations


class EventerError(Exception):
    """Base class for all engine errors."""


class UsageError(EventerError):
    """Raised when the engine is called in a way its contract forbids."""


class UnknownEventError(EventerError):
    """Raised when emitting on an event with zero listeners in strict mode."""

    def __init__(self, event: str, message: str | None = None):
        self.event = event
        self.message = message or f'Attempt to emit on unknown event "{event}"'
        super().__init__(self.message)


class HandlerFailure(EventerError):
    """
    A handler's unit of work failed.

    Attributes:
        event: Event name being dispatched
        origin: Registration origin of the failing handler
        error: The original exception (also chained as ``__cause__``)
    """

    def __init__(self, event: str, origin: str, error: BaseException):
        self.event = event
        self.origin = origin
        self.error = error
        self.message = f'Handler for "{event}" from {origin} failed: {error!r}'
        super().__init__(self.message)
