"""
An emitter that doubles as a deferred result.

Deferred owns one future and settles it from two reserved events: ``end``
resolves it, ``error`` rejects it. The first settlement wins; later ones are
ignored. The object is awaitable:

    job = Deferred()
    job.on("progress", report)
    ...
    job.resolve(42)            # or: job.emit_sync("end", 42)
    value = await job          # 42
"""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from typing import Any

from eventer.config import EventerSettings
from eventer.emitter import Eventer
from eventer.errors import EventerError
from eventer.logging_config import get_logger

logger = get_logger(__name__)

RESOLVE_EVENT = "end"
REJECT_EVENT = "error"


class DeferredRejected(EventerError):
    """Wraps a rejection reason that is not itself an exception."""

    def __init__(self, reason: Any):
        self.reason = reason
        super().__init__(f"Deferred rejected: {reason!r}")


class Deferred(Eventer):
    """Eventer whose ``end``/``error`` events settle an owned future."""

    def __init__(self, settings: EventerSettings | None = None, *, host: Any = None):
        super().__init__(settings, host=host)
        self._outcome: tuple[bool, Any] | None = None
        self._future: asyncio.Future | None = None
        self.on(RESOLVE_EVENT, self._on_end, source="deferred")
        self.on(REJECT_EVENT, self._on_error, source="deferred")

    @property
    def settled(self) -> bool:
        return self._outcome is not None

    def resolve(self, value: Any = None) -> Any:
        """Fire ``end`` with ``value``; returns the host."""
        return self.emit_sync(RESOLVE_EVENT, value)

    def reject(self, error: Any) -> Any:
        """Fire ``error`` with ``error``; returns the host."""
        return self.emit_sync(REJECT_EVENT, error)

    def promise(self) -> asyncio.Future:
        """
        The owned future, created on first use.

        Uses ``settings.future_factory`` when set, otherwise the running loop.
        """
        if self._future is None:
            factory = self.settings.future_factory or asyncio.get_running_loop().create_future
            self._future = factory()
            if self._outcome is not None:
                self._apply()
        return self._future

    def __await__(self) -> Generator[Any, None, Any]:
        return self.promise().__await__()

    def _on_end(self, value: Any = None) -> None:
        self._settle(True, value)

    def _on_error(self, error: Any = None) -> None:
        self._settle(False, error)

    def _settle(self, ok: bool, value: Any) -> None:
        if self._outcome is not None:
            logger.debug("deferred_already_settled", ok=ok)
            return
        self._outcome = (ok, value)
        if self._future is not None:
            self._apply()

    def _apply(self) -> None:
        future = self._future
        if future is None or future.done() or self._outcome is None:
            return
        ok, value = self._outcome
        if ok:
            future.set_result(value)
        elif isinstance(value, BaseException):
            future.set_exception(value)
        else:
            future.set_exception(DeferredRejected(value))
