"""
Handler registry: event name -> ordered bucket of handler records.

Buckets are immutable tuples. Every insert or removal swaps in a new tuple
under the registry lock, so a dispatch holding a snapshot keeps iterating the
bucket it started with.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from eventer.config import META_NAMES, Placement
from eventer.logging_config import get_logger

logger = get_logger(__name__)

Handler = Callable[..., Any]


@dataclass(frozen=True)
class HandlerRecord:
    """
    One registered subscription.

    Attributes:
        event: Event name this record belongs to
        callback: Callable invoked with the dispatch arguments
        prereqs: Dependency labels, stored but not consulted by dispatch
        origin: Where the registration happened, for diagnostics only
        order: Placement used when the record was inserted
    """

    event: str
    callback: Handler
    prereqs: tuple[str, ...] = ()
    origin: str = "unknown"
    order: Placement = Placement.APPEND

    def matches(self, callback: Handler) -> bool:
        """True if this record was registered for ``callback``, directly or via once()."""
        if self.callback == callback:
            return True
        return getattr(self.callback, "listener", None) == callback


def as_names(events: str | Iterable[str]) -> list[str]:
    """Normalise one event name or an iterable of names into a list."""
    if isinstance(events, str):
        return [events]
    return list(events)


class HandlerRegistry:
    """Owns every HandlerRecord; the only shared mutable state of an engine."""

    def __init__(self) -> None:
        self._buckets: dict[str, tuple[HandlerRecord, ...]] = {}
        self._lock = threading.RLock()

    def register(
        self,
        events: str | Iterable[str],
        callback: Handler,
        *,
        prereqs: Iterable[str] = (),
        origin: str = "unknown",
        order: Placement | str = Placement.APPEND,
    ) -> list[HandlerRecord]:
        """
        Add one record per event name.

        Args:
            events: Event name or iterable of names
            callback: Handler to invoke on dispatch
            prereqs: Optional dependency labels (informational)
            origin: Diagnostic label of the registration site
            order: APPEND (default) or PREPEND

        Returns:
            The records created, one per name
        """
        placement = Placement(order)
        prereqs = tuple(prereqs)
        created: list[HandlerRecord] = []

        with self._lock:
            for event in as_names(events):
                record = HandlerRecord(
                    event=event,
                    callback=callback,
                    prereqs=prereqs,
                    origin=origin,
                    order=placement,
                )
                bucket = self._buckets.get(event, ())
                if placement is Placement.PREPEND:
                    self._buckets[event] = (record, *bucket)
                else:
                    self._buckets[event] = (*bucket, record)
                created.append(record)

                logger.debug(
                    "listener_registered",
                    event_name=event,
                    origin=origin,
                    order=placement.value,
                    prereqs=list(prereqs) or None,
                )

        return created

    def unregister(self, events: str | Iterable[str], callback: Handler | None = None) -> int:
        """
        Remove records from the named buckets.

        With ``callback`` only matching records go, the rest keep their order.
        Without it the whole bucket is cleared. Unknown names are a no-op.

        Returns:
            Number of records removed
        """
        removed = 0
        with self._lock:
            for event in as_names(events):
                bucket = self._buckets.get(event)
                if bucket is None:
                    continue
                if callback is None:
                    kept: tuple[HandlerRecord, ...] = ()
                else:
                    kept = tuple(r for r in bucket if not r.matches(callback))
                removed += len(bucket) - len(kept)
                self._buckets[event] = kept

                logger.debug("listener_removed", event_name=event, removed=len(bucket) - len(kept))

        return removed

    def snapshot(self, event: str) -> tuple[HandlerRecord, ...]:
        """Current bucket for ``event``; immune to later mutation."""
        return self._buckets.get(event, ())

    def listener_count(self, event: str) -> int:
        return len(self._buckets.get(event, ()))

    def event_names(self) -> set[str]:
        """Names that have, or ever had, a bucket. Meta names are excluded."""
        with self._lock:
            return {name for name in self._buckets if name not in META_NAMES}
