"""
Dispatch of one event to its bucket under a chosen protocol.

Protocols:
- PARALLEL: every handler runs as its own task; results come back in bucket
  order. The first failure to settle fails the dispatch; siblings keep running
  but their outcomes are dropped.
- REDUCE: handlers run one after another. A non-None result replaces the first
  argument for the next handler; the final first argument is the result.
- SYNC: handlers run in the caller's frame. Returning an awaitable breaks the
  contract (UsageError under strict settings). Returns the host.

Every dispatch of an ordinary event is wrapped by the meta hooks: listeners
of META_BEFORE and META_AFTER receive ``(event, *args)`` before and after the
event's own handlers. Hooks without listeners are skipped. Around a SYNC
dispatch the hooks are called in order in the caller's frame; an awaitable a
hook returns is scheduled on the running loop and not waited for (its failure
is logged as ``meta_hook_failed``). With no loop running the hooks fall under
the SYNC contract like any other handler.

Preconditions (event name type, unknown events) are checked synchronously in
``dispatch`` so they raise before any awaitable is handed back. With a loop
running, PARALLEL and REDUCE dispatches start at once as tasks, so an emit
that is never awaited still reaches its handlers. Without one the caller gets
a coroutine to run.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Sequence
from contextvars import ContextVar
from typing import Any

from eventer.config import META_AFTER, META_BEFORE, META_NAMES, EventerSettings, Protocol, coerce_protocol
from eventer.core.monitor import monitor_pending
from eventer.core.registry import HandlerRecord, HandlerRegistry
from eventer.errors import HandlerFailure, UnknownEventError, UsageError
from eventer.logging_config import get_logger

logger = get_logger(__name__)

# Protocol of the dispatch currently running handlers in this context.
active_protocol: ContextVar[Protocol | None] = ContextVar("active_protocol", default=None)


async def _resolved(value: Any) -> Any:
    return value


def _schedule(coro: Any) -> Any:
    """Start ``coro`` as a task on the running loop; hand it back as is without one."""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return coro
    return asyncio.ensure_future(coro)


def _discard(result: Any) -> None:
    """Close an un-awaited coroutine so it never runs."""
    if inspect.iscoroutine(result):
        result.close()


class Dispatcher:
    """Runs buckets from a HandlerRegistry; owns no state of its own."""

    def __init__(self, registry: HandlerRegistry, settings: EventerSettings, host: Any):
        self._registry = registry
        self._settings = settings
        self._host = host
        self._observers: set[asyncio.Future] = set()

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def dispatch(self, event: str, args: Sequence[Any] = (), protocol: Protocol | str | None = None) -> Any:
        """
        Fire ``event`` with ``args``.

        Returns:
            A Task (running loop) or coroutine for PARALLEL and REDUCE, the
            host for SYNC

        Raises:
            UsageError: ``event`` is not a non-empty string, or unknown protocol
            UnknownEventError: no listeners and ``emit_on_unknown_raises`` is set
        """
        if not isinstance(event, str) or not event:
            raise UsageError(f"Event name must be a non-empty string, got {event!r}")
        protocol = coerce_protocol(protocol or self._settings.default_protocol)
        args = tuple(args)

        records = self._registry.snapshot(event)
        if not records:
            if self._settings.emit_on_unknown_raises:
                raise UnknownEventError(event)
            logger.debug("emit_no_listeners", event_name=event, protocol=protocol.value)
            if protocol is Protocol.SYNC:
                return self._host
            return _schedule(_resolved(args[0] if args else None))

        logger.debug(
            "emit_dispatching",
            event_name=event,
            listeners=len(records),
            protocol=protocol.value,
            origins=[r.origin for r in records],
        )

        if protocol is Protocol.SYNC:
            return self._run_sync(event, records, args)
        if protocol is Protocol.REDUCE:
            return _schedule(self._wrap_meta(event, args, protocol, self._reduce(event, records, args)))
        return _schedule(self._wrap_meta(event, args, protocol, self._parallel(event, records, args)))

    # -------------------------------------------------------------------------
    # Asynchronous protocols
    # -------------------------------------------------------------------------

    async def _settle(self, event: str, record: HandlerRecord, args: tuple[Any, ...]) -> Any:
        try:
            result = record.callback(*args)
            if self._settings.is_deferred(result):
                result = await result
        except Exception as exc:
            raise HandlerFailure(event, record.origin, exc) from exc
        return result

    async def _parallel(self, event: str, records: Sequence[HandlerRecord], args: tuple[Any, ...]) -> list[Any]:
        tasks = [asyncio.ensure_future(self._settle(event, r, args)) for r in records]
        async with monitor_pending(event, tasks, records, self._settings.monitor_interval):
            return list(await asyncio.gather(*tasks))

    async def _reduce(self, event: str, records: Sequence[HandlerRecord], args: tuple[Any, ...]) -> Any:
        current = list(args)
        for record in records:
            result = await self._settle(event, record, tuple(current))
            if result is None:
                continue
            if current:
                current[0] = result
            else:
                current.append(result)
        return current[0] if current else None

    async def _meta(self, hook: str, event: str, args: tuple[Any, ...]) -> None:
        if event in META_NAMES:
            return
        records = self._registry.snapshot(hook)
        if not records:
            return
        await self._parallel(hook, records, (event, *args))

    async def _wrap_meta(self, event: str, args: tuple[Any, ...], protocol: Protocol, body: Any) -> Any:
        token = active_protocol.set(protocol)
        try:
            try:
                await self._meta(META_BEFORE, event, args)
            except BaseException:
                body.close()
                raise
            result = await body
            await self._meta(META_AFTER, event, args)
        finally:
            active_protocol.reset(token)
        logger.debug("emit_dispatched", event_name=event)
        return result

    # -------------------------------------------------------------------------
    # Synchronous protocol
    # -------------------------------------------------------------------------

    def _call_all_sync(self, event: str, records: Sequence[HandlerRecord], args: tuple[Any, ...]) -> None:
        for record in records:
            try:
                result = record.callback(*args)
            except Exception as exc:
                raise HandlerFailure(event, record.origin, exc) from exc

            if not self._settings.is_deferred(result):
                continue
            _discard(result)
            if self._settings.strict_sync:
                raise UsageError(
                    f'Handler for "{event}" from {record.origin} returned a deferred result '
                    "during a synchronous emit"
                )
            logger.warning("sync_deferred_ignored", event_name=event, origin=record.origin)

    async def _observe(self, hook: str, record: HandlerRecord, pending: Any) -> None:
        try:
            await pending
        except Exception as exc:
            logger.error("meta_hook_failed", event_name=hook, origin=record.origin, error=repr(exc))

    def _meta_sync(self, hook: str, event: str, args: tuple[Any, ...]) -> None:
        if event in META_NAMES:
            return
        records = self._registry.snapshot(hook)
        if not records:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self._call_all_sync(hook, records, (event, *args))
            return

        for record in records:
            try:
                result = record.callback(event, *args)
            except Exception as exc:
                raise HandlerFailure(hook, record.origin, exc) from exc
            if self._settings.is_deferred(result):
                task = asyncio.ensure_future(self._observe(hook, record, result))
                self._observers.add(task)
                task.add_done_callback(self._observers.discard)

    def _run_sync(self, event: str, records: Sequence[HandlerRecord], args: tuple[Any, ...]) -> Any:
        token = active_protocol.set(Protocol.SYNC)
        try:
            self._meta_sync(META_BEFORE, event, args)
            self._call_all_sync(event, records, args)
            self._meta_sync(META_AFTER, event, args)
        finally:
            active_protocol.reset(token)
        logger.debug("emit_dispatched", event_name=event)
        return self._host
