"""
Public surface of the engine.

Eventer composes a HandlerRegistry and a Dispatcher. Chainable calls return
the host, which is the engine itself unless a host object was given (see
``eventer.host.extend``).

Example:
    emitter = Eventer()
    emitter.on("pipe", lambda v: v + 1).on("pipe", lambda v: v * 2)

    await emitter.emit("pipe", 1)           # [2, 2]
    await emitter.emit_reduce("pipe", 1)    # 4
    emitter.emit_sync("pipe", 1)            # emitter

    @emitter.on("ready")
    def announce():
        ...
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from eventer.config import DEFAULT_SETTINGS, EventerSettings, Placement, Protocol
from eventer.core.caller import describe_caller
from eventer.core.dispatcher import Dispatcher
from eventer.core.once import make_once
from eventer.core.registry import Handler, HandlerRegistry, as_names

Events = str | Iterable[str]


class Eventer:
    """
    In-process publish/subscribe engine.

    Can be used directly, subclassed, or attached to another object with
    ``extend``.
    """

    def __init__(self, settings: EventerSettings | None = None, *, host: Any = None):
        """
        Args:
            settings: Engine configuration, DEFAULT_SETTINGS when omitted
            host: Object returned by chainable calls, defaults to the engine
        """
        self.settings = settings or DEFAULT_SETTINGS
        self._host = self if host is None else host
        self._registry = HandlerRegistry()
        self._dispatcher = Dispatcher(self._registry, self.settings, self._host)

    @property
    def host(self) -> Any:
        return self._host

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def on(
        self,
        events: Events,
        callback: Handler | None = None,
        *,
        prereqs: Iterable[str] = (),
        source: str | None = None,
        order: Placement | str = Placement.APPEND,
    ) -> Any:
        """
        Register ``callback`` for one or more events.

        Args:
            events: Event name or iterable of names
            callback: Handler; omit to use as a decorator
            prereqs: Dependency labels kept on the record (not enforced)
            source: Diagnostic origin, defaults to the calling file and line
            order: APPEND (default) or PREPEND within each bucket

        Returns:
            The host, for chaining (the decorator returns the function)
        """
        origin = source or describe_caller().id
        if callback is None:
            def decorator(fn: Handler) -> Handler:
                self._registry.register(events, fn, prereqs=prereqs, origin=origin, order=order)
                return fn

            return decorator

        self._registry.register(events, callback, prereqs=prereqs, origin=origin, order=order)
        return self._host

    def off(self, events: Events, callback: Handler | None = None) -> Any:
        """Remove ``callback`` (or every handler when omitted) from the events."""
        self._registry.unregister(events, callback)
        return self._host

    def once(
        self,
        events: Events,
        callback: Handler,
        *,
        prereqs: Iterable[str] = (),
        source: str | None = None,
    ) -> Any:
        """Register ``callback`` to run at most once across all ``events``."""
        origin = source or describe_caller().id
        names = as_names(events)
        wrapper = make_once(self._registry, names, callback)
        self._registry.register(names, wrapper, prereqs=prereqs, origin=origin)
        return self._host

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def emit(self, event: str, *args: Any, protocol: Protocol | str | None = None) -> Any:
        """
        Fire ``event`` with ``args``.

        Returns:
            An awaitable for the parallel (default) and reduce protocols,
            the host for the sync protocol. Inside a running loop the
            awaitable is an already scheduled Task.
        """
        return self._dispatcher.dispatch(event, args, protocol)

    def emit_reduce(self, event: str, *args: Any) -> Any:
        """Fire ``event`` sequentially, threading the first argument; awaitable."""
        return self._dispatcher.dispatch(event, args, Protocol.REDUCE)

    def emit_sync(self, event: str, *args: Any) -> Any:
        """Fire ``event`` synchronously; returns the host."""
        return self._dispatcher.dispatch(event, args, Protocol.SYNC)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def listener_count(self, event: str) -> int:
        return self._registry.listener_count(event)

    def event_names(self) -> set[str]:
        return self._registry.event_names()
