"""
Engine configuration.

Settings are passed to each engine at construction time and never shared as
mutable global state. ``DEFAULT_SETTINGS`` is frozen; derive variants with
``dataclasses.replace`` or build one from the environment:

    settings = EventerSettings.from_env()
    emitter = Eventer(settings)
"""

from __future__ import annotations

import asyncio
import inspect
import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from eventer.errors import UsageError

META_BEFORE = "meta:preEmit"
META_AFTER = "meta:postEmit"
META_NAMES = frozenset({META_BEFORE, META_AFTER})


class Protocol(str, Enum):
    """
    Emission protocols.

    - PARALLEL: all handlers run concurrently, results collected in bucket order
    - REDUCE: handlers run in order, each non-None result replaces the first arg
    - SYNC: handlers run immediately in the caller's frame, no suspension
    """

    PARALLEL = "parallel"
    REDUCE = "reduce"
    SYNC = "sync"


class Placement(str, Enum):
    """Where a new handler lands in its bucket."""

    APPEND = "append"
    PREPEND = "prepend"


_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(value: str) -> bool:
    return value.strip().lower() in _TRUTHY


def coerce_protocol(value: Protocol | str) -> Protocol:
    if isinstance(value, Protocol):
        return value
    try:
        return Protocol(str(value).strip().lower())
    except ValueError:
        raise UsageError(f"Unknown emit protocol: {value!r}") from None


@dataclass(frozen=True)
class EventerSettings:
    """
    Configuration for one engine instance.

    Args:
        emit_on_unknown_raises: Raise UnknownEventError on emit with no listeners
        default_protocol: Protocol used when emit() is not given one
        strict_sync: Raise UsageError when a sync handler returns an awaitable
        is_deferred: Capability check deciding whether a result is deferred
        future_factory: Creates the future owned by a Deferred adapter
        monitor_interval: Seconds between pending-handler reports, None disables
        expose_methods: Methods attached to a host by extend()
    """

    emit_on_unknown_raises: bool = False
    default_protocol: Protocol = Protocol.PARALLEL
    strict_sync: bool = True
    is_deferred: Callable[[Any], bool] = inspect.isawaitable
    future_factory: Callable[[], asyncio.Future] | None = None
    monitor_interval: float | None = None
    expose_methods: tuple[str, ...] = (
        "emit",
        "emit_reduce",
        "emit_sync",
        "event_names",
        "listener_count",
        "off",
        "on",
        "once",
    )

    def __post_init__(self):
        object.__setattr__(self, "default_protocol", coerce_protocol(self.default_protocol))
        if self.monitor_interval is not None and self.monitor_interval <= 0:
            raise ValueError("monitor_interval must be > 0")
        if not callable(self.is_deferred):
            raise ValueError("is_deferred must be callable")

    @classmethod
    def from_env(cls, prefix: str = "EVENTER_", **overrides: Any) -> EventerSettings:
        """
        Build settings from environment variables.

        Reads ``{prefix}EMIT_ON_UNKNOWN_RAISES``, ``{prefix}DEFAULT_PROTOCOL``,
        ``{prefix}STRICT_SYNC`` and ``{prefix}MONITOR_INTERVAL``. Keyword
        overrides win over the environment.
        """
        values: dict[str, Any] = {}

        raw = os.getenv(f"{prefix}EMIT_ON_UNKNOWN_RAISES")
        if raw is not None:
            values["emit_on_unknown_raises"] = _env_bool(raw)

        raw = os.getenv(f"{prefix}DEFAULT_PROTOCOL")
        if raw:
            values["default_protocol"] = coerce_protocol(raw)

        raw = os.getenv(f"{prefix}STRICT_SYNC")
        if raw is not None:
            values["strict_sync"] = _env_bool(raw)

        raw = os.getenv(f"{prefix}MONITOR_INTERVAL", "").strip()
        if raw:
            try:
                values["monitor_interval"] = float(raw)
            except ValueError:
                raise ValueError(f"{prefix}MONITOR_INTERVAL must be a number, got {raw!r}") from None

        values.update(overrides)
        return cls(**values)


DEFAULT_SETTINGS = EventerSettings()
