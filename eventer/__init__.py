"""
eventer: in-process publish/subscribe dispatch.

Handlers register against named events; emitting an event runs them under one
of three protocols (parallel, reduce, sync), wrapped by the
``meta:preEmit``/``meta:postEmit`` observation hooks.
"""

from eventer.config import (
    DEFAULT_SETTINGS,
    META_AFTER,
    META_BEFORE,
    EventerSettings,
    Placement,
    Protocol,
)
from eventer.emitter import Eventer
from eventer.errors import EventerError, HandlerFailure, UnknownEventError, UsageError
from eventer.host import Deferred, DeferredRejected, extend, proxy

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SETTINGS",
    "META_AFTER",
    "META_BEFORE",
    "Deferred",
    "DeferredRejected",
    "Eventer",
    "EventerError",
    "EventerSettings",
    "HandlerFailure",
    "Placement",
    "Protocol",
    "UnknownEventError",
    "UsageError",
    "extend",
    "proxy",
]
