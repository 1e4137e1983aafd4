"""
Self-removing subscriptions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from eventer.core.registry import Handler, HandlerRegistry, as_names


def make_once(registry: HandlerRegistry, events: str | Iterable[str], callback: Handler) -> Handler:
    """
    Build a wrapper that runs ``callback`` at most once across ``events``.

    The wrapper unregisters itself from every name before calling through, so
    dispatches that start afterwards never see it. Dispatches that already
    snapshotted it are turned away by the fired flag.
    """
    names = as_names(events)
    fired = False

    def wrapper(*args: Any) -> Any:
        nonlocal fired
        registry.unregister(names, wrapper)
        if fired:
            return None
        fired = True
        return callback(*args)

    wrapper.listener = callback  # type: ignore[attr-defined]
    wrapper.__name__ = getattr(callback, "__name__", "once_wrapper")
    return wrapper
