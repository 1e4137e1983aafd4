"""
Attach the engine's surface to an arbitrary host object.

The host owns one Eventer (``host.eventer``); the attached attributes are that
engine's bound methods, and chainable calls return the host:

    player = extend(Player())
    player.on("stop", cleanup).on("play", announce)
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from eventer.config import EventerSettings
from eventer.emitter import Eventer
from eventer.errors import UsageError
from eventer.logging_config import get_logger

logger = get_logger(__name__)


def extend(obj: Any = None, settings: EventerSettings | None = None) -> Any:
    """
    Give ``obj`` an engine and forward the exposed methods to it.

    Args:
        obj: Host object; a fresh namespace when omitted
        settings: Engine configuration (``expose_methods`` picks the surface)

    Returns:
        ``obj`` itself

    Raises:
        UsageError: ``obj`` cannot take attributes
    """
    if obj is None:
        obj = SimpleNamespace()

    engine = Eventer(settings, host=obj)
    try:
        for name in engine.settings.expose_methods:
            setattr(obj, name, getattr(engine, name))
        obj.eventer = engine
    except (AttributeError, TypeError) as exc:
        raise UsageError(f"Cannot attach eventer methods to {type(obj).__name__}") from exc

    logger.debug("host_extended", host=type(obj).__name__, methods=list(engine.settings.expose_methods))
    return obj
