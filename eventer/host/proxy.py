"""
Event forwarding between emitters.
"""

from __future__ import annotations

from typing import Any

from eventer.config import META_BEFORE, Protocol
from eventer.core.dispatcher import active_protocol


def proxy(source: Any, target: Any) -> Any:
    """
    Re-emit every ordinary event fired on ``source`` on ``target`` as well.

    Forwarding runs as a before-hook of ``source`` and follows the protocol of
    the source dispatch: synchronous emits are forwarded synchronously, the
    others are awaited as part of the source dispatch. Only events that are
    actually dispatched on ``source`` reach the hook, so an event ``source``
    has no listeners for is not forwarded; neither is one ``target`` has no
    listeners for. Both sides may be Eventer instances or extended hosts.

    Returns:
        ``source``, for chaining
    """

    def forward(event: str, *args: Any) -> Any:
        if not target.listener_count(event):
            return None
        protocol = active_protocol.get() or Protocol.PARALLEL
        if protocol is Protocol.SYNC:
            target.emit_sync(event, *args)
            return None
        return target.emit(event, *args, protocol=protocol)

    source.on(META_BEFORE, forward, source=f"proxy -> {type(target).__name__}")
    return source
