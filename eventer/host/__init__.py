"""
Host integration: attaching the engine to other objects, forwarding between
emitters, and the deferred-result adapter.
"""

from __future__ import annotations

from .deferred import Deferred, DeferredRejected
from .extend import extend
from .proxy import proxy

__all__ = [
    "Deferred",
    "DeferredRejected",
    "extend",
    "proxy",
]
