"""
Core primitives: handler registry, once-wrapper and dispatcher.
"""

from .caller import CallerInfo, describe_caller
from .dispatcher import Dispatcher
from .once import make_once
from .registry import HandlerRecord, HandlerRegistry

__all__ = [
    "CallerInfo",
    "Dispatcher",
    "HandlerRecord",
    "HandlerRegistry",
    "describe_caller",
    "make_once",
]
