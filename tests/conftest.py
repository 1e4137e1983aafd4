"""Pytest configuration and shared fixtures."""
import asyncio
import logging

import pytest
import structlog

from eventer import Eventer, EventerSettings


@pytest.fixture
def emitter():
    return Eventer()


@pytest.fixture
def strict_emitter():
    return Eventer(EventerSettings(emit_on_unknown_raises=True))


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def restore_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger("eventer").setLevel(logging.NOTSET)
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
