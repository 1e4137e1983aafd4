"""Structured logging for eventer.

The engine only ever calls ``get_logger``; applications decide how output is
rendered by calling ``configure_logging`` once at startup. Engine loggers all
live under the ``eventer`` namespace, so their verbosity can be tuned apart
from the application's with ``engine_level``.

Usage:
    from eventer.logging_config import configure_logging

    configure_logging(level="INFO", engine_level="DEBUG", json_output=True)
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import structlog

ENGINE_LOGGER = "eventer"
LEVEL_ENV = "EVENTER_LOG_LEVEL"


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        level = os.getenv(LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    level: str | int | None = None,
    json_output: bool = False,
    log_file: Path | None = None,
    colors: bool = True,
    engine_level: str | int | None = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Root log level; defaults to $EVENTER_LOG_LEVEL, then INFO
        json_output: Render JSON lines instead of console output
        log_file: Optional file to append to instead of stderr
        colors: Whether to use colors in console output
        engine_level: Separate level for the ``eventer`` loggers
    """
    root_level = _resolve_level(level)
    engine = logging.NOTSET if engine_level is None else _resolve_level(engine_level)

    handler: logging.Handler
    if log_file is None:
        handler = logging.StreamHandler(sys.stderr)
    else:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")

    # force=True closes the handlers of any earlier call.
    logging.basicConfig(
        format="%(message)s",
        handlers=[handler],
        level=root_level,
        force=True,
    )
    logging.getLogger(ENGINE_LOGGER).setLevel(engine)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to ``name`` (typically ``__name__``)."""
    return structlog.get_logger(name)
