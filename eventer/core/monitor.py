"""
Advisory reporting of handlers that have not settled yet.

Runs beside a parallel dispatch and logs the origins of unsettled handlers
every ``interval`` seconds. It never touches the handlers or their results.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager, suppress

from eventer.core.registry import HandlerRecord
from eventer.logging_config import get_logger

logger = get_logger(__name__)


async def _report(
    event: str,
    tasks: Sequence[asyncio.Future],
    records: Sequence[HandlerRecord],
    interval: float,
) -> None:
    started = time.monotonic()
    while True:
        await asyncio.sleep(interval)
        waiting = [r.origin for t, r in zip(tasks, records) if not t.done()]
        if not waiting:
            return
        logger.warning(
            "emit_pending",
            event_name=event,
            pending=waiting,
            waited_s=round(time.monotonic() - started, 3),
        )


@asynccontextmanager
async def monitor_pending(
    event: str,
    tasks: Sequence[asyncio.Future],
    records: Sequence[HandlerRecord],
    interval: float | None,
) -> AsyncIterator[None]:
    """Report unsettled ``tasks`` while the block runs; no-op when interval is None."""
    if interval is None:
        yield
        return

    reporter = asyncio.ensure_future(_report(event, tasks, records, interval))
    try:
        yield
    finally:
        reporter.cancel()
        with suppress(asyncio.CancelledError):
            await reporter
