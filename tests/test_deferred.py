import asyncio

import pytest

from eventer import Deferred, DeferredRejected, EventerSettings


def test_then_resolve():
    async def scenario():
        deferred = Deferred()
        waiter = asyncio.ensure_future(deferred.promise())
        deferred.resolve("p-tr")
        return await waiter

    assert asyncio.run(scenario()) == "p-tr"


def test_resolve_then_await():
    async def scenario():
        return await Deferred().resolve("p-rt")

    assert asyncio.run(scenario()) == "p-rt"


def test_reject_with_exception():
    error = ValueError("p-rc")

    async def scenario():
        deferred = Deferred()
        deferred.reject(error)
        await deferred

    with pytest.raises(ValueError) as exc_info:
        asyncio.run(scenario())
    assert exc_info.value is error


def test_reject_with_plain_value():
    async def scenario():
        await Deferred().reject("p-cr")

    with pytest.raises(DeferredRejected) as exc_info:
        asyncio.run(scenario())
    assert exc_info.value.reason == "p-cr"


def test_reacts_to_end_event():
    async def scenario():
        deferred = Deferred()
        await deferred.emit("end", "e-end")
        return await deferred

    assert asyncio.run(scenario()) == "e-end"


def test_reacts_to_error_event():
    async def scenario():
        deferred = Deferred()
        deferred.emit_sync("error", "e-error")
        await deferred

    with pytest.raises(DeferredRejected):
        asyncio.run(scenario())


def test_first_settlement_wins():
    async def scenario():
        deferred = Deferred()
        deferred.resolve(1)
        deferred.reject(RuntimeError("late"))
        deferred.resolve(2)
        return await deferred

    assert asyncio.run(scenario()) == 1


def test_promise_returns_same_future():
    async def scenario():
        deferred = Deferred()
        future = deferred.promise()
        assert deferred.promise() is future
        assert isinstance(future, asyncio.Future)
        deferred.resolve("raw")
        return await future

    assert asyncio.run(scenario()) == "raw"


def test_custom_future_factory():
    created = []

    async def scenario():
        loop = asyncio.get_running_loop()

        def factory():
            future = loop.create_future()
            created.append(future)
            return future

        deferred = Deferred(EventerSettings(future_factory=factory))
        deferred.resolve("custom")
        return await deferred

    assert asyncio.run(scenario()) == "custom"
    assert len(created) == 1


def test_still_a_regular_emitter():
    deferred = Deferred()
    seen = []
    deferred.on("progress", lambda pct: seen.append(pct))

    deferred.emit_sync("progress", 50)

    assert seen == [50]
    assert deferred.settled is False
    assert {"end", "error", "progress"} <= deferred.event_names()
