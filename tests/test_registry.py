from structlog.testing import capture_logs

from eventer.config import Placement
from eventer.core.registry import HandlerRegistry


def noop(*args):
    return None


def other(*args):
    return None


def test_register_appends_in_order():
    registry = HandlerRegistry()
    registry.register("foo", noop, origin="a")
    registry.register("foo", other, origin="b")

    bucket = registry.snapshot("foo")
    assert [r.origin for r in bucket] == ["a", "b"]
    assert registry.listener_count("foo") == 2


def test_register_prepend():
    registry = HandlerRegistry()
    registry.register("foo", noop, origin="first")
    registry.register("foo", other, origin="front", order=Placement.PREPEND)
    registry.register("foo", other, origin="front-again", order="prepend")

    assert [r.origin for r in registry.snapshot("foo")] == ["front-again", "front", "first"]


def test_register_fans_out_over_names():
    registry = HandlerRegistry()
    records = registry.register(["foo", "bar"], noop, prereqs=["db"])

    assert [r.event for r in records] == ["foo", "bar"]
    assert registry.listener_count("foo") == 1
    assert registry.listener_count("bar") == 1
    assert registry.snapshot("bar")[0].prereqs == ("db",)


def test_unknown_name_has_zero_listeners():
    registry = HandlerRegistry()
    assert registry.listener_count("missing") == 0
    assert registry.snapshot("missing") == ()


def test_unregister_by_callback_keeps_order_of_rest():
    registry = HandlerRegistry()
    registry.register("foo", noop, origin="1")
    registry.register("foo", other, origin="2")
    registry.register("foo", noop, origin="3")
    registry.register("foo", other, origin="4")

    removed = registry.unregister("foo", noop)

    assert removed == 2
    assert [r.origin for r in registry.snapshot("foo")] == ["2", "4"]


def test_unregister_whole_bucket_keeps_name_known():
    registry = HandlerRegistry()
    registry.register(["foo", "bar"], noop)

    registry.unregister("foo")

    assert registry.listener_count("foo") == 0
    assert registry.event_names() == {"foo", "bar"}


def test_unregister_is_idempotent():
    registry = HandlerRegistry()
    registry.register("foo", noop)

    assert registry.unregister("never-registered") == 0
    assert registry.unregister("foo", other) == 0
    assert registry.listener_count("foo") == 1


def test_snapshot_unaffected_by_later_mutation():
    registry = HandlerRegistry()
    registry.register("foo", noop)
    snapshot = registry.snapshot("foo")

    registry.register("foo", other)
    registry.unregister("foo", noop)

    assert len(snapshot) == 1
    assert snapshot[0].callback is noop
    assert [r.callback for r in registry.snapshot("foo")] == [other]


def test_meta_names_hidden_from_event_names():
    registry = HandlerRegistry()
    registry.register(["meta:preEmit", "meta:postEmit", "foo"], noop)

    assert registry.event_names() == {"foo"}
    assert registry.listener_count("meta:preEmit") == 1


def test_registration_and_removal_are_logged():
    registry = HandlerRegistry()

    with capture_logs() as logs:
        registry.register("foo", noop, origin="here", prereqs=["db"])
        registry.unregister("foo", noop)

    registered, removed = (entry for entry in logs if entry["event"].startswith("listener_"))
    assert registered["event"] == "listener_registered"
    assert registered["event_name"] == "foo"
    assert registered["origin"] == "here"
    assert registered["prereqs"] == ["db"]
    assert removed["event"] == "listener_removed"
    assert removed["event_name"] == "foo"
    assert removed["removed"] == 1
