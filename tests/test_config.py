import dataclasses

import pytest

from eventer import DEFAULT_SETTINGS, EventerSettings, Protocol, UsageError


def test_defaults():
    settings = EventerSettings()

    assert settings.emit_on_unknown_raises is False
    assert settings.default_protocol is Protocol.PARALLEL
    assert settings.strict_sync is True
    assert settings.monitor_interval is None
    assert "once" in settings.expose_methods


def test_default_settings_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_SETTINGS.emit_on_unknown_raises = True


def test_protocol_is_coerced_from_string():
    assert EventerSettings(default_protocol="Reduce").default_protocol is Protocol.REDUCE


def test_unknown_protocol_rejected():
    with pytest.raises(UsageError):
        EventerSettings(default_protocol="fanout")


def test_monitor_interval_must_be_positive():
    with pytest.raises(ValueError):
        EventerSettings(monitor_interval=0)


def test_from_env(monkeypatch):
    monkeypatch.setenv("EVENTER_EMIT_ON_UNKNOWN_RAISES", "true")
    monkeypatch.setenv("EVENTER_DEFAULT_PROTOCOL", "sync")
    monkeypatch.setenv("EVENTER_STRICT_SYNC", "0")
    monkeypatch.setenv("EVENTER_MONITOR_INTERVAL", "2.5")

    settings = EventerSettings.from_env()

    assert settings.emit_on_unknown_raises is True
    assert settings.default_protocol is Protocol.SYNC
    assert settings.strict_sync is False
    assert settings.monitor_interval == 2.5


def test_from_env_overrides_and_prefix(monkeypatch):
    monkeypatch.setenv("APP_STRICT_SYNC", "yes")
    monkeypatch.delenv("APP_DEFAULT_PROTOCOL", raising=False)

    settings = EventerSettings.from_env(prefix="APP_", emit_on_unknown_raises=True)

    assert settings.strict_sync is True
    assert settings.emit_on_unknown_raises is True
    assert settings.default_protocol is Protocol.PARALLEL


def test_from_env_bad_interval(monkeypatch):
    monkeypatch.setenv("EVENTER_MONITOR_INTERVAL", "soon")

    with pytest.raises(ValueError):
        EventerSettings.from_env()
