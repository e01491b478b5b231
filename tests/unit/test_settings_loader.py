from __future__ import annotations

import pytest

from relaychat.runtime.settings_loader import load_settings
from relaychat.config.reconnect import (
    ENV_AUTO_RECONNECT,
    ENV_RECONNECT_INTERVAL_MS,
    ENV_MAX_RECONNECT_ATTEMPTS,
    ENV_TRANSPORT_PING_INTERVAL_S,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (ENV_AUTO_RECONNECT, ENV_RECONNECT_INTERVAL_MS, ENV_MAX_RECONNECT_ATTEMPTS, ENV_TRANSPORT_PING_INTERVAL_S):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings("wss://chat.example.com/ws")

    assert settings.reconnect_interval_ms == 3000
    assert settings.max_reconnect_attempts == 10
    assert settings.heartbeat_interval_ms == 30000
    assert settings.max_reconnect_delay_ms == 30000
    assert settings.auto_reconnect is True
    assert settings.transport_ping_interval_s is None


def test_env_values_apply(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_RECONNECT_INTERVAL_MS, "500")
    monkeypatch.setenv(ENV_MAX_RECONNECT_ATTEMPTS, "4")
    monkeypatch.setenv(ENV_AUTO_RECONNECT, "off")
    monkeypatch.setenv(ENV_TRANSPORT_PING_INTERVAL_S, "20")

    settings = load_settings("ws://localhost/ws")

    assert settings.reconnect_interval_ms == 500
    assert settings.max_reconnect_attempts == 4
    assert settings.auto_reconnect is False
    assert settings.transport_ping_interval_s == 20


def test_unparseable_env_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_MAX_RECONNECT_ATTEMPTS, "lots")
    assert load_settings("ws://localhost/ws").max_reconnect_attempts == 10


def test_overrides_beat_env_and_none_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_RECONNECT_INTERVAL_MS, "500")

    settings = load_settings("ws://localhost/ws", reconnect_interval_ms=100, max_reconnect_attempts=None)

    assert settings.reconnect_interval_ms == 100
    assert settings.max_reconnect_attempts == 10


@pytest.mark.parametrize(
    "url,overrides",
    [
        ("http://localhost/ws", {}),
        ("ws://localhost/ws", {"reconnect_interval_ms": -1}),
        ("ws://localhost/ws", {"max_reconnect_attempts": -1}),
        ("ws://localhost/ws", {"heartbeat_interval_ms": 0}),
    ],
)
def test_invalid_settings_are_rejected(url: str, overrides: dict) -> None:
    with pytest.raises(ValueError):
        load_settings(url, **overrides)
