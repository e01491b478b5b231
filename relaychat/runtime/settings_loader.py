"""Environment parsing for connection settings."""

from __future__ import annotations

import os
from typing import Any
from dataclasses import replace

from relaychat.state.settings import ConnectionSettings
from relaychat.config.reconnect import (
    ENV_AUTO_RECONNECT,
    ENV_OPEN_TIMEOUT_S,
    DEFAULT_AUTO_RECONNECT,
    DEFAULT_OPEN_TIMEOUT_S,
    ENV_MAX_MESSAGE_BYTES,
    DEFAULT_MAX_MESSAGE_BYTES,
    ENV_HEARTBEAT_INTERVAL_MS,
    ENV_RECONNECT_INTERVAL_MS,
    ENV_MAX_RECONNECT_DELAY_MS,
    ENV_MAX_RECONNECT_ATTEMPTS,
    DEFAULT_HEARTBEAT_INTERVAL_MS,
    DEFAULT_RECONNECT_INTERVAL_MS,
    ENV_TRANSPORT_PING_INTERVAL_S,
    DEFAULT_MAX_RECONNECT_DELAY_MS,
    DEFAULT_MAX_RECONNECT_ATTEMPTS,
    DEFAULT_TRANSPORT_PING_INTERVAL_S,
)

_DISABLED_VALUES = {"0", "none", "null", "disabled", "disable", "off"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _optional_float_env(name: str, default: float | None) -> float | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    if raw.lower() in _DISABLED_VALUES:
        return None
    try:
        value = float(raw)
    except Exception:
        return default
    return value if value > 0 else None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _validate(settings: ConnectionSettings) -> ConnectionSettings:
    if not settings.url.startswith(("ws://", "wss://")):
        raise ValueError(f"url must use the ws:// or wss:// scheme, got {settings.url!r}")
    if settings.reconnect_interval_ms < 0:
        raise ValueError("reconnect_interval_ms must be >= 0")
    if settings.max_reconnect_attempts < 0:
        raise ValueError("max_reconnect_attempts must be >= 0")
    if settings.heartbeat_interval_ms <= 0:
        raise ValueError("heartbeat_interval_ms must be > 0")
    if settings.max_reconnect_delay_ms <= 0:
        raise ValueError("max_reconnect_delay_ms must be > 0")
    return settings


def load_settings(url: str, **overrides: Any) -> ConnectionSettings:
    """Build settings from the environment; keyword overrides win over env values.

    Overrides set to None are ignored so callers can forward optional arguments as-is.
    """
    settings = ConnectionSettings(
        url=(url or "").strip(),
        reconnect_interval_ms=_float_env(ENV_RECONNECT_INTERVAL_MS, DEFAULT_RECONNECT_INTERVAL_MS),
        max_reconnect_attempts=_int_env(ENV_MAX_RECONNECT_ATTEMPTS, DEFAULT_MAX_RECONNECT_ATTEMPTS),
        max_reconnect_delay_ms=_float_env(ENV_MAX_RECONNECT_DELAY_MS, DEFAULT_MAX_RECONNECT_DELAY_MS),
        heartbeat_interval_ms=_float_env(ENV_HEARTBEAT_INTERVAL_MS, DEFAULT_HEARTBEAT_INTERVAL_MS),
        auto_reconnect=_bool_env(ENV_AUTO_RECONNECT, DEFAULT_AUTO_RECONNECT),
        open_timeout_s=_float_env(ENV_OPEN_TIMEOUT_S, DEFAULT_OPEN_TIMEOUT_S),
        max_message_bytes=_int_env(ENV_MAX_MESSAGE_BYTES, DEFAULT_MAX_MESSAGE_BYTES),
        transport_ping_interval_s=_optional_float_env(ENV_TRANSPORT_PING_INTERVAL_S, DEFAULT_TRANSPORT_PING_INTERVAL_S),
    )
    explicit = {k: v for k, v in overrides.items() if v is not None}
    if explicit:
        settings = replace(settings, **explicit)
    return _validate(settings)


__all__ = ["load_settings"]
