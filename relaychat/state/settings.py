"""Connection settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass

from relaychat.config.reconnect import (
    DEFAULT_AUTO_RECONNECT,
    DEFAULT_OPEN_TIMEOUT_S,
    DEFAULT_MAX_MESSAGE_BYTES,
    DEFAULT_HEARTBEAT_INTERVAL_MS,
    DEFAULT_RECONNECT_INTERVAL_MS,
    DEFAULT_MAX_RECONNECT_DELAY_MS,
    DEFAULT_MAX_RECONNECT_ATTEMPTS,
    DEFAULT_TRANSPORT_PING_INTERVAL_S,
)


@dataclass(frozen=True, slots=True)
class ConnectionSettings:
    url: str
    reconnect_interval_ms: float = DEFAULT_RECONNECT_INTERVAL_MS
    max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS
    max_reconnect_delay_ms: float = DEFAULT_MAX_RECONNECT_DELAY_MS
    heartbeat_interval_ms: float = DEFAULT_HEARTBEAT_INTERVAL_MS
    auto_reconnect: bool = DEFAULT_AUTO_RECONNECT
    open_timeout_s: float = DEFAULT_OPEN_TIMEOUT_S
    max_message_bytes: int = DEFAULT_MAX_MESSAGE_BYTES
    transport_ping_interval_s: float | None = DEFAULT_TRANSPORT_PING_INTERVAL_S


__all__ = ["ConnectionSettings"]
