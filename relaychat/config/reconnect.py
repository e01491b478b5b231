"""Reconnect, heartbeat and transport settings (env names and defaults)."""

from __future__ import annotations

ENV_RECONNECT_INTERVAL_MS = "RELAYCHAT_RECONNECT_INTERVAL_MS"
ENV_MAX_RECONNECT_ATTEMPTS = "RELAYCHAT_MAX_RECONNECT_ATTEMPTS"
ENV_MAX_RECONNECT_DELAY_MS = "RELAYCHAT_MAX_RECONNECT_DELAY_MS"
ENV_HEARTBEAT_INTERVAL_MS = "RELAYCHAT_HEARTBEAT_INTERVAL_MS"
ENV_AUTO_RECONNECT = "RELAYCHAT_AUTO_RECONNECT"
ENV_OPEN_TIMEOUT_S = "RELAYCHAT_OPEN_TIMEOUT_S"
ENV_MAX_MESSAGE_BYTES = "RELAYCHAT_MAX_MESSAGE_BYTES"
ENV_TRANSPORT_PING_INTERVAL_S = "RELAYCHAT_TRANSPORT_PING_INTERVAL_S"

DEFAULT_RECONNECT_INTERVAL_MS = 3000.0
DEFAULT_MAX_RECONNECT_ATTEMPTS = 10
DEFAULT_MAX_RECONNECT_DELAY_MS = 30000.0
DEFAULT_HEARTBEAT_INTERVAL_MS = 30000.0
DEFAULT_AUTO_RECONNECT = True
DEFAULT_OPEN_TIMEOUT_S = 10.0
DEFAULT_MAX_MESSAGE_BYTES = 1024 * 1024
# The library keepalive adds a pong deadline; off unless asked for.
DEFAULT_TRANSPORT_PING_INTERVAL_S: float | None = None

RECONNECT_BACKOFF_FACTOR = 1.5

__all__ = [
    "ENV_RECONNECT_INTERVAL_MS",
    "ENV_MAX_RECONNECT_ATTEMPTS",
    "ENV_MAX_RECONNECT_DELAY_MS",
    "ENV_HEARTBEAT_INTERVAL_MS",
    "ENV_AUTO_RECONNECT",
    "ENV_OPEN_TIMEOUT_S",
    "ENV_MAX_MESSAGE_BYTES",
    "ENV_TRANSPORT_PING_INTERVAL_S",
    "DEFAULT_RECONNECT_INTERVAL_MS",
    "DEFAULT_MAX_RECONNECT_ATTEMPTS",
    "DEFAULT_MAX_RECONNECT_DELAY_MS",
    "DEFAULT_HEARTBEAT_INTERVAL_MS",
    "DEFAULT_AUTO_RECONNECT",
    "DEFAULT_OPEN_TIMEOUT_S",
    "DEFAULT_MAX_MESSAGE_BYTES",
    "DEFAULT_TRANSPORT_PING_INTERVAL_S",
    "RECONNECT_BACKOFF_FACTOR",
]
