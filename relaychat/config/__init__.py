"""Configuration module exports (constants only)."""

from .websocket import WS_QUERY_TOKEN
from .reconnect import (
    DEFAULT_AUTO_RECONNECT,
    DEFAULT_HEARTBEAT_INTERVAL_MS,
    DEFAULT_RECONNECT_INTERVAL_MS,
    DEFAULT_MAX_RECONNECT_ATTEMPTS,
)

__all__ = [
    "DEFAULT_AUTO_RECONNECT",
    "DEFAULT_HEARTBEAT_INTERVAL_MS",
    "DEFAULT_MAX_RECONNECT_ATTEMPTS",
    "DEFAULT_RECONNECT_INTERVAL_MS",
    "WS_QUERY_TOKEN",
]
