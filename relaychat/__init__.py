"""Client-side connection manager for a realtime chat service."""

from .client import ChatClient
from .runtime.logging import configure_logging
from .runtime.settings_loader import load_settings
from .connection.state_machine import ConnectionStateMachine
from .state import ConnectionState, ConnectionSession, ConnectionSettings
from .errors import (
    ConnectAbortedError,
    RetriesExhaustedError,
    TransportFailureError,
    ProtocolViolationError,
    AuthenticationUnavailableError,
)

__version__ = "0.1.0"

__all__ = [
    "AuthenticationUnavailableError",
    "ChatClient",
    "ConnectAbortedError",
    "ConnectionSession",
    "ConnectionSettings",
    "ConnectionState",
    "ConnectionStateMachine",
    "ProtocolViolationError",
    "RetriesExhaustedError",
    "TransportFailureError",
    "configure_logging",
    "load_settings",
]
