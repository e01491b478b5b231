"""Error types raised or emitted by the connection manager."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthenticationUnavailableError(Exception):
    """Raised when the token provider yields no credential for a connect attempt."""

    message: str = "No authentication token available"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class TransportFailureError(Exception):
    """Raised when the socket fails to open; also describes unexpected closures."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class ProtocolViolationError(ValueError):
    """Raised by the frame parser for input that is not a known frame shape."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class RetriesExhaustedError(Exception):
    """Emitted once the reconnect attempt counter reaches its maximum."""

    attempts: int

    def __str__(self) -> str:
        return f"gave up reconnecting after {self.attempts} attempts"


@dataclass(frozen=True, slots=True)
class ConnectAbortedError(Exception):
    """Raised from connect() when disconnect() supersedes the attempt."""

    message: str = "connect attempt aborted by disconnect()"

    def __str__(self) -> str:
        return self.message


__all__ = [
    "AuthenticationUnavailableError",
    "ConnectAbortedError",
    "ProtocolViolationError",
    "RetriesExhaustedError",
    "TransportFailureError",
]
