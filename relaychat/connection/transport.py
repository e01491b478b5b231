"""Socket opening on top of the `websockets` asyncio client."""

from __future__ import annotations

from typing import Any, Protocol
from collections.abc import Callable, Awaitable, AsyncIterator

import websockets

from relaychat.state.settings import ConnectionSettings


class Socket(Protocol):
    """The slice of a websockets client connection the manager relies on."""

    async def send(self, message: str) -> None: ...

    async def close(self, code: int = 1000, reason: str = "") -> None: ...

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...


Opener = Callable[[str], Awaitable[Socket]]


def get_ws_options(settings: ConnectionSettings) -> dict[str, Any]:
    return {
        "open_timeout": settings.open_timeout_s,
        "ping_interval": settings.transport_ping_interval_s,
        "max_size": settings.max_message_bytes,
    }


def websocket_opener(settings: ConnectionSettings) -> Opener:
    options = get_ws_options(settings)

    async def _open(url: str) -> Socket:
        return await websockets.connect(url, **options)

    return _open


def describe_close(socket: Any) -> str:
    """Human readable close code/reason for logs and the `disconnected` event."""
    code = getattr(socket, "close_code", None)
    reason = getattr(socket, "close_reason", None) or ""
    if code is None:
        return reason or "connection closed"
    return f"{code} {reason}".strip()


__all__ = ["Opener", "Socket", "describe_close", "get_ws_options", "websocket_opener"]
