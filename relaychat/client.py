"""Realtime chat client: connection lifecycle plus outbound helper frames."""

from __future__ import annotations

import uuid
import logging
from typing import Any
from collections.abc import Iterable, Callable

from relaychat.state.settings import ConnectionSettings
from relaychat.events.registry import Callback
from relaychat.events.taxonomy import EVENT_CONNECTED
from relaychat.runtime.settings_loader import load_settings
from relaychat.state.connection_state import ConnectionState
from relaychat.connection.scheduler import SleepFn
from relaychat.connection.transport import Opener
from relaychat.connection.auth import TokenProvider
from relaychat.connection.state_machine import ConnectionStateMachine
from relaychat.config.websocket import (
    CALL_TYPES,
    CALL_ACTIONS,
    WS_TYPE_CALL,
    PRESENCE_STATUSES,
    WS_TYPE_SUBSCRIBE,
    WS_TYPE_TYPING_STOP,
    WS_KEY_EXECUTION_ID,
    WS_TYPE_UNSUBSCRIBE,
    WS_TYPE_AGENT_STREAM,
    WS_TYPE_TYPING_START,
    WS_TYPE_PRESENCE_UPDATE,
    WS_TYPE_AGENT_STREAM_CANCEL,
)

logger = logging.getLogger(__name__)


class ChatClient:
    """Entry point for realtime chat.

    Args:
        url: websocket endpoint, e.g. ``"wss://chat.example.com/ws"``.
        token: static credential. Ignored when ``get_token`` is given.
        get_token: sync or async callable returning the current credential;
            called on every connection attempt.
        resubscribe: when True, conversations subscribed through this client
            are subscribed again after every (re)connection. Otherwise
            callers should resubscribe from a ``connected`` listener.

    Remaining keyword arguments override the env-derived connection settings.

    Example::

        async with ChatClient("wss://chat.example.com/ws", get_token=fetch_token) as chat:
            chat.on("message:new", lambda event: print(event.message.content))
            chat.subscribe_to_conversation("c1")
            await asyncio.Event().wait()
    """

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        get_token: TokenProvider | None = None,
        reconnect_interval_ms: float | None = None,
        max_reconnect_attempts: int | None = None,
        heartbeat_interval_ms: float | None = None,
        auto_reconnect: bool | None = None,
        resubscribe: bool = False,
        settings: ConnectionSettings | None = None,
        opener: Opener | None = None,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        self._token = token
        self.settings = settings or load_settings(
            url,
            reconnect_interval_ms=reconnect_interval_ms,
            max_reconnect_attempts=max_reconnect_attempts,
            heartbeat_interval_ms=heartbeat_interval_ms,
            auto_reconnect=auto_reconnect,
        )
        self._connection = ConnectionStateMachine(
            self.settings,
            get_token or self._static_token,
            opener=opener,
            sleep_fn=sleep_fn,
        )
        self._subscriptions: dict[str, None] = {}
        self._resubscribe = resubscribe
        if resubscribe:
            self._connection.on(EVENT_CONNECTED, self._replay_subscriptions)

    # -- Context manager ------------------------------------------------------

    async def __aenter__(self) -> ChatClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.disconnect()
        await self._connection.wait_closed()

    # -- Connection -----------------------------------------------------------

    async def connect(self) -> None:
        await self._connection.connect()

    def disconnect(self) -> None:
        self._connection.disconnect()

    async def wait_closed(self) -> None:
        await self._connection.wait_closed()

    @property
    def connection(self) -> ConnectionStateMachine:
        return self._connection

    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    @property
    def is_connected(self) -> bool:
        return self._connection.is_connected

    @property
    def subscriptions(self) -> list[str]:
        return list(self._subscriptions)

    def set_token(self, token: str | None) -> None:
        """Replace the static credential used by the next connection attempt."""
        self._token = token

    def _static_token(self) -> str | None:
        return self._token

    # -- Events ---------------------------------------------------------------

    def on(self, event: str, callback: Callback) -> Callable[[], None]:
        return self._connection.on(event, callback)

    def once(self, event: str, callback: Callback) -> Callable[[], None]:
        return self._connection.once(event, callback)

    def off(self, event: str, callback: Callback | None = None) -> None:
        self._connection.off(event, callback)

    # -- Outbound frames ------------------------------------------------------

    def send(self, msg_type: str, payload: Any = None) -> None:
        self._connection.send(msg_type, payload)

    def send_typing_start(self, conversation_id: str) -> None:
        self.send(WS_TYPE_TYPING_START, {"conversationId": conversation_id})

    def send_typing_stop(self, conversation_id: str) -> None:
        self.send(WS_TYPE_TYPING_STOP, {"conversationId": conversation_id})

    def update_presence(self, status: str, status_message: str | None = None) -> None:
        if status not in PRESENCE_STATUSES:
            raise ValueError(f"unknown presence status {status!r}")
        payload: dict[str, Any] = {"status": status}
        if status_message is not None:
            payload["statusMessage"] = status_message
        self.send(WS_TYPE_PRESENCE_UPDATE, payload)

    def send_call_notification(
        self,
        conversation_id: str,
        action: str,
        call_type: str | None = None,
        room_name: str | None = None,
    ) -> None:
        """Relay a call-control notification; media signaling happens elsewhere."""
        if action not in CALL_ACTIONS:
            raise ValueError(f"unknown call action {action!r}")
        if call_type is not None and call_type not in CALL_TYPES:
            raise ValueError(f"unknown call type {call_type!r}")
        payload: dict[str, Any] = {"conversationId": conversation_id, "action": action}
        if call_type is not None:
            payload["callType"] = call_type
        if room_name is not None:
            payload["roomName"] = room_name
        self.send(WS_TYPE_CALL, payload)

    def subscribe_to_conversation(self, conversation_id: str) -> None:
        self.subscribe_to_conversations([conversation_id])

    def subscribe_to_conversations(self, conversation_ids: Iterable[str]) -> None:
        ids = [str(cid) for cid in conversation_ids]
        for cid in ids:
            self._subscriptions[cid] = None
        if self._resubscribe and not self.is_connected:
            # Replayed in full by the connected listener.
            return
        self._connection.send_subscription(WS_TYPE_SUBSCRIBE, ids)

    def unsubscribe_from_conversation(self, conversation_id: str) -> None:
        self.unsubscribe_from_conversations([conversation_id])

    def unsubscribe_from_conversations(self, conversation_ids: Iterable[str]) -> None:
        ids = [str(cid) for cid in conversation_ids]
        for cid in ids:
            self._subscriptions.pop(cid, None)
        if self._resubscribe and not self.is_connected:
            return
        self._connection.send_subscription(WS_TYPE_UNSUBSCRIBE, ids)

    def send_streaming_message(
        self,
        conversation_id: str,
        message: str,
        agent_config_id: str | None = None,
    ) -> str:
        """Ask the agent to stream a reply; returns the execution id used by stream:* events.

        The outbound frame shape is assumed rather than taken from a published
        server contract: a flat `agent:stream` frame carrying `executionId`,
        `conversationId`, `message` and, when given, `agentConfigId`.
        """
        execution_id = str(uuid.uuid4())
        self._connection.send_flat(
            WS_TYPE_AGENT_STREAM,
            {
                WS_KEY_EXECUTION_ID: execution_id,
                "conversationId": conversation_id,
                "message": message,
                "agentConfigId": agent_config_id,
            },
        )
        return execution_id

    def cancel_stream(self, execution_id: str) -> None:
        """Send a flat `agent:stream:cancel` frame; shape assumed like `send_streaming_message`."""
        self._connection.send_flat(WS_TYPE_AGENT_STREAM_CANCEL, {WS_KEY_EXECUTION_ID: execution_id})

    def _replay_subscriptions(self) -> None:
        if not self._subscriptions:
            return
        logger.debug("resubscribing to %s conversation(s)", len(self._subscriptions))
        self._connection.send_subscription(WS_TYPE_SUBSCRIBE, list(self._subscriptions))


__all__ = ["ChatClient"]
