"""Static mapping from inbound wire `type` to a typed payload decoder.

Each recognised type is published on the channel of the same name.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any
from collections.abc import Mapping, Callable

from .models import Message, Conversation
from .payloads import (
    CallEvent,
    TypingEvent,
    PresenceEvent,
    StreamEndEvent,
    NewMessageEvent,
    ReadReceiptEvent,
    StreamChunkEvent,
    StreamErrorEvent,
    StreamStartEvent,
    MessageDeletedEvent,
    ParticipantLeftEvent,
    ParticipantJoinedEvent,
)

Decoder = Callable[[Any], Any]

# Lifecycle channels emitted by the connection manager itself.
EVENT_CONNECTED = "connected"
EVENT_DISCONNECTED = "disconnected"
EVENT_RECONNECTING = "reconnecting"
EVENT_STATE_CHANGE = "state_change"
EVENT_ERROR = "error"

LIFECYCLE_EVENTS = frozenset({EVENT_CONNECTED, EVENT_DISCONNECTED, EVENT_RECONNECTING, EVENT_STATE_CHANGE, EVENT_ERROR})

EVENT_TAXONOMY: Mapping[str, Decoder] = MappingProxyType({
    "message:new": NewMessageEvent.from_wire,
    "message:updated": Message.from_wire,
    "message:deleted": MessageDeletedEvent.from_wire,
    "conversation:created": Conversation.from_wire,
    "conversation:updated": Conversation.from_wire,
    "participant:joined": ParticipantJoinedEvent.from_wire,
    "participant:left": ParticipantLeftEvent.from_wire,
    "presence:updated": PresenceEvent.from_wire,
    "typing:start": TypingEvent.from_wire,
    "typing:stop": TypingEvent.from_wire,
    "read:receipt": ReadReceiptEvent.from_wire,
    "call:ring": CallEvent.from_wire,
    "call:accept": CallEvent.from_wire,
    "call:reject": CallEvent.from_wire,
    "call:end": CallEvent.from_wire,
    "stream:start": StreamStartEvent.from_wire,
    "stream:chunk": StreamChunkEvent.from_wire,
    "stream:end": StreamEndEvent.from_wire,
    "stream:error": StreamErrorEvent.from_wire,
})

INBOUND_EVENTS = frozenset(EVENT_TAXONOMY)

__all__ = [
    "Decoder",
    "EVENT_CONNECTED",
    "EVENT_DISCONNECTED",
    "EVENT_ERROR",
    "EVENT_RECONNECTING",
    "EVENT_STATE_CHANGE",
    "EVENT_TAXONOMY",
    "INBOUND_EVENTS",
    "LIFECYCLE_EVENTS",
]
