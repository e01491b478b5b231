from .registry import CallbackRegistry
from .dispatcher import EventDispatcher
from .models import Message, Participant, ReadReceipt, Conversation
from .taxonomy import (
    EVENT_ERROR,
    EVENT_TAXONOMY,
    INBOUND_EVENTS,
    EVENT_CONNECTED,
    LIFECYCLE_EVENTS,
    EVENT_DISCONNECTED,
    EVENT_RECONNECTING,
    EVENT_STATE_CHANGE,
)
from .payloads import (
    CallEvent,
    TypingEvent,
    PresenceEvent,
    StreamEndEvent,
    StreamMetadata,
    NewMessageEvent,
    ReadReceiptEvent,
    StreamChunkEvent,
    StreamErrorEvent,
    StreamStartEvent,
    MessageDeletedEvent,
    ParticipantLeftEvent,
    ParticipantJoinedEvent,
)

__all__ = [
    "CallEvent",
    "CallbackRegistry",
    "Conversation",
    "EVENT_CONNECTED",
    "EVENT_DISCONNECTED",
    "EVENT_ERROR",
    "EVENT_RECONNECTING",
    "EVENT_STATE_CHANGE",
    "EVENT_TAXONOMY",
    "EventDispatcher",
    "INBOUND_EVENTS",
    "LIFECYCLE_EVENTS",
    "Message",
    "MessageDeletedEvent",
    "NewMessageEvent",
    "Participant",
    "ParticipantJoinedEvent",
    "ParticipantLeftEvent",
    "PresenceEvent",
    "ReadReceipt",
    "ReadReceiptEvent",
    "StreamChunkEvent",
    "StreamEndEvent",
    "StreamErrorEvent",
    "StreamMetadata",
    "StreamStartEvent",
    "TypingEvent",
]
