"""Typed payloads for inbound realtime events."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

from .models import Message, Participant
from .fields import as_object, optional_int, optional_str, require_str


@dataclass(frozen=True, slots=True)
class NewMessageEvent:
    message: Message
    conversation_id: str

    @classmethod
    def from_wire(cls, payload: Any) -> NewMessageEvent:
        data = as_object(payload, "payload")
        message = Message.from_wire(data.get("message"))
        return cls(
            message=message,
            conversation_id=optional_str(data, "conversationId") or message.conversation_id,
        )


@dataclass(frozen=True, slots=True)
class MessageDeletedEvent:
    message_id: str
    conversation_id: str

    @classmethod
    def from_wire(cls, payload: Any) -> MessageDeletedEvent:
        data = as_object(payload, "payload")
        return cls(message_id=require_str(data, "messageId"), conversation_id=require_str(data, "conversationId"))


@dataclass(frozen=True, slots=True)
class ParticipantJoinedEvent:
    conversation_id: str
    participant: Participant

    @classmethod
    def from_wire(cls, payload: Any) -> ParticipantJoinedEvent:
        data = as_object(payload, "payload")
        return cls(
            conversation_id=require_str(data, "conversationId"),
            participant=Participant.from_wire(data.get("participant")),
        )


@dataclass(frozen=True, slots=True)
class ParticipantLeftEvent:
    conversation_id: str
    user_id: str

    @classmethod
    def from_wire(cls, payload: Any) -> ParticipantLeftEvent:
        data = as_object(payload, "payload")
        return cls(conversation_id=require_str(data, "conversationId"), user_id=require_str(data, "userId"))


@dataclass(frozen=True, slots=True)
class TypingEvent:
    conversation_id: str
    user_id: str
    user_name: str | None = None

    @classmethod
    def from_wire(cls, payload: Any) -> TypingEvent:
        data = as_object(payload, "payload")
        return cls(
            conversation_id=require_str(data, "conversationId"),
            user_id=require_str(data, "userId"),
            user_name=optional_str(data, "userName"),
        )


@dataclass(frozen=True, slots=True)
class PresenceEvent:
    user_id: str
    status: str
    status_message: str | None = None

    @classmethod
    def from_wire(cls, payload: Any) -> PresenceEvent:
        data = as_object(payload, "payload")
        return cls(
            user_id=require_str(data, "userId"),
            status=require_str(data, "status"),
            status_message=optional_str(data, "statusMessage"),
        )


@dataclass(frozen=True, slots=True)
class ReadReceiptEvent:
    conversation_id: str
    message_id: str
    user_id: str
    read_at: str | None = None

    @classmethod
    def from_wire(cls, payload: Any) -> ReadReceiptEvent:
        data = as_object(payload, "payload")
        return cls(
            conversation_id=require_str(data, "conversationId"),
            message_id=require_str(data, "messageId"),
            user_id=require_str(data, "userId"),
            read_at=optional_str(data, "readAt"),
        )


@dataclass(frozen=True, slots=True)
class CallEvent:
    conversation_id: str
    user_id: str
    action: str
    call_type: str | None = None
    room_name: str | None = None

    @classmethod
    def from_wire(cls, payload: Any) -> CallEvent:
        data = as_object(payload, "payload")
        return cls(
            conversation_id=require_str(data, "conversationId"),
            user_id=require_str(data, "userId"),
            action=require_str(data, "action"),
            call_type=optional_str(data, "callType"),
            room_name=optional_str(data, "roomName"),
        )


@dataclass(frozen=True, slots=True)
class StreamMetadata:
    tokens_used: int | None = None
    model: str | None = None
    latency_ms: int | None = None

    @classmethod
    def from_wire(cls, data: Any) -> StreamMetadata:
        data = as_object(data, "metadata")
        return cls(
            tokens_used=optional_int(data, "tokensUsed"),
            model=optional_str(data, "model"),
            latency_ms=optional_int(data, "latencyMs"),
        )


@dataclass(frozen=True, slots=True)
class StreamStartEvent:
    execution_id: str
    conversation_id: str

    @classmethod
    def from_wire(cls, payload: Any) -> StreamStartEvent:
        data = as_object(payload, "payload")
        return cls(execution_id=require_str(data, "executionId"), conversation_id=require_str(data, "conversationId"))


@dataclass(frozen=True, slots=True)
class StreamChunkEvent:
    execution_id: str
    conversation_id: str
    chunk: str
    accumulated: str

    @classmethod
    def from_wire(cls, payload: Any) -> StreamChunkEvent:
        data = as_object(payload, "payload")
        chunk = optional_str(data, "chunk", "") or ""
        return cls(
            execution_id=require_str(data, "executionId"),
            conversation_id=require_str(data, "conversationId"),
            chunk=chunk,
            accumulated=optional_str(data, "accumulated", chunk) or "",
        )


@dataclass(frozen=True, slots=True)
class StreamEndEvent:
    execution_id: str
    conversation_id: str
    accumulated: str
    metadata: StreamMetadata | None = None

    @classmethod
    def from_wire(cls, payload: Any) -> StreamEndEvent:
        data = as_object(payload, "payload")
        metadata = data.get("metadata")
        return cls(
            execution_id=require_str(data, "executionId"),
            conversation_id=require_str(data, "conversationId"),
            accumulated=optional_str(data, "accumulated", "") or "",
            metadata=StreamMetadata.from_wire(metadata) if metadata is not None else None,
        )


@dataclass(frozen=True, slots=True)
class StreamErrorEvent:
    execution_id: str
    conversation_id: str
    error: str

    @classmethod
    def from_wire(cls, payload: Any) -> StreamErrorEvent:
        data = as_object(payload, "payload")
        return cls(
            execution_id=require_str(data, "executionId"),
            conversation_id=require_str(data, "conversationId"),
            error=optional_str(data, "error", "error") or "error",
        )


__all__ = [
    "CallEvent",
    "MessageDeletedEvent",
    "NewMessageEvent",
    "ParticipantJoinedEvent",
    "ParticipantLeftEvent",
    "PresenceEvent",
    "ReadReceiptEvent",
    "StreamChunkEvent",
    "StreamEndEvent",
    "StreamErrorEvent",
    "StreamMetadata",
    "StreamStartEvent",
    "TypingEvent",
]
