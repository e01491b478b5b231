"""Chat resources as they appear inside realtime event payloads."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

from .fields import (
    as_object,
    optional_int,
    optional_str,
    require_str,
    optional_bool,
    optional_list,
    optional_object,
)


@dataclass(frozen=True, slots=True)
class ReadReceipt:
    user_id: str
    read_at: str | None = None

    @classmethod
    def from_wire(cls, data: Any) -> ReadReceipt:
        data = as_object(data, "read receipt")
        return cls(user_id=require_str(data, "userId"), read_at=optional_str(data, "readAt"))


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    conversation_id: str
    content: str
    message_type: str = "text"
    sender_id: str | None = None
    sender_name: str | None = None
    sender_avatar: str | None = None
    read_by: tuple[ReadReceipt, ...] = ()
    metadata: dict[str, Any] | None = None
    created_at: str | None = None
    edited_at: str | None = None

    @classmethod
    def from_wire(cls, data: Any) -> Message:
        data = as_object(data, "message")
        content = data.get("content")
        return cls(
            id=require_str(data, "id"),
            conversation_id=require_str(data, "conversationId"),
            content=content if isinstance(content, str) else "",
            message_type=optional_str(data, "messageType", "text") or "text",
            sender_id=optional_str(data, "senderId"),
            sender_name=optional_str(data, "senderName"),
            sender_avatar=optional_str(data, "senderAvatar"),
            read_by=tuple(ReadReceipt.from_wire(r) for r in optional_list(data, "readBy")),
            metadata=optional_object(data, "metadata"),
            created_at=optional_str(data, "createdAt"),
            edited_at=optional_str(data, "editedAt"),
        )


@dataclass(frozen=True, slots=True)
class Participant:
    user_id: str
    role: str = "member"
    is_active: bool = True
    joined_at: str | None = None
    last_seen: str | None = None
    # Left as the raw wire object; user records belong to the HTTP client.
    user: dict[str, Any] | None = None

    @classmethod
    def from_wire(cls, data: Any) -> Participant:
        data = as_object(data, "participant")
        return cls(
            user_id=require_str(data, "userId"),
            role=optional_str(data, "role", "member") or "member",
            is_active=bool(optional_bool(data, "isActive", True)),
            joined_at=optional_str(data, "joinedAt"),
            last_seen=optional_str(data, "lastSeen"),
            user=optional_object(data, "user"),
        )


@dataclass(frozen=True, slots=True)
class Conversation:
    id: str
    type: str = "direct"
    is_active: bool = True
    name: str | None = None
    last_message_at: str | None = None
    agent_enabled: bool | None = None
    agent_config_id: str | None = None
    participants: tuple[Participant, ...] = ()
    unread_count: int | None = None
    metadata: dict[str, Any] | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_wire(cls, data: Any) -> Conversation:
        data = as_object(data, "conversation")
        return cls(
            id=require_str(data, "id"),
            type=optional_str(data, "type", "direct") or "direct",
            is_active=bool(optional_bool(data, "isActive", True)),
            name=optional_str(data, "name"),
            last_message_at=optional_str(data, "lastMessageAt"),
            agent_enabled=optional_bool(data, "agentEnabled"),
            agent_config_id=optional_str(data, "agentConfigId"),
            participants=tuple(Participant.from_wire(p) for p in optional_list(data, "participants")),
            unread_count=optional_int(data, "unreadCount"),
            metadata=optional_object(data, "metadata"),
            created_at=optional_str(data, "createdAt"),
            updated_at=optional_str(data, "updatedAt"),
        )


__all__ = ["Conversation", "Message", "Participant", "ReadReceipt"]
