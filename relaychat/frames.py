"""Frame encoding and inbound frame parsing."""

from __future__ import annotations

from typing import Any
from datetime import datetime, timezone
from collections.abc import Iterable

import orjson

from relaychat.errors import ProtocolViolationError
from relaychat.config.websocket import (
    WS_KEY_TYPE,
    WS_KEY_PAYLOAD,
    WS_KEY_TIMESTAMP,
    WS_FLAT_TYPES,
    WS_TYPE_SUBSCRIBE,
    WS_TYPE_UNSUBSCRIBE,
    WS_KEY_CONVERSATION_IDS,
)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _dumps(frame: dict[str, Any]) -> str:
    return orjson.dumps(frame).decode("utf-8")


def encode_frame(msg_type: str, payload: Any) -> str:
    return _dumps({
        WS_KEY_TYPE: msg_type,
        WS_KEY_PAYLOAD: payload,
        WS_KEY_TIMESTAMP: utc_timestamp(),
    })


def encode_flat_frame(msg_type: str, fields: dict[str, Any]) -> str:
    """Encode a frame whose fields sit next to `type` instead of inside a payload."""
    if msg_type not in WS_FLAT_TYPES:
        raise ValueError(f"{msg_type!r} is not a flat frame type")
    frame: dict[str, Any] = {WS_KEY_TYPE: msg_type}
    frame.update({k: v for k, v in fields.items() if v is not None})
    frame[WS_KEY_TIMESTAMP] = utc_timestamp()
    return _dumps(frame)


def encode_subscription_frame(action: str, conversation_ids: Iterable[str]) -> str:
    if action not in {WS_TYPE_SUBSCRIBE, WS_TYPE_UNSUBSCRIBE}:
        raise ValueError(f"unknown subscription action {action!r}")
    return encode_flat_frame(action, {WS_KEY_CONVERSATION_IDS: [str(cid) for cid in conversation_ids]})


def parse_frame(raw: str | bytes | bytearray) -> dict[str, Any]:
    """Decode one inbound frame into a dict with a non-empty string `type`."""
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ProtocolViolationError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ProtocolViolationError("frame must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ProtocolViolationError("frame missing non-empty 'type'")

    msg[WS_KEY_TYPE] = msg_type.strip()
    return msg


__all__ = [
    "encode_flat_frame",
    "encode_frame",
    "encode_subscription_frame",
    "parse_frame",
    "utc_timestamp",
]
