"""Wire protocol configuration and constants."""

from __future__ import annotations

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_PAYLOAD = "payload"
WS_KEY_TIMESTAMP = "timestamp"
WS_KEY_CONVERSATION_IDS = "conversationIds"
WS_KEY_EXECUTION_ID = "executionId"

# Credential query parameter on the connection URI
WS_QUERY_TOKEN = "token"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_CLIENT_REQUEST_REASON = "Client disconnect"

# Outbound frame types
WS_TYPE_PING = "ping"
WS_TYPE_SUBSCRIBE = "subscribe"
WS_TYPE_UNSUBSCRIBE = "unsubscribe"
WS_TYPE_TYPING_START = "typing:start"
WS_TYPE_TYPING_STOP = "typing:stop"
WS_TYPE_PRESENCE_UPDATE = "presence:update"
WS_TYPE_CALL = "call"
WS_TYPE_AGENT_STREAM = "agent:stream"
WS_TYPE_AGENT_STREAM_CANCEL = "agent:stream:cancel"

# Subscription-control frames carry their fields at the top level (no payload).
WS_FLAT_TYPES = frozenset({WS_TYPE_SUBSCRIBE, WS_TYPE_UNSUBSCRIBE, WS_TYPE_AGENT_STREAM, WS_TYPE_AGENT_STREAM_CANCEL})

CALL_ACTIONS = frozenset({"ring", "accept", "reject", "end"})
CALL_TYPES = frozenset({"audio", "video"})
PRESENCE_STATUSES = frozenset({"online", "away", "busy", "offline"})

__all__ = [
    "WS_KEY_TYPE",
    "WS_KEY_PAYLOAD",
    "WS_KEY_TIMESTAMP",
    "WS_KEY_CONVERSATION_IDS",
    "WS_KEY_EXECUTION_ID",
    "WS_QUERY_TOKEN",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_CLIENT_REQUEST_REASON",
    "WS_TYPE_PING",
    "WS_TYPE_SUBSCRIBE",
    "WS_TYPE_UNSUBSCRIBE",
    "WS_TYPE_TYPING_START",
    "WS_TYPE_TYPING_STOP",
    "WS_TYPE_PRESENCE_UPDATE",
    "WS_TYPE_CALL",
    "WS_TYPE_AGENT_STREAM",
    "WS_TYPE_AGENT_STREAM_CANCEL",
    "WS_FLAT_TYPES",
    "CALL_ACTIONS",
    "CALL_TYPES",
    "PRESENCE_STATUSES",
]
