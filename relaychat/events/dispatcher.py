"""Inbound frame routing onto typed event channels."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Mapping, Callable

from relaychat.frames import parse_frame
from relaychat.errors import ProtocolViolationError
from relaychat.config.websocket import WS_KEY_TYPE, WS_KEY_PAYLOAD

from .taxonomy import EVENT_TAXONOMY, Decoder

logger = logging.getLogger(__name__)

EmitFn = Callable[..., Any]


class EventDispatcher:
    """Parse raw frames and publish recognised ones.

    Malformed frames are logged and dropped; unknown types are ignored so the
    server can add event types without breaking older clients.
    """

    def __init__(self, emit: EmitFn, *, taxonomy: Mapping[str, Decoder] | None = None) -> None:
        self._emit = emit
        self._taxonomy = EVENT_TAXONOMY if taxonomy is None else taxonomy
        self.dropped = 0

    def dispatch(self, raw: str | bytes | bytearray) -> str | None:
        """Returns the channel the frame was published on, or None."""
        try:
            msg = parse_frame(raw)
        except ProtocolViolationError as exc:
            self.dropped += 1
            logger.warning("dropping malformed frame: %s", exc)
            return None

        msg_type = msg[WS_KEY_TYPE]
        decoder = self._taxonomy.get(msg_type)
        if decoder is None:
            logger.debug("ignoring frame with unrecognised type %r", msg_type)
            return None

        try:
            event = decoder(msg.get(WS_KEY_PAYLOAD))
        except ProtocolViolationError as exc:
            self.dropped += 1
            logger.warning("dropping %r frame with invalid payload: %s", msg_type, exc)
            return None

        self._emit(msg_type, event)
        return msg_type


__all__ = ["EventDispatcher"]
