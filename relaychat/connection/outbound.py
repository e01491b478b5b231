"""FIFO of serialized frames waiting for the socket."""

from __future__ import annotations

import asyncio
import logging
import collections
from collections.abc import Callable, Awaitable

logger = logging.getLogger(__name__)

WriteFn = Callable[[str], Awaitable[None]]
# (frame, pushed while the socket was open)
Entry = tuple[str, bool]


class OutboundQueue:
    """Every outbound frame passes through here.

    While a connection is open one writer drains the queue a frame at a time,
    so frames queued during an outage always reach the socket before frames
    issued after the open. Entries remember whether they were pushed while
    connected; only those are handed over for a final flush on disconnect.
    """

    def __init__(self) -> None:
        self._frames: collections.deque[Entry] = collections.deque()
        self._wakeup = asyncio.Event()

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, frame: str, *, live: bool = False) -> None:
        self._frames.append((frame, live))
        self._wakeup.set()

    def push_front(self, entry: Entry) -> None:
        self._frames.appendleft(entry)
        self._wakeup.set()

    def clear(self) -> int:
        dropped = len(self._frames)
        self._frames.clear()
        self._wakeup.clear()
        if dropped:
            logger.info("discarded %s queued frame(s)", dropped)
        return dropped

    def take_live(self) -> list[str]:
        """Empty the queue, returning the frames pushed while connected in order."""
        live = [frame for frame, is_live in self._frames if is_live]
        dropped = len(self._frames) - len(live)
        self._frames.clear()
        self._wakeup.clear()
        if dropped:
            logger.info("discarded %s frame(s) queued while offline", dropped)
        return live

    async def drain(self, write: WriteFn) -> None:
        """Write frames in insertion order until cancelled or a write fails.

        A frame whose write fails goes back to the head of the queue and the
        error propagates to the caller.
        """
        while True:
            if not self._frames:
                self._wakeup.clear()
                await self._wakeup.wait()
                continue
            entry = self._frames.popleft()
            try:
                await write(entry[0])
            except Exception:
                self.push_front(entry)
                raise


__all__ = ["OutboundQueue"]
