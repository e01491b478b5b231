"""Periodic liveness pings while connected."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Awaitable

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class HeartbeatMonitor:
    """Calls `send_ping` every interval until stopped.

    There is no pong deadline: a dead peer is only noticed when the
    transport reports the closure.
    """

    def __init__(self, *, interval_ms: float, sleep_fn: SleepFn | None = None) -> None:
        self.interval_s = max(0.001, float(interval_ms) / 1000.0)
        self._sleep = sleep_fn or asyncio.sleep
        self._task: asyncio.Task | None = None
        self.pings_sent = 0

    @property
    def running(self) -> bool:
        return self._task is not None

    def start(self, send_ping: Callable[[], None]) -> None:
        self.stop()
        self._task = asyncio.create_task(self._loop(send_ping))

    def stop(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    async def _loop(self, send_ping: Callable[[], None]) -> None:
        try:
            while True:
                await self._sleep(self.interval_s)
                send_ping()
                self.pings_sent += 1
        except asyncio.CancelledError:
            return
        except Exception:
            logger.warning("heartbeat loop exiting due to unexpected error", exc_info=True)


__all__ = ["HeartbeatMonitor"]
