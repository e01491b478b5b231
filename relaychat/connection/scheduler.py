"""Reconnect backoff and the single pending reconnect timer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Awaitable

from relaychat.config.reconnect import RECONNECT_BACKOFF_FACTOR, DEFAULT_MAX_RECONNECT_DELAY_MS

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]
ReconnectStep = Callable[[int], Awaitable[None]]


class ReconnectScheduler:
    """Owns the attempt counter and at most one armed reconnect timer.

    The timer remembers the epoch it was armed for and hands it to the
    reconnect step, which is expected to ignore epochs that were superseded.
    """

    def __init__(
        self,
        *,
        base_interval_ms: float,
        max_attempts: int,
        max_delay_ms: float = DEFAULT_MAX_RECONNECT_DELAY_MS,
        sleep_fn: SleepFn | None = None,
    ) -> None:
        self.base_interval_ms = max(0.0, float(base_interval_ms))
        self.max_attempts = max(0, int(max_attempts))
        self.max_delay_ms = float(max_delay_ms)
        self._sleep = sleep_fn or asyncio.sleep
        self._attempts = 0
        self._task: asyncio.Task | None = None

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def pending(self) -> bool:
        return self._task is not None

    @property
    def exhausted(self) -> bool:
        return self._attempts >= self.max_attempts

    def delay_ms(self, attempt: int) -> float:
        """Backoff for a 1-indexed attempt, capped at max_delay_ms."""
        exponent = max(0, int(attempt) - 1)
        return min(self.base_interval_ms * (RECONNECT_BACKOFF_FACTOR**exponent), self.max_delay_ms)

    def reset(self) -> None:
        self._attempts = 0

    def schedule(self, step: ReconnectStep, epoch: int) -> float | None:
        """Arm the reconnect timer; returns the delay in ms, or None if nothing was armed."""
        if self._task is not None:
            logger.debug("reconnect already pending; ignoring schedule request")
            return None
        if self.exhausted:
            return None

        self._attempts += 1
        delay = self.delay_ms(self._attempts)
        self._task = asyncio.create_task(self._fire(step, epoch, delay / 1000.0))
        return delay

    def cancel(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    async def _fire(self, step: ReconnectStep, epoch: int, delay_s: float) -> None:
        try:
            await self._sleep(delay_s)
        except asyncio.CancelledError:
            return
        # Cleared before the step runs so a failed attempt can arm the next one.
        self._task = None
        try:
            await step(epoch)
        except Exception:
            logger.debug("reconnect step failed", exc_info=True)


__all__ = ["ReconnectScheduler"]
