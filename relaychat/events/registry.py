"""Named callback channels (on/off/emit)."""

from __future__ import annotations

import asyncio
import inspect
import logging
import collections
from typing import Any
from collections.abc import Callable

logger = logging.getLogger(__name__)

Callback = Callable[..., Any]


class CallbackRegistry:
    """Synchronous publish/subscribe keyed by event name.

    Callbacks run in subscription order. A callback that raises is logged and
    does not stop the ones after it. Coroutine callbacks are scheduled as tasks.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, list[Callback]] = collections.defaultdict(list)
        self._tasks: set[asyncio.Task] = set()

    def on(self, event: str, callback: Callback) -> Callable[[], None]:
        """Subscribe; returns a function that removes this subscription."""
        self._callbacks[event].append(callback)

        def _unsubscribe() -> None:
            self.off(event, callback)

        return _unsubscribe

    def once(self, event: str, callback: Callback) -> Callable[[], None]:
        """Subscribe for a single call; `off(event, callback)` also removes it."""

        def _wrapper(*args: Any) -> Any:
            self.off(event, _wrapper)
            return callback(*args)

        _wrapper.__wrapped__ = callback  # type: ignore[attr-defined]
        return self.on(event, _wrapper)

    def off(self, event: str, callback: Callback | None = None) -> None:
        """Remove one callback, or every callback for `event` when none is given."""
        if callback is None:
            self._callbacks.pop(event, None)
            return
        callbacks = self._callbacks.get(event)
        if not callbacks:
            return
        for index, registered in enumerate(callbacks):
            if registered == callback or getattr(registered, "__wrapped__", None) == callback:
                del callbacks[index]
                break
        else:
            return
        if not callbacks:
            del self._callbacks[event]

    def listener_count(self, event: str) -> int:
        return len(self._callbacks.get(event, ()))

    def emit(self, event: str, *args: Any) -> int:
        """Call every subscriber of `event`; returns how many were called."""
        callbacks = list(self._callbacks.get(event, ()))
        for callback in callbacks:
            try:
                result = callback(*args)
            except Exception:
                logger.exception("listener for %r raised", event)
                continue
            if inspect.isawaitable(result):
                self._track(event, result)
        return len(callbacks)

    def _track(self, event: str, awaitable: Any) -> None:
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)

        def _done(t: asyncio.Task) -> None:
            self._tasks.discard(t)
            if not t.cancelled() and t.exception() is not None:
                logger.error("async listener for %r raised", event, exc_info=t.exception())

        task.add_done_callback(_done)


__all__ = ["CallbackRegistry"]
