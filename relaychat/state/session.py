"""Per-epoch connection record."""

from __future__ import annotations

import asyncio
from typing import Any
from dataclasses import dataclass


@dataclass(slots=True)
class ConnectionSession:
    """Everything that belongs to one socket lifetime.

    A new record replaces the old one on every connect attempt, so background
    tasks compare their session against the manager's current one before
    touching shared state.
    """

    epoch: int = 0
    socket: Any = None
    reader_task: asyncio.Task | None = None
    writer_task: asyncio.Task | None = None
    closed: bool = False

    def cancel_tasks(self) -> None:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        for task in (self.reader_task, self.writer_task):
            # A task tearing down its own session just returns afterwards.
            if task is not None and task is not current and not task.done():
                task.cancel()
        self.reader_task = None
        self.writer_task = None


__all__ = ["ConnectionSession"]
