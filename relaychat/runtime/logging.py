"""Logging initialization."""

from __future__ import annotations

import os
import logging

from relaychat.config.logging import LOG_LEVEL, LOG_FORMAT


def configure_logging(level: str | None = None) -> None:
    # Frame-level websockets debug output is noisy. Keep it tame unless explicitly enabled.
    if (os.getenv("SHOW_WEBSOCKETS_LOGS") or "").strip().lower() not in {"1", "true", "yes"}:
        logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


__all__ = ["configure_logging"]
