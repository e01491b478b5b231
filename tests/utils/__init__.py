"""Test doubles for the connection manager.

Focused modules:
- fakes.py: scripted sockets, openers and a manually released sleep
"""

from __future__ import annotations

from .fakes import FakeOpener, FakeSocket, ManualSleep, settle, decode_sent

__all__ = ["FakeOpener", "FakeSocket", "ManualSleep", "decode_sent", "settle"]
