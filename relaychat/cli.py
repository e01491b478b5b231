"""Command-line listener: connect, subscribe and print inbound events as JSON lines."""

from __future__ import annotations

import os
import sys
import asyncio
import argparse
import contextlib
from typing import Any

import orjson

from relaychat.client import ChatClient
from relaychat.runtime.logging import configure_logging
from relaychat.errors import ConnectAbortedError, RetriesExhaustedError, AuthenticationUnavailableError
from relaychat.events.taxonomy import EVENT_ERROR, INBOUND_EVENTS, LIFECYCLE_EVENTS, EVENT_DISCONNECTED

ENV_TOKEN = "RELAYCHAT_TOKEN"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="relaychat", description="Listen to a realtime chat endpoint")
    p.add_argument("url", help="ws:// or wss:// endpoint")
    p.add_argument("--token", default=os.getenv(ENV_TOKEN), help=f"Auth token (default: ${ENV_TOKEN})")
    p.add_argument(
        "--conversation",
        action="append",
        default=[],
        metavar="ID",
        help="Conversation to subscribe to; repeatable",
    )
    p.add_argument("--no-reconnect", action="store_true", help="Do not reconnect after the connection drops")
    p.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return p.parse_args(argv)


def format_event(event: str, args: tuple[Any, ...]) -> str:
    """Render one callback invocation as a single JSON line."""
    values = [str(arg) if isinstance(arg, BaseException) else arg for arg in args]
    data: Any = values[0] if len(values) == 1 else values
    return orjson.dumps({"event": event, "data": data}, default=str).decode("utf-8")


def _printer(event: str):
    def _print(*args: Any) -> None:
        print(format_event(event, args), flush=True)

    return _print


async def run(args: argparse.Namespace) -> int:
    client = ChatClient(
        args.url,
        token=args.token,
        auto_reconnect=False if args.no_reconnect else None,
        resubscribe=True,
    )
    for event in (*LIFECYCLE_EVENTS, *INBOUND_EVENTS):
        client.on(event, _printer(event))

    done = asyncio.Event()
    if args.no_reconnect:
        client.on(EVENT_DISCONNECTED, lambda *_: done.set())

    def _on_error(exc: Exception) -> None:
        # Terminal: no reconnect is pending after either.
        if isinstance(exc, (RetriesExhaustedError, AuthenticationUnavailableError)):
            done.set()

    client.on(EVENT_ERROR, _on_error)

    if args.conversation:
        client.subscribe_to_conversations(args.conversation)
    try:
        await client.connect()
    except ConnectAbortedError:
        return 1
    except Exception as exc:
        print(format_event("error", (exc,)), file=sys.stderr, flush=True)
        if args.no_reconnect or not client.connection.reconnect_pending:
            client.disconnect()
            await client.wait_closed()
            return 1

    try:
        await done.wait()
    finally:
        client.disconnect()
        await client.wait_closed()
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)
    code = 130
    with contextlib.suppress(KeyboardInterrupt):
        code = asyncio.run(run(args))
    raise SystemExit(code)


__all__ = ["format_event", "main", "parse_args", "run"]
