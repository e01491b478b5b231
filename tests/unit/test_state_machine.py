from __future__ import annotations

import asyncio
from typing import Any

import pytest

from relaychat.state import ConnectionState, ConnectionSettings
from relaychat.connection.state_machine import ConnectionStateMachine
from tests.utils import FakeOpener, FakeSocket, ManualSleep, settle, decode_sent
from relaychat.errors import (
    ConnectAbortedError,
    RetriesExhaustedError,
    TransportFailureError,
    AuthenticationUnavailableError,
)

URL = "wss://chat.example.com/ws"


def _machine(
    opener: FakeOpener,
    sleep: ManualSleep,
    *,
    token: Any = "secret",
    **overrides: Any,
) -> ConnectionStateMachine:
    options: dict[str, Any] = {"reconnect_interval_ms": 100, "max_reconnect_attempts": 3, "heartbeat_interval_ms": 30000}
    options.update(overrides)
    provider = token if callable(token) else (lambda: token)
    return ConnectionStateMachine(ConnectionSettings(url=URL, **options), provider, opener=opener, sleep_fn=sleep)


def _record(machine: ConnectionStateMachine, *events: str) -> list[tuple[Any, ...]]:
    seen: list[tuple[Any, ...]] = []
    for event in events:
        machine.on(event, lambda *args, _event=event: seen.append((_event, *args)))
    return seen


@pytest.mark.asyncio
async def test_connect_opens_with_token_and_emits_connected() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())
    seen = _record(machine, "connected", "state_change")

    await machine.connect()

    assert opener.urls == [f"{URL}?token=secret"]
    assert machine.state is ConnectionState.CONNECTED
    assert machine.is_connected
    assert machine.heartbeat_running
    assert seen == [
        ("state_change", ConnectionState.DISCONNECTED, ConnectionState.CONNECTING),
        ("state_change", ConnectionState.CONNECTING, ConnectionState.CONNECTED),
        ("connected",),
    ]
    machine.disconnect()


@pytest.mark.asyncio
async def test_connect_while_connected_is_a_no_op() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())

    await machine.connect()
    await machine.connect()

    assert len(opener.urls) == 1
    machine.disconnect()


@pytest.mark.asyncio
async def test_missing_token_fails_without_opening_a_socket() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep(), token=None)

    with pytest.raises(AuthenticationUnavailableError):
        await machine.connect()

    assert opener.urls == []
    assert machine.state is ConnectionState.DISCONNECTED
    assert not machine.reconnect_pending


@pytest.mark.asyncio
async def test_frames_sent_while_offline_are_flushed_first_in_order() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())

    machine.send("typing:start", {"conversationId": "a"})
    machine.send("typing:start", {"conversationId": "b"})
    assert machine.pending_frames == 2

    await machine.connect()
    machine.send("typing:start", {"conversationId": "c"})
    await settle()

    sent = decode_sent(opener.sockets[0])
    assert [f["payload"]["conversationId"] for f in sent] == ["a", "b", "c"]
    assert machine.pending_frames == 0
    machine.disconnect()


@pytest.mark.asyncio
async def test_inbound_frames_are_dispatched() -> None:
    socket = FakeSocket()
    machine = _machine(FakeOpener(socket), ManualSleep())
    seen = _record(machine, "typing:start")

    await machine.connect()
    socket.feed('{"type": "typing:start", "payload": {"conversationId": "c1", "userId": "u1"}}')
    socket.feed("garbage")
    socket.feed('{"type": "typing:start", "payload": {"conversationId": "c2", "userId": "u1"}}')
    await settle()

    assert [args[1].conversation_id for args in seen] == ["c1", "c2"]
    assert machine.dispatcher.dropped == 1
    machine.disconnect()


@pytest.mark.asyncio
async def test_heartbeat_sends_ping_frames() -> None:
    opener = FakeOpener()
    sleep = ManualSleep()
    machine = _machine(opener, sleep)

    await machine.connect()
    await settle()
    assert sleep.release(30.0)
    await settle()

    sent = decode_sent(opener.sockets[0])
    assert [f["type"] for f in sent] == ["ping"]
    assert sent[0]["payload"] == {}
    machine.disconnect()


@pytest.mark.asyncio
async def test_disconnect_is_idempotent_and_closes_with_client_code() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())
    seen = _record(machine, "disconnected")

    await machine.connect()
    machine.disconnect()
    machine.disconnect()
    await machine.wait_closed()

    socket = opener.sockets[0]
    assert socket.close_code == 1000
    assert socket.close_reason == "Client disconnect"
    assert seen == [("disconnected", "Client disconnect")]
    assert machine.state is ConnectionState.DISCONNECTED
    assert not machine.heartbeat_running
    assert not machine.reconnect_pending


@pytest.mark.asyncio
async def test_disconnect_discards_queued_frames() -> None:
    machine = _machine(FakeOpener(), ManualSleep())
    machine.send("typing:start", {"conversationId": "a"})

    machine.disconnect()

    assert machine.pending_frames == 0


@pytest.mark.asyncio
async def test_transport_drop_schedules_reconnect_and_flushes_queue_on_reopen() -> None:
    first, second = FakeSocket(), FakeSocket()
    opener = FakeOpener(first, second)
    sleep = ManualSleep()
    machine = _machine(opener, sleep)
    seen = _record(machine, "disconnected", "reconnecting", "connected")

    await machine.connect()
    first.drop(1006, "gone")
    await settle()

    assert machine.state is ConnectionState.RECONNECTING
    assert machine.reconnect_pending
    assert seen[1:] == [("disconnected", "1006 gone"), ("reconnecting", 1, 100.0)]

    machine.send("typing:stop", {"conversationId": "queued"})
    assert sleep.release(0.1)
    await settle()

    assert machine.state is ConnectionState.CONNECTED
    assert machine.reconnect_attempts == 0
    assert [f["payload"]["conversationId"] for f in decode_sent(second)] == ["queued"]
    assert seen[-1] == ("connected",)
    assert len(opener.urls) == 2
    machine.disconnect()


@pytest.mark.asyncio
async def test_failed_reconnects_back_off_and_give_up_once() -> None:
    sleep = ManualSleep()
    opener = FakeOpener(FakeSocket(), OSError("refused"), OSError("refused"), OSError("refused"))
    machine = _machine(opener, sleep)
    seen = _record(machine, "reconnecting", "error", "disconnected")

    await machine.connect()
    opener.sockets[0].drop()
    await settle()

    for delay_s in (0.1, 0.15, 0.225):
        assert sleep.release(delay_s)
        await settle()

    reconnecting = [args[1:] for args in seen if args[0] == "reconnecting"]
    errors = [args[1] for args in seen if args[0] == "error"]
    assert reconnecting == [(1, 100.0), (2, 150.0), (3, 225.0)]
    assert len(errors) == 1
    assert isinstance(errors[0], RetriesExhaustedError)
    assert errors[0].attempts == 3
    assert [args for args in seen if args[0] == "disconnected"] == [("disconnected", "1006")]
    assert machine.state is ConnectionState.DISCONNECTED
    assert not machine.reconnect_pending


@pytest.mark.asyncio
async def test_open_failure_on_connect_raises_and_schedules_retry() -> None:
    sleep = ManualSleep()
    machine = _machine(FakeOpener(OSError("refused")), sleep)
    seen = _record(machine, "reconnecting", "disconnected")

    with pytest.raises(TransportFailureError):
        await machine.connect()

    assert machine.state is ConnectionState.RECONNECTING
    assert machine.reconnect_pending
    assert seen == [("reconnecting", 1, 100.0)]
    machine.disconnect()
    assert not machine.reconnect_pending


@pytest.mark.asyncio
async def test_no_reconnect_when_disabled() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep(), auto_reconnect=False)
    seen = _record(machine, "disconnected", "reconnecting", "error")

    await machine.connect()
    opener.sockets[0].drop(1011, "server error")
    await settle()

    assert machine.state is ConnectionState.DISCONNECTED
    assert seen == [("disconnected", "1011 server error")]
    assert not machine.reconnect_pending


@pytest.mark.asyncio
async def test_zero_attempt_budget_gives_up_immediately() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep(), max_reconnect_attempts=0)
    seen = _record(machine, "error")

    await machine.connect()
    opener.sockets[0].drop()
    await settle()

    assert machine.state is ConnectionState.DISCONNECTED
    assert len(seen) == 1
    assert seen[0][1].attempts == 0


@pytest.mark.asyncio
async def test_token_disappearing_during_reconnect_is_reported() -> None:
    tokens = iter(["first", None])
    opener = FakeOpener()
    sleep = ManualSleep()
    machine = _machine(opener, sleep, token=lambda: next(tokens))
    seen = _record(machine, "error")

    await machine.connect()
    opener.sockets[0].drop()
    await settle()
    assert sleep.release(0.1)
    await settle()

    assert len(opener.urls) == 1
    assert machine.state is ConnectionState.DISCONNECTED
    assert len(seen) == 1
    assert isinstance(seen[0][1], AuthenticationUnavailableError)
    assert not machine.reconnect_pending


@pytest.mark.asyncio
async def test_disconnect_during_token_fetch_aborts_connect() -> None:
    release = asyncio.Event()
    opener = FakeOpener()

    async def slow_token() -> str:
        await release.wait()
        return "late"

    machine = _machine(opener, ManualSleep(), token=slow_token)
    seen = _record(machine, "connected", "disconnected")

    task = asyncio.create_task(machine.connect())
    await settle()
    assert machine.state is ConnectionState.CONNECTING

    machine.disconnect()
    release.set()
    with pytest.raises(ConnectAbortedError):
        await task

    assert opener.urls == []
    assert machine.state is ConnectionState.DISCONNECTED
    assert seen == []


@pytest.mark.asyncio
async def test_stale_reconnect_timer_is_ignored() -> None:
    opener = FakeOpener()
    sleep = ManualSleep()
    machine = _machine(opener, sleep)

    await machine.connect()
    stale_epoch = machine.epoch
    opener.sockets[0].drop()
    await settle()
    machine.disconnect()
    await machine.connect()
    assert machine.epoch > stale_epoch

    await machine._reconnect_step(stale_epoch)
    await settle()

    assert len(opener.urls) == 2
    assert machine.state is ConnectionState.CONNECTED
    machine.disconnect()


@pytest.mark.asyncio
async def test_stale_socket_close_does_not_touch_new_session() -> None:
    first = FakeSocket()
    opener = FakeOpener(first)
    machine = _machine(opener, ManualSleep())
    seen = _record(machine, "disconnected", "reconnecting")

    await machine.connect()
    machine.disconnect()
    await machine.connect()
    seen.clear()

    first.drop()
    await settle()

    assert machine.state is ConnectionState.CONNECTED
    assert seen == []
    machine.disconnect()


@pytest.mark.asyncio
async def test_write_failure_keeps_frame_for_next_connection() -> None:
    first, second = FakeSocket(), FakeSocket()
    first.fail_sends = True
    opener = FakeOpener(first, second)
    sleep = ManualSleep()
    machine = _machine(opener, sleep)

    await machine.connect()
    machine.send("typing:start", {"conversationId": "keep"})
    await settle()
    assert machine.state is ConnectionState.RECONNECTING

    assert sleep.release(0.1)
    await settle()

    assert [f["payload"]["conversationId"] for f in decode_sent(second)] == ["keep"]
    machine.disconnect()


@pytest.mark.asyncio
async def test_listener_disconnect_during_drop_wins() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())

    def on_state(old: ConnectionState, new: ConnectionState) -> None:
        if new is ConnectionState.RECONNECTING:
            machine.disconnect()

    await machine.connect()
    machine.on("state_change", on_state)
    opener.sockets[0].drop()
    await settle()

    assert machine.state is ConnectionState.DISCONNECTED
    assert not machine.reconnect_pending


@pytest.mark.asyncio
async def test_frames_sent_while_connected_are_written_before_close() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())

    await machine.connect()
    await settle()
    machine.send("presence:update", {"status": "offline"})
    machine.disconnect()
    await machine.wait_closed()

    socket = opener.sockets[0]
    assert [f["type"] for f in decode_sent(socket)] == ["presence:update"]
    assert socket.close_code == 1000
    assert socket.close_reason == "Client disconnect"
    assert machine.pending_frames == 0


@pytest.mark.asyncio
async def test_disconnect_right_after_open_drops_only_offline_frames() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())

    machine.send("typing:start", {"conversationId": "offline"})
    await machine.connect()
    machine.send("typing:start", {"conversationId": "online"})
    machine.disconnect()
    await machine.wait_closed()

    sent = decode_sent(opener.sockets[0])
    assert [f["payload"]["conversationId"] for f in sent] == ["online"]
    assert opener.sockets[0].close_code == 1000


@pytest.mark.asyncio
async def test_disconnect_while_reconnecting_discards_queue() -> None:
    opener = FakeOpener()
    machine = _machine(opener, ManualSleep())

    await machine.connect()
    opener.sockets[0].drop()
    await settle()
    machine.send("typing:start", {"conversationId": "later"})
    machine.disconnect()
    await machine.wait_closed()

    assert decode_sent(opener.sockets[0]) == []
    assert machine.pending_frames == 0
