from __future__ import annotations

import pytest

from relaychat.connection.heartbeat import HeartbeatMonitor
from tests.utils import ManualSleep, settle


@pytest.mark.asyncio
async def test_heartbeat_pings_once_per_interval() -> None:
    sleep = ManualSleep()
    pings: list[int] = []
    heartbeat = HeartbeatMonitor(interval_ms=500, sleep_fn=sleep)

    heartbeat.start(lambda: pings.append(1))
    await settle()
    assert sleep.pending == [pytest.approx(0.5)]
    assert pings == []

    sleep.release()
    await settle()
    assert len(pings) == 1
    assert heartbeat.pings_sent == 1

    sleep.release()
    await settle()
    assert len(pings) == 2

    heartbeat.stop()
    await settle()
    assert not heartbeat.running
    assert sleep.pending == []


@pytest.mark.asyncio
async def test_restart_replaces_previous_loop() -> None:
    sleep = ManualSleep()
    first: list[int] = []
    second: list[int] = []
    heartbeat = HeartbeatMonitor(interval_ms=1000, sleep_fn=sleep)

    heartbeat.start(lambda: first.append(1))
    await settle()
    heartbeat.start(lambda: second.append(1))
    await settle()

    assert len(sleep.pending) == 1
    sleep.release()
    await settle()

    assert first == []
    assert second == [1]
    heartbeat.stop()


@pytest.mark.asyncio
async def test_failing_ping_ends_loop() -> None:
    sleep = ManualSleep()

    def boom() -> None:
        raise RuntimeError("nope")

    heartbeat = HeartbeatMonitor(interval_ms=100, sleep_fn=sleep)
    heartbeat.start(boom)
    await settle()
    sleep.release()
    await settle()

    assert sleep.pending == []
    assert heartbeat.pings_sent == 0
    heartbeat.stop()
