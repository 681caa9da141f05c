"""
Tests for the Live Stats Broadcaster loop, driven with a fake socket and
a fake sleep so no real time passes.
"""

import asyncio

import pytest
import pytest_asyncio

from fsb_admin.db import init_db, drop_db, async_session_maker
from fsb_admin.errors import StoreUnavailable
from fsb_admin.schemas import BotCreate
from fsb_admin.services.broadcaster import StatsBroadcaster
from fsb_admin.services.registry_service import RegistryService


class FakeWebSocket:
    """Accepts `accept_count` pushes, then behaves like a closed socket."""

    def __init__(self, accept_count: int):
        self.accept_count = accept_count
        self.sent = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def send_json(self, data):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if len(self.sent) >= self.accept_count:
                raise RuntimeError('Cannot call "send" once a close message has been sent.')
            self.sent.append(data)
        finally:
            self.in_flight -= 1


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float):
        self.calls.append(seconds)


@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    """Create a fresh database for each test"""
    await init_db()
    yield
    await drop_db()


@pytest.fixture
def sleep():
    return RecordingSleep()


async def register_bots(count: int):
    async with async_session_maker() as db:
        registry = RegistryService(db)
        for i in range(count):
            await registry.add_bot(BotCreate(token=f"token-{i}", channel_id="-100"))


@pytest.mark.asyncio
async def test_pushes_until_send_fails(sleep):
    websocket = FakeWebSocket(accept_count=3)
    broadcaster = StatsBroadcaster(async_session_maker, interval=5.0, sleep=sleep)

    pushes = await broadcaster.run(websocket)

    assert pushes == 3
    assert len(websocket.sent) == 3
    # One wait before every attempt, including the one that failed
    assert sleep.calls == [5.0] * 4


@pytest.mark.asyncio
async def test_payload_is_plain_stats_object(sleep):
    await register_bots(2)
    websocket = FakeWebSocket(accept_count=1)
    broadcaster = StatsBroadcaster(async_session_maker, interval=1.0, sleep=sleep)

    await broadcaster.run(websocket)

    assert websocket.sent == [{
        "active_bots": 2,
        "total_files": 0,
        "active_links": 0,
        "cache_size_gb": None,
        "cache_free_space_percent": None,
        "cache_status": "unknown",
    }]


@pytest.mark.asyncio
async def test_each_tick_recomputes(sleep):
    websocket = FakeWebSocket(accept_count=2)
    broadcaster = StatsBroadcaster(async_session_maker, interval=1.0, sleep=sleep)

    original_send = websocket.send_json

    async def send_then_register(data):
        await original_send(data)
        if len(websocket.sent) == 1:
            await register_bots(1)

    websocket.send_json = send_then_register
    await broadcaster.run(websocket)

    assert [p["active_bots"] for p in websocket.sent] == [0, 1]


@pytest.mark.asyncio
async def test_single_push_in_flight(sleep):
    websocket = FakeWebSocket(accept_count=5)
    broadcaster = StatsBroadcaster(async_session_maker, interval=0.0, sleep=sleep)

    await broadcaster.run(websocket)

    assert websocket.max_in_flight == 1


@pytest.mark.asyncio
async def test_store_error_skips_tick(sleep):
    class FlakyBroadcaster(StatsBroadcaster):
        failures = 1

        async def snapshot(self):
            if self.failures:
                self.failures -= 1
                raise StoreUnavailable("database is locked")
            return await super().snapshot()

    websocket = FakeWebSocket(accept_count=1)
    broadcaster = FlakyBroadcaster(async_session_maker, interval=1.0, sleep=sleep)

    pushes = await broadcaster.run(websocket)

    assert pushes == 1
    # failed tick, delivered tick, tick whose push failed
    assert len(sleep.calls) == 3


@pytest.mark.asyncio
async def test_cancellation_propagates():
    websocket = FakeWebSocket(accept_count=100)
    broadcaster = StatsBroadcaster(async_session_maker, interval=60.0)

    task = asyncio.create_task(broadcaster.run(websocket))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert websocket.sent == []


@pytest.mark.asyncio
async def test_cache_provider_error_still_pushes(sleep):
    class CrashingCacheMetrics:
        def measure(self):
            raise RuntimeError("metrics backend exploded")

    websocket = FakeWebSocket(accept_count=2)
    broadcaster = StatsBroadcaster(
        async_session_maker, interval=1.0, cache_metrics=CrashingCacheMetrics(), sleep=sleep
    )

    pushes = await broadcaster.run(websocket)

    assert pushes == 2
    assert all(p["cache_status"] == "unknown" for p in websocket.sent)
