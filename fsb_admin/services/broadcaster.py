"""
Live Stats Broadcaster: periodic stats push over a WebSocket.

One loop per connection: sleep, recompute stats with a fresh session,
push. The loop body is sequential, so a connection never has more than
one push in flight. A failed push means the observer is gone and ends the
loop without being treated as an error.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from fastapi import WebSocket
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fsb_admin.errors import StoreUnavailable
from fsb_admin.services.cache_metrics import CacheMetrics
from fsb_admin.services.clock import Clock, SystemClock
from fsb_admin.services.registry_service import RegistryService
from fsb_admin.structured_logging import SubsystemLogger, broadcast_log

DEFAULT_INTERVAL_SECONDS = 5.0


class StatsBroadcaster:
    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        interval: float = DEFAULT_INTERVAL_SECONDS,
        clock: Optional[Clock] = None,
        cache_metrics: Optional[CacheMetrics] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        log: Optional[SubsystemLogger] = None,
    ):
        self.session_maker = session_maker
        self.interval = interval
        self.clock = clock or SystemClock()
        self.cache_metrics = cache_metrics
        self._sleep = sleep
        self.log = log or broadcast_log

    async def snapshot(self) -> dict:
        async with self.session_maker() as db:
            registry = RegistryService(
                db, clock=self.clock, cache_metrics=self.cache_metrics
            )
            stats = await registry.get_stats()
        return stats.model_dump()

    async def run(self, websocket: WebSocket) -> int:
        """Push stats every interval until a push fails. Returns pushes delivered."""
        pushes = 0
        self.log.info("Observer connected", {"interval": self.interval})

        while True:
            await self._sleep(self.interval)

            try:
                payload = await self.snapshot()
            except StoreUnavailable as e:
                # Skip the tick; the observer keeps its last snapshot
                self.log.warning("Stats tick skipped", {"error": e.message})
                continue

            try:
                await websocket.send_json(payload)
            except Exception as e:
                self.log.debug("Observer gone, stopping", {"error": repr(e), "pushes": pushes})
                break
            pushes += 1

        return pushes
