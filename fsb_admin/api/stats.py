"""
Stats endpoints: one-shot counters and the live WebSocket feed.

WebSocket protocol (/api/ws):
  Server sends one JSON stats object per tick, no envelope:
    { "active_bots": 1, "total_files": 4, "active_links": 2,
      "cache_size_gb": null, "cache_free_space_percent": null,
      "cache_status": "unknown" }
  The client sends nothing. Closing the socket ends the feed.

Authentication:
  When an admin key is configured, connect with ?key=ADMIN_KEY.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket

from fsb_admin.api.deps import require_admin, get_registry, get_broadcaster, admin_key_is_valid
from fsb_admin.schemas import StatsResponse
from fsb_admin.services.broadcaster import StatsBroadcaster
from fsb_admin.services.registry_service import RegistryService
from fsb_admin.structured_logging import api_log

router = APIRouter(tags=["Statistics"], dependencies=[Depends(require_admin)])

# WebSocket auth is checked in the handler, not through the header guard
ws_router = APIRouter(tags=["Statistics"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(registry: RegistryService = Depends(get_registry)):
    """Active bots, file totals, active links and cache usage."""
    return await registry.get_stats()


@ws_router.websocket("/ws")
async def ws_stats(
    websocket: WebSocket,
    key: Optional[str] = Query(None),
    broadcaster: StatsBroadcaster = Depends(get_broadcaster),
):
    await websocket.accept()

    if not admin_key_is_valid(key):
        await websocket.close(code=4001, reason="Unauthorized")
        return

    pushes = await broadcaster.run(websocket)
    api_log.info("[WS] Stats observer disconnected", {"pushes": pushes})
