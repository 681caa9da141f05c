"""Shared API dependencies: admin guard and service wiring."""

import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fsb_admin.config import settings
from fsb_admin.db import get_db, async_session_maker
from fsb_admin.services.broadcaster import StatsBroadcaster
from fsb_admin.services.cache_metrics import CacheMetrics, get_cache_metrics
from fsb_admin.services.clock import Clock, IdGenerator, get_clock, get_id_generator
from fsb_admin.services.registry_service import RegistryService


def admin_key_is_valid(candidate: Optional[str]) -> bool:
    """True when no admin key is configured or the candidate matches it."""
    expected = settings.admin_api_key
    if not expected:
        return True
    if not candidate:
        return False
    return hmac.compare_digest(candidate.encode(), expected.encode())


async def require_admin(x_admin_key: Optional[str] = Header(None)) -> None:
    """FastAPI dependency: reject requests without the configured admin key."""
    if not admin_key_is_valid(x_admin_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin key required",
        )


def get_registry(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    id_generator: IdGenerator = Depends(get_id_generator),
    cache_metrics: Optional[CacheMetrics] = Depends(get_cache_metrics),
) -> RegistryService:
    return RegistryService(
        db,
        clock=clock,
        id_generator=id_generator,
        cache_metrics=cache_metrics,
    )


def get_broadcaster(
    clock: Clock = Depends(get_clock),
    cache_metrics: Optional[CacheMetrics] = Depends(get_cache_metrics),
) -> StatsBroadcaster:
    return StatsBroadcaster(
        async_session_maker,
        interval=settings.stats_interval_seconds,
        clock=clock,
        cache_metrics=cache_metrics,
    )
