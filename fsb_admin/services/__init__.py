from fsb_admin.services.clock import (
    Clock, SystemClock, IdGenerator, MonotonicIdGenerator, get_clock, get_id_generator
)
from fsb_admin.services.cache_metrics import (
    CacheMetrics, CacheUsage, DirectoryCacheMetrics, get_cache_metrics
)
from fsb_admin.services.registry_service import RegistryService
from fsb_admin.services.broadcaster import StatsBroadcaster

__all__ = [
    "Clock",
    "SystemClock",
    "IdGenerator",
    "MonotonicIdGenerator",
    "get_clock",
    "get_id_generator",
    "CacheMetrics",
    "CacheUsage",
    "DirectoryCacheMetrics",
    "get_cache_metrics",
    "RegistryService",
    "StatsBroadcaster",
]
