"""
Cache Metrics: size and free space of the stream cache.

The cache itself belongs to the streaming service; this module only
measures the directory it writes to. When no cache directory is
configured the registry reports cache metrics as unknown.

Measuring walks the whole cache tree, so a measurement is reused for
`max_age` seconds (one stats interval by default). Every observer and
every /api/stats call within that window shares one walk.
"""

import os
import shutil
import threading
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional, Protocol, Tuple

from fsb_admin.config import settings

_BYTES_PER_GB = 1024 ** 3


@dataclass(frozen=True)
class CacheUsage:
    size_gb: float
    free_space_percent: float


class CacheMetrics(Protocol):
    def measure(self) -> CacheUsage:
        ...


class DirectoryCacheMetrics:
    """Measures a cache directory: total file size and free disk space."""

    def __init__(
        self,
        cache_dir: str,
        max_age: float = 0.0,
        time_source: Callable[[], float] = time.monotonic,
    ):
        self.cache_dir = Path(cache_dir)
        self.max_age = max_age
        self._time_source = time_source
        self._lock = threading.Lock()
        self._last: Optional[Tuple[float, CacheUsage]] = None

    def _directory_size(self) -> int:
        total = 0
        for root, _dirs, files in os.walk(self.cache_dir):
            for name in files:
                try:
                    total += os.path.getsize(os.path.join(root, name))
                except FileNotFoundError:
                    # Evicted while walking
                    continue
        return total

    def _scan(self) -> CacheUsage:
        usage = shutil.disk_usage(self.cache_dir)
        size_gb = self._directory_size() / _BYTES_PER_GB
        free_percent = (usage.free / usage.total * 100.0) if usage.total else 0.0
        return CacheUsage(
            size_gb=round(size_gb, 3),
            free_space_percent=round(free_percent, 1),
        )

    def measure(self) -> CacheUsage:
        # Called from worker threads; one walk at a time
        with self._lock:
            now = self._time_source()
            if self._last is not None and now - self._last[0] < self.max_age:
                return self._last[1]
            result = self._scan()
            self._last = (now, result)
            return result


@lru_cache()
def _provider_for(cache_dir: str, max_age: float) -> DirectoryCacheMetrics:
    return DirectoryCacheMetrics(cache_dir, max_age=max_age)


def get_cache_metrics() -> Optional[CacheMetrics]:
    """FastAPI dependency: shared provider for the configured cache dir, or None."""
    if not settings.cache_dir:
        return None
    return _provider_for(settings.cache_dir, settings.stats_interval_seconds)
