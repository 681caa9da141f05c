"""
Clock and identifier capabilities injected into the registry and broadcaster.
"""

import threading
import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current time as a naive UTC datetime."""
        ...


class SystemClock:
    """Wall clock, naive UTC to match the stored timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class IdGenerator(Protocol):
    def next_id(self) -> str:
        ...


class MonotonicIdGenerator:
    """
    Bot identifiers derived from the nanosecond clock.

    Values are strictly increasing within a process even when the clock
    stalls or steps backwards: each id is max(time_ns, previous + 1).
    """

    def __init__(self, time_source=time.time_ns):
        self._time_source = time_source
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = max(self._time_source(), self._last + 1)
            self._last = value
        return str(value)


_system_clock = SystemClock()
_id_generator = MonotonicIdGenerator()


def get_clock() -> Clock:
    """FastAPI dependency - override in tests to freeze time."""
    return _system_clock


def get_id_generator() -> IdGenerator:
    return _id_generator
