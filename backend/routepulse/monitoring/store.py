"""
In-memory per-route request metrics.

One MetricsStore holds every route's counters and its 30-second window of
recent completion timestamps. Writers call record() once per completed
request; readers call snapshot() and get immutable copies.
"""
import logging
import math
import time
from collections import deque
from collections.abc import Callable, Mapping
from threading import Lock
from types import MappingProxyType
from typing import NamedTuple

logger = logging.getLogger(__name__)

WINDOW_MS = 30_000
STATUS_MIN, STATUS_MAX = 100, 599
ERROR_STATUS = 400
# One day; longer durations are clamped so cumulative totals stay finite
MAX_DURATION_MS = 86_400_000.0


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class RouteMetrics(NamedTuple):
    """Point-in-time copy of one route's counters."""

    total_requests: int
    total_time_ms: float
    errors: int
    recent_timestamps: tuple[float, ...]


class _RouteCounters:
    """Mutable accumulator for one route. Only touched under the store lock."""

    __slots__ = ("total_requests", "total_time_ms", "errors", "recent")

    def __init__(self):
        self.total_requests = 0
        self.total_time_ms = 0.0
        self.errors = 0
        self.recent: deque[float] = deque()

    def freeze(self) -> RouteMetrics:
        return RouteMetrics(
            total_requests=self.total_requests,
            total_time_ms=self.total_time_ms,
            errors=self.errors,
            recent_timestamps=tuple(self.recent),
        )


def _normalize_status(status) -> int | None:
    """Coerce a status code into 100..599. None means the value is unusable."""
    if isinstance(status, bool):
        return None
    try:
        code = int(status)
    except (TypeError, ValueError, OverflowError):
        return None
    return max(STATUS_MIN, min(STATUS_MAX, code))


def _normalize_duration(duration_ms) -> float:
    """Negative, NaN, infinite or non-numeric durations count as 0 ms; huge ones are capped at MAX_DURATION_MS."""
    if isinstance(duration_ms, bool):
        return 0.0
    try:
        value = float(duration_ms)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0.0
    return min(value, MAX_DURATION_MS)


class MetricsStore:
    """
    Thread-safe mapping of route key -> counters.

    A single lock guards the mapping and every entry, so an update (counters,
    timestamp append, window eviction) is atomic and first-write creation
    cannot produce duplicate entries.
    """

    def __init__(self, clock: Callable[[], float] | None = None, window_ms: int = WINDOW_MS):
        self._clock = clock or _monotonic_ms
        self._window_ms = window_ms
        self._routes: dict[str, _RouteCounters] = {}
        self._lock = Lock()

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def now(self) -> float:
        """Current clock reading in milliseconds."""
        return self._clock()

    def record(self, route: str, status: int, duration_ms: float) -> None:
        """Record one completed request. Never raises; unusable input is logged and dropped."""
        if not isinstance(route, str) or not route:
            logger.warning("telemetry record_dropped reason=empty_route route=%r", route)
            return
        code = _normalize_status(status)
        if code is None:
            logger.warning("telemetry record_dropped reason=invalid_status route=%s status=%r", route, status)
            return
        duration = _normalize_duration(duration_ms)
        with self._lock:
            # Read the clock under the lock so the window stays ordered
            now = self._clock()
            cutoff = now - self._window_ms
            entry = self._routes.get(route)
            if entry is None:
                entry = self._routes[route] = _RouteCounters()
            entry.total_requests += 1
            entry.total_time_ms += duration
            if code >= ERROR_STATUS:
                entry.errors += 1
            entry.recent.append(now)
            # Keep now - t < window, same rule the scorer uses at read time
            while entry.recent and entry.recent[0] <= cutoff:
                entry.recent.popleft()

    def snapshot(self) -> Mapping[str, RouteMetrics]:
        """Return a read-only mapping of consistent per-route copies."""
        with self._lock:
            frozen = {route: entry.freeze() for route, entry in self._routes.items()}
        return MappingProxyType(frozen)

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)

    def __contains__(self, route: object) -> bool:
        with self._lock:
            return route in self._routes
