"""
Health scoring: throughput, mean latency, error rate and a 0-100 health score
derived from one route's counters.
"""
from typing import NamedTuple

from routepulse.monitoring.store import WINDOW_MS, RouteMetrics

# 200 ms is the reference latency; latency costs 30 points per 200 ms and a
# 100% error rate costs 50 points.
IDEAL_RESPONSE_MS = 200.0
LATENCY_PENALTY = 30.0
ERROR_PENALTY = 50.0
HEALTH_MIN, HEALTH_MAX = 0.0, 100.0


class HealthScore(NamedTuple):
    pulse_rate: float
    avg_response_time_ms: float
    error_rate: float
    health: float


def pulse_rate(timestamps, now: float, window_ms: int = WINDOW_MS) -> float:
    """Requests per second over the trailing window ending at `now`."""
    in_window = sum(1 for t in timestamps if now - t < window_ms)
    return in_window / (window_ms / 1000.0)


def compute(metrics: RouteMetrics, now: float, window_ms: int = WINDOW_MS) -> HealthScore:
    """
    Score one route. Pure: the same metrics and `now` give the same result.

    Timestamps are filtered against `now` here, so a route with no recent
    writes still decays to 0 req/s.
    """
    total = metrics.total_requests
    if total > 0:
        avg_ms = metrics.total_time_ms / total
        error_rate = metrics.errors / total
    else:
        avg_ms = 0.0
        error_rate = 0.0
    health = 100.0 - (avg_ms / IDEAL_RESPONSE_MS) * LATENCY_PENALTY - error_rate * ERROR_PENALTY
    health = max(HEALTH_MIN, min(HEALTH_MAX, health))
    return HealthScore(
        pulse_rate=pulse_rate(metrics.recent_timestamps, now, window_ms),
        avg_response_time_ms=avg_ms,
        error_rate=error_rate,
        health=health,
    )
