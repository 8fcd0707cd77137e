from routepulse.monitoring.health import HealthScore, compute
from routepulse.monitoring.models import RouteHealth
from routepulse.monitoring.reporter import Reporter
from routepulse.monitoring.store import WINDOW_MS, MetricsStore, RouteMetrics

__all__ = ["HealthScore", "MetricsStore", "Reporter", "RouteHealth", "RouteMetrics", "WINDOW_MS", "compute"]
