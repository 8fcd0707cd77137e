"""RoutePulse: per-route request metrics, health scoring and live reporting for FastAPI services."""
from routepulse.monitor import PulseMonitor
from routepulse.monitoring import HealthScore, MetricsStore, Reporter, RouteHealth, RouteMetrics, compute

__all__ = ["HealthScore", "MetricsStore", "PulseMonitor", "Reporter", "RouteHealth", "RouteMetrics", "compute"]
__version__ = "0.1.0"
