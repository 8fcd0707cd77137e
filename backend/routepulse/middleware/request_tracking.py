"""Request tracking middleware: time every request and record it in a MetricsStore under its route pattern."""
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from routepulse.monitoring.store import MetricsStore

logger = logging.getLogger(__name__)

# All requests that matched no route share one key per method
UNMATCHED_ROUTE = "<unmatched>"


def route_key(request: Request) -> str:
    """Build the route key: method plus the matched path template, or UNMATCHED_ROUTE when routing found nothing."""
    route = request.scope.get("route")
    path = getattr(route, "path", None) or UNMATCHED_ROUTE
    return f"{request.method} {path}"


class PulseTrackingMiddleware(BaseHTTPMiddleware):
    """Record method+route, status and duration_ms for each request; skip excluded path prefixes."""

    def __init__(self, app, store: MetricsStore, exclude_prefixes: tuple[str, ...] = ()):
        super().__init__(app)
        self.store = store
        self.exclude_prefixes = tuple(p for p in exclude_prefixes if p)

    def _excluded(self, path: str) -> bool:
        return any(path == p or path.startswith(p.rstrip("/") + "/") for p in self.exclude_prefixes)

    async def dispatch(self, request: Request, call_next):
        if self._excluded(request.url.path):
            return await call_next(request)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            self.store.record(route_key(request), 500, duration_ms)
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        key = route_key(request)
        self.store.record(key, response.status_code, duration_ms)
        logger.debug(
            "telemetry tracked route=%s status=%s duration_ms=%.1f",
            key,
            response.status_code,
            duration_ms,
        )
        return response
