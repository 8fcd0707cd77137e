"""
PulseMonitor: one store plus one reporter, wired into a FastAPI app.

    monitor = PulseMonitor(interval_ms=5000, prefix="/pulse")
    monitor.install(app)         # tracking middleware + /pulse/api + /pulse/dashboard
    monitor.start()              # console loop (needs a running event loop)
"""
import asyncio
from collections.abc import Callable
from typing import TextIO

from fastapi import FastAPI

from routepulse.api.routes import build_router
from routepulse.middleware.request_tracking import PulseTrackingMiddleware
from routepulse.monitoring.models import RouteHealth
from routepulse.monitoring.reporter import DEFAULT_INTERVAL_MS, Reporter
from routepulse.monitoring.store import MetricsStore

DEFAULT_PREFIX = "/pulse"


class PulseMonitor:
    def __init__(
        self,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], float] | None = None,
        stream: TextIO | None = None,
    ):
        self.prefix = prefix.rstrip("/")
        self.store = MetricsStore(clock=clock)
        self.reporter = Reporter(self.store, interval_ms=interval_ms, stream=stream)

    @property
    def interval_ms(self) -> int:
        return self.reporter.interval_ms

    def configure(self, interval_ms: int | None = None) -> "PulseMonitor":
        if interval_ms is not None:
            if interval_ms <= 0:
                raise ValueError("interval_ms must be positive")
            self.reporter.interval_ms = interval_ms
        return self

    def install(self, app: FastAPI) -> FastAPI:
        """Add request tracking and the monitor's own routes (which are not tracked)."""
        app.add_middleware(PulseTrackingMiddleware, store=self.store, exclude_prefixes=(self.prefix,))
        app.include_router(build_router(self.reporter, self.prefix))
        return app

    def record(self, route: str, status: int, duration_ms: float) -> None:
        self.store.record(route, status, duration_ms)

    def get_metrics(self) -> list[RouteHealth]:
        return self.reporter.report()

    def start(self, interval_ms: int | None = None) -> asyncio.Task:
        return self.reporter.start(interval_ms)

    async def stop(self) -> None:
        await self.reporter.stop()
