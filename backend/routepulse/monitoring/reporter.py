"""
Reporter: turns a store snapshot into display rows, and optionally prints
them to a text stream on a timer.
"""
import asyncio
import logging
import math
import sys
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import TextIO

from routepulse.monitoring.health import compute
from routepulse.monitoring.models import RouteHealth
from routepulse.monitoring.store import MetricsStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 5000
HEADER = "RoutePulse live metrics"
EMPTY_LINE = "no requests recorded yet"


def _round_half_up(value: float, places: int) -> float:
    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        # Enough digits for any finite float at the requested places
        ctx.prec = 400
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_line(row: RouteHealth) -> str:
    return (
        f"{row.route} — {row.pulse_rate:.2f} req/s | "
        f"avg {row.avg_response_time_ms:.1f}ms | health {row.health}%"
    )


class Reporter:
    """Read-only view over a MetricsStore. Never mutates the store."""

    def __init__(self, store: MetricsStore, interval_ms: int = DEFAULT_INTERVAL_MS, stream: TextIO | None = None):
        self.store = store
        self.interval_ms = interval_ms
        self._stream = stream
        self._task: asyncio.Task | None = None

    def report(self) -> list[RouteHealth]:
        """Score every route from one snapshot. Rows are sorted by route key."""
        snapshot = self.store.snapshot()
        now = self.store.now()
        generated_at = datetime.now(timezone.utc).isoformat()
        rows: list[RouteHealth] = []
        for route in sorted(snapshot):
            data = snapshot[route]
            score = compute(data, now, self.store.window_ms)
            rows.append(
                RouteHealth(
                    route=route,
                    pulse_rate=_round_half_up(score.pulse_rate, 2),
                    avg_response_time_ms=_round_half_up(score.avg_response_time_ms, 1),
                    error_rate=_round_half_up(score.error_rate * 100, 1),
                    health=int(_round_half_up(score.health, 0)),
                    total_requests=data.total_requests,
                    total_errors=data.errors,
                    last_updated=generated_at,
                )
            )
        return rows

    def render_lines(self) -> list[str]:
        return [format_line(row) for row in self.report()]

    def render(self, stream: TextIO | None = None) -> None:
        """Write a header and one line per route to `stream` (default: stdout)."""
        out = stream or self._stream or sys.stdout
        lines = self.render_lines() or [EMPTY_LINE]
        out.write("\n".join([HEADER, *lines]) + "\n")
        out.flush()

    # --- Periodic console loop ---

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, interval_ms: int | None = None) -> asyncio.Task:
        """Schedule the console loop on the running event loop. Idempotent while running."""
        if self.running:
            return self._task
        interval = self.interval_ms if interval_ms is None else interval_ms
        if interval <= 0:
            raise ValueError("interval_ms must be positive")
        self.interval_ms = interval
        self._task = asyncio.get_running_loop().create_task(self._run(), name="routepulse-reporter")
        logger.info("telemetry reporter_started interval_ms=%s", self.interval_ms)
        return self._task

    async def stop(self) -> None:
        """Cancel the console loop and wait for it to finish. No-op when not running."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("telemetry reporter_stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_ms / 1000.0)
            try:
                self.render()
            except Exception:
                logger.exception("telemetry reporter_render_error")
