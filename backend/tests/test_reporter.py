"""Tests for Reporter: display rounding, console lines and the periodic loop."""
import asyncio
import io
from datetime import datetime
from unittest.mock import patch

import pytest

from routepulse.monitoring.reporter import EMPTY_LINE, HEADER, Reporter, _round_half_up
from routepulse.monitoring.store import MAX_DURATION_MS


def test_round_half_up():
    assert _round_half_up(92.5, 0) == 93
    assert _round_half_up(73.5, 0) == 74
    assert _round_half_up(0.125, 2) == 0.13
    assert _round_half_up(2.45, 1) == 2.5
    assert _round_half_up(0.0, 1) == 0.0


def test_round_half_up_large_and_non_finite_values():
    assert _round_half_up(1e27, 1) == 1e27
    assert _round_half_up(1e308, 2) == 1e308
    assert _round_half_up(float("inf"), 1) == float("inf")


def test_report_single_request_scenario(store):
    store.record("GET /api/users", 200, 50)
    [row] = Reporter(store).report()
    assert row.route == "GET /api/users"
    assert row.avg_response_time_ms == 50.0
    assert row.error_rate == 0.0
    assert row.health == 93
    assert row.total_requests == 1
    assert row.total_errors == 0
    assert row.pulse_rate == 0.03  # 1/30 rounded
    datetime.fromisoformat(row.last_updated)


def test_report_survives_huge_durations(store):
    for _ in range(2):
        store.record("GET /slow", 200, 1e27)
        store.record("GET /overflow", 200, 1e308)
    rows = {row.route: row for row in Reporter(store).report()}
    for route in ("GET /slow", "GET /overflow"):
        assert rows[route].avg_response_time_ms == MAX_DURATION_MS
        assert rows[route].health == 0
    Reporter(store).render(io.StringIO())


def test_report_error_scenario(store):
    store.record("POST /api/auth", 401, 10)
    store.record("POST /api/auth", 200, 10)
    [row] = Reporter(store).report()
    assert row.total_requests == 2
    assert row.total_errors == 1
    assert row.avg_response_time_ms == 10.0
    assert row.error_rate == 50.0  # percent
    assert row.health == 74  # 73.5 rounded half-up


def test_report_only_includes_recorded_routes_sorted(store):
    store.record("POST /b", 200, 1)
    store.record("GET /a", 200, 1)
    routes = [row.route for row in Reporter(store).report()]
    assert routes == ["GET /a", "POST /b"]


def test_report_empty_store(store):
    assert Reporter(store).report() == []


def test_report_serializes_camel_case(store):
    store.record("GET /x", 500, 123.45)
    data = Reporter(store).report()[0].model_dump(by_alias=True)
    assert set(data) == {
        "route",
        "pulseRate",
        "avgResponseTimeMs",
        "errorRate",
        "health",
        "totalRequests",
        "totalErrors",
        "lastUpdated",
    }
    assert data["avgResponseTimeMs"] == 123.5
    assert data["errorRate"] == 100.0
    assert data["health"] == 31  # 100 - 18.5175 - 50 = 31.48


def test_report_does_not_mutate_store(store, clock):
    store.record("GET /x", 200, 1)
    before = store.snapshot()
    clock.advance(60_000)
    Reporter(store).report()
    assert dict(store.snapshot()) == dict(before)


def test_idle_route_reports_zero_pulse(store, clock):
    for _ in range(30):
        store.record("GET /busy", 200, 1)
    reporter = Reporter(store)
    assert reporter.report()[0].pulse_rate == 1.0
    clock.advance(31_000)
    row = reporter.report()[0]
    assert row.pulse_rate == 0.0
    assert row.total_requests == 30


# --- Console rendering ---


def test_render_lines_format(store):
    store.record("GET /api/users", 200, 50)
    assert Reporter(store).render_lines() == ["GET /api/users — 0.03 req/s | avg 50.0ms | health 93%"]


def test_render_writes_header_and_lines(store):
    store.record("GET /a", 200, 10)
    out = io.StringIO()
    Reporter(store).render(out)
    lines = out.getvalue().splitlines()
    assert lines[0] == HEADER
    assert lines[1].startswith("GET /a — ")


def test_render_empty_store(store):
    out = io.StringIO()
    Reporter(store, stream=out).render()
    assert out.getvalue().splitlines() == [HEADER, EMPTY_LINE]


# --- Periodic loop ---


def test_loop_renders_until_stopped(store):
    out = io.StringIO()
    reporter = Reporter(store, interval_ms=10, stream=out)
    store.record("GET /loop", 200, 5)

    async def scenario():
        task = reporter.start()
        assert reporter.running
        assert reporter.start() is task
        await asyncio.sleep(0.1)
        await reporter.stop()
        assert not reporter.running
        assert task.done()

    asyncio.run(scenario())
    text = out.getvalue()
    assert text.count(HEADER) >= 2
    assert "GET /loop — " in text
    # Stopping leaves the store intact and writable
    store.record("GET /loop", 200, 5)
    assert store.snapshot()["GET /loop"].total_requests == 2


def test_start_uses_given_interval(store):
    reporter = Reporter(store, stream=io.StringIO())

    async def scenario():
        reporter.start(250)
        await reporter.stop()

    asyncio.run(scenario())
    assert reporter.interval_ms == 250


def test_start_rejects_non_positive_interval(store):
    reporter = Reporter(store)

    async def scenario():
        with pytest.raises(ValueError):
            reporter.start(0)

    asyncio.run(scenario())
    assert not reporter.running


def test_start_requires_running_loop(store):
    with pytest.raises(RuntimeError):
        Reporter(store).start()


def test_stop_when_not_running_is_noop(store):
    asyncio.run(Reporter(store).stop())


def test_loop_survives_render_errors(store, caplog):
    reporter = Reporter(store, interval_ms=10, stream=io.StringIO())
    calls = []

    def flaky_render(stream=None):
        calls.append(stream)
        raise OSError("stream closed")

    async def scenario():
        with patch.object(reporter, "render", side_effect=flaky_render):
            reporter.start()
            await asyncio.sleep(0.08)
            await reporter.stop()

    asyncio.run(scenario())
    assert len(calls) >= 2
    assert "reporter_render_error" in caplog.text
