"""
RoutePulse endpoints

GET <prefix>/api       - JSON envelope with every route's health
GET <prefix>/dashboard - HTML page polling the JSON endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from routepulse.api.dashboard import render_dashboard
from routepulse.api.models import MetricsEnvelope
from routepulse.monitoring.reporter import Reporter


def build_router(reporter: Reporter, prefix: str = "/pulse") -> APIRouter:
    router = APIRouter(prefix=prefix.rstrip("/"), tags=["RoutePulse"])
    api_url = f"{router.prefix}/api"

    @router.get(
        "/api",
        response_model=MetricsEnvelope,
        summary="Route metrics",
        description="Returns pulse rate, average response time, error rate and health for every tracked route.",
        responses={
            200: {
                "description": "Metrics retrieved successfully",
                "content": {
                    "application/json": {
                        "example": {
                            "status": "success",
                            "timestamp": "2025-06-01T12:00:00+00:00",
                            "metrics": [
                                {
                                    "route": "GET /api/users",
                                    "pulseRate": 1.0,
                                    "avgResponseTimeMs": 50.0,
                                    "errorRate": 0.0,
                                    "health": 93,
                                    "totalRequests": 30,
                                    "totalErrors": 0,
                                    "lastUpdated": "2025-06-01T12:00:00+00:00",
                                }
                            ],
                        }
                    }
                },
            },
        },
    )
    def get_route_metrics():
        return MetricsEnvelope(
            timestamp=datetime.now(timezone.utc).isoformat(),
            metrics=reporter.report(),
        )

    @router.get("/dashboard", response_class=HTMLResponse, include_in_schema=False)
    def get_dashboard():
        return HTMLResponse(render_dashboard(api_url))

    return router
