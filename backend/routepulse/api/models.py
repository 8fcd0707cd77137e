"""Pydantic models for the JSON metrics endpoint."""
from typing import Literal

from pydantic import BaseModel

from routepulse.monitoring.models import RouteHealth


class MetricsEnvelope(BaseModel):
    status: Literal["success"] = "success"
    timestamp: str
    metrics: list[RouteHealth]
