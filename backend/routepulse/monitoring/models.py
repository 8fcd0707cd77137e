"""Pydantic models for per-route health report rows."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RouteHealth(BaseModel):
    """One route's display-ready metrics. Serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    route: str
    pulse_rate: float = Field(ge=0)  # req/s, 2 decimals
    avg_response_time_ms: float = Field(ge=0)  # 1 decimal
    error_rate: float = Field(ge=0, le=100)  # percent, 1 decimal
    health: int = Field(ge=0, le=100)
    total_requests: int = Field(ge=0)
    total_errors: int = Field(ge=0)
    last_updated: str  # ISO-8601 UTC, time the report was built
