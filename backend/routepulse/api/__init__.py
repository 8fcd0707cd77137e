from routepulse.api.models import MetricsEnvelope
from routepulse.api.routes import build_router

__all__ = ["MetricsEnvelope", "build_router"]
