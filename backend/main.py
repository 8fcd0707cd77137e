"""
Demo FastAPI service monitored by RoutePulse.

Run with: uvicorn main:app --reload  (from the backend directory)
Dashboard: http://localhost:8000/pulse/dashboard
"""
import asyncio
import logging
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from routepulse import PulseMonitor
from settings import get_settings

settings = get_settings()

# Structured logging: include module and level; handlers can add JSON later
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
monitor = PulseMonitor(interval_ms=settings.pulse_interval_ms, prefix=settings.pulse_prefix)

# Simulated work per route, upper bound in seconds
MAX_DELAY_S = 0.2

USERS = {"1": "Alice", "2": "Bob", "3": "Charlie"}
ORDERS = [{"id": 1, "total": 100}]
DEMO_PASSWORD = "letmein"


class AuthRequest(BaseModel):
    username: str
    password: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.pulse_console_enabled:
        monitor.start()
    yield
    await monitor.stop()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
app.state.limiter = limiter
app.state.pulse = monitor
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    """Return consistent JSON error for unhandled exceptions (500). Skip validation/HTTP errors."""
    from fastapi.exceptions import RequestValidationError
    if isinstance(exc, (HTTPException, RequestValidationError)):
        raise exc
    logger.exception("telemetry unhandled_exception path=%s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again later."},
    )


# Tracking middleware + /pulse/api + /pulse/dashboard
monitor.install(app)


async def _simulate_work(max_delay_s: float = MAX_DELAY_S) -> None:
    await asyncio.sleep(random.random() * max_delay_s)


@app.get("/favicon.ico", include_in_schema=False)
@limiter.exempt
def favicon(request: Request):
    """Return 204 so browser favicon requests don't log 404."""
    return Response(status_code=204)


@app.get("/health")
@limiter.exempt
def health(request: Request):
    return {"status": "ok"}


@app.get("/api/users")
@limiter.limit(settings.rate_limit)
async def list_users(request: Request):
    await _simulate_work()
    return {"users": list(USERS.values())}


@app.get("/api/users/{user_id}")
@limiter.limit(settings.rate_limit)
async def get_user(request: Request, user_id: str):
    await _simulate_work()
    name = USERS.get(user_id)
    if name is None:
        raise HTTPException(status_code=404, detail=f"user {user_id} not found")
    return {"id": user_id, "name": name}


@app.get("/api/orders")
@limiter.limit(settings.rate_limit)
async def list_orders(request: Request):
    await _simulate_work(0.15)
    return {"orders": ORDERS}


@app.post("/api/auth")
@limiter.limit(settings.rate_limit)
async def authenticate(request: Request, body: AuthRequest):
    if body.password != DEMO_PASSWORD:
        logger.info("telemetry route=auth result=rejected username=%s", body.username)
        raise HTTPException(status_code=401, detail="Unauthorized")
    await _simulate_work(0.3)
    return {"token": f"demo-{body.username}"}
