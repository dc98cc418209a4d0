# backend/app/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.routing import APIRoute

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, SERVICE_NAME
from .database import engine
from .errors import register_error_handlers
from .routes import prometheus
from .routes.v1 import bookings as bookings_v1, courts as courts_v1, health as health_v1
from .schemas.main_responses import RootResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{SERVICE_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(
        f"Slot locking {'enabled' if settings.booking_lock_enabled else 'disabled'}; "
        f"weekend days {settings.weekend_days}"
    )
    yield
    logger.info(f"{SERVICE_NAME} API shutting down...")
    engine.dispose()


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)
# Register unified error envelope handlers
register_error_handlers(app)

# API v1 router - all application endpoints live under /api/v1
api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(courts_v1.router, prefix="/courts")
api_v1.include_router(health_v1.router, prefix="/health")
app.include_router(api_v1)

# Prometheus metrics - Standard /metrics/prometheus path for Prometheus scraping
app.include_router(prometheus.router, prefix="/metrics")


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - API information"""
    return RootResponse(
        message=f"Welcome to the {API_TITLE}!",
        version=API_VERSION,
        docs="/docs",
        environment=settings.environment,
    )
