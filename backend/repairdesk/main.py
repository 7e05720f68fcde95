# backend/repairdesk/main.py
"""
RepairDesk scheduling API.

Run locally with:
    uvicorn repairdesk.main:app --reload
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from .core.config import settings
from .core.constants import API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .routes.v1 import admin_schedule, admin_slots, appointments, availability, health, prometheus

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        f"Starting {BRAND_NAME} API {API_VERSION} ({settings.environment}), "
        f"business timezone {settings.business_timezone}, {settings.slot_duration_minutes} minute slots"
    )
    if not settings.admin_api_token.get_secret_value():
        logger.warning("ADMIN_API_TOKEN is not set; admin endpoints will reject all requests")
    yield
    logger.info(f"Shutting down {BRAND_NAME} API")


def create_app() -> FastAPI:
    application = FastAPI(
        title=f"{BRAND_NAME} API",
        description="Appointment availability and booking for a repair shop",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    register_error_handlers(application)

    # Create API v1 router
    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(availability.router, prefix="/public/availability")
    api_v1.include_router(appointments.router, prefix="/appointments")
    api_v1.include_router(admin_schedule.router, prefix="/admin")
    api_v1.include_router(admin_slots.router, prefix="/admin/slots")
    application.include_router(api_v1)

    application.include_router(health.router, prefix="/health")
    application.include_router(prometheus.router, prefix="/metrics")
    return application


app = create_app()
