# backend/app/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from sqlalchemy.orm import Session

from .api.dependencies.database import get_db
from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .middleware.timing import TimingMiddleware
from .routes.v1 import (
    admin as admin_v1,
    bookings as bookings_v1,
    categories as categories_v1,
    consultants as consultants_v1,
    courses as courses_v1,
    enrollments as enrollments_v1,
    health as health_v1,
    partners as partners_v1,
    prometheus as prometheus_v1,
    services as services_v1,
    users as users_v1,
)
from .schemas.main_responses import HealthResponse, RootResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    else:
        init_db()

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


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

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TimingMiddleware)
app.add_middleware(PrometheusMiddleware)

# Create API v1 router
api_v1 = APIRouter(prefix=settings.api_prefix)

# Mount v1 routes
# Static segments such as /consultant/availability are declared before /{id} inside each router
api_v1.include_router(bookings_v1.consultations_router, prefix="/consultations")
api_v1.include_router(bookings_v1.service_bookings_router, prefix="/service-bookings")
api_v1.include_router(courses_v1.router, prefix="/courses")
api_v1.include_router(enrollments_v1.router, prefix="/enrollments")
api_v1.include_router(services_v1.router, prefix="/services")
api_v1.include_router(consultants_v1.router, prefix="/consultants")
api_v1.include_router(categories_v1.router, prefix="/categories")
api_v1.include_router(partners_v1.router, prefix="/partners")
api_v1.include_router(users_v1.router, prefix="/users")
api_v1.include_router(admin_v1.router, prefix="/admin")
api_v1.include_router(health_v1.router, prefix="/health")
api_v1.include_router(prometheus_v1.router)

app.include_router(api_v1)


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - API information"""
    return RootResponse(
        message=f"Welcome to the {BRAND_NAME} API!",
        version=API_VERSION,
        docs="/docs",
        environment=settings.environment,
    )


@app.get("/health", response_model=HealthResponse, include_in_schema=False)
def health_check(response: Response, db: Session = Depends(get_db)) -> HealthResponse:
    return health_v1.health_check(response, db)
