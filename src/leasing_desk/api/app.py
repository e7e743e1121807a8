"""FastAPI application factory and dependency injection setup."""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from leasing_desk.api.routes import (
    alert_router,
    health_router,
    lease_router,
    property_router,
    reference_router,
    report_router,
    visit_router,
)
from leasing_desk.config import get_settings
from leasing_desk.container import get_container, reset_container
from leasing_desk.exceptions import LeasingDeskError
from leasing_desk.logging_config import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize logging and the container on startup, release them on shutdown."""
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
    )

    container = get_container()
    _ = container.database  # Force database initialization

    logger.info("application_started")

    yield

    logger.info("application_stopping")
    if "reference_value_service" in container.__dict__:
        await container.reference_value_service.aclose()
    reset_container()
    logger.info("application_stopped")


async def log_request_middleware(request: Request, call_next):
    """Middleware to add request context to logs."""
    request_id = str(uuid.uuid4())[:8]
    bind_request_context(request_id, request.url.path, request.method)

    try:
        response = await call_next(request)
        logger.debug(
            "request_completed",
            status_code=response.status_code,
        )
        return response
    finally:
        clear_request_context()


async def exception_handler(request: Request, exc: LeasingDeskError) -> JSONResponse:
    """Handle domain exceptions and return appropriate JSON responses."""
    logger.warning(
        "domain_exception",
        error_code=exc.error_code,
        message=exc.message,
        context=exc.context,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Leasing desk for a real-estate brokerage: properties, visits, commitments and alerts",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.middleware("http")(log_request_middleware)
    app.add_exception_handler(LeasingDeskError, exception_handler)

    app.include_router(health_router)
    app.include_router(property_router)
    app.include_router(visit_router)
    app.include_router(lease_router)
    app.include_router(alert_router)
    app.include_router(report_router)
    app.include_router(reference_router)

    return app


# Create app instance for uvicorn
app = create_app()
