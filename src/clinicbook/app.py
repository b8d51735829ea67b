"""
FastAPI application factory and main app configuration.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.errors import APIError, status_for_domain_error
from .api.routers import admin_appointments, admin_dashboard, admin_doctors, booking, health
from .api.schemas.common import ErrorResponse
from .core.config import get_settings
from .core.exceptions import StoreUnavailableError, ValidationError
from .core.structured_logger import configure_logging
from .domain.errors import DomainError, RateLimitExceededError
from .middleware.auth_middleware import AuthenticationMiddleware
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware
from .workers.appointment_cleanup_sweeper import run_appointment_cleanup_forever

logger = logging.getLogger("clinicbook")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.logging)
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    logger.info("Environment: %s | store: %s | timezone: %s",
                settings.app_env, settings.store_backend, settings.booking.timezone)

    client = None
    sweeper_task = None
    try:
        if settings.store_backend == "mongo":
            from .adapters.db.mongo.client import init_database

            client = await init_database(settings.database)
        else:
            logger.warning("Using the in-memory store; data is lost on restart")

        if settings.cleanup.sweeper_enabled:
            sweeper_task = asyncio.create_task(run_appointment_cleanup_forever())
            logger.info("Cleanup sweeper started")
    except Exception as e:
        logger.error("Application startup failed: %s", e, exc_info=True)
        raise

    yield

    logger.info("Shutting down %s", settings.app_name)
    if sweeper_task:
        sweeper_task.cancel()
        try:
            await sweeper_task
        except asyncio.CancelledError:
            pass
        logger.info("Cleanup sweeper stopped")
    if client:
        client.close()


def _error_response(request: Request, status_code: int, error: str, message: str,
                    details: dict = None, headers: dict = None) -> JSONResponse:
    req_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            request_id=req_id or "",
            details=details or {},
        ).model_dump(),
        headers=headers,
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="ClinicBook",
        description="Appointment booking for a small multi-doctor clinic",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Added last runs first: RequestID wraps everything else
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        expose_headers=["X-Request-ID", "X-Process-Time", "Retry-After"],
    )
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(PerformanceMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(booking.router)
    app.include_router(admin_doctors.router)
    app.include_router(admin_appointments.router)
    app.include_router(admin_dashboard.router)

    @app.exception_handler(RateLimitExceededError)
    async def rate_limit_handler(request: Request, exc: RateLimitExceededError):
        logger.warning("Rate limit exceeded on %s", request.url.path)
        return _error_response(
            request, 429, exc.error_code, exc.message, exc.details,
            headers={"Retry-After": str(exc.retry_after_seconds)},
        )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        code = exc.error_code or "DOMAIN_ERROR"
        return _error_response(request, status_for_domain_error(code), code, exc.message, exc.details)

    @app.exception_handler(ValidationError)
    async def booking_validation_handler(request: Request, exc: ValidationError):
        return _error_response(request, 422, exc.error_code, exc.message, exc.details)

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.error("Store unavailable during %s on %s", exc.operation, request.url.path)
        return _error_response(request, 503, exc.error_code, exc.message, exc.details)

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"APIError: {exc.code} ({exc.http_status}) {exc.message} | request_id={req_id}")
        return _error_response(request, exc.http_status, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        req_id = getattr(request.state, "request_id", None)
        error_details = exc.errors()
        logger.error(f"ValidationError on {request.method} {request.url.path}: {error_details} | request_id={req_id}")

        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")

        return _error_response(
            request,
            422,
            "INVALID_INPUT",
            f"Input validation failed: {'; '.join(error_messages)}",
            {"errors": [str(e.get("msg", "")) for e in error_details], "path": request.url.path},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"Unhandled error: {type(exc).__name__} | request_id={req_id}", exc_info=exc)
        return _error_response(
            request,
            500,
            "INTERNAL_ERROR",
            "An unexpected error has occurred. Please try again later.",
        )

    return app


# Create the app instance
app = create_app()


# Root endpoint
@app.get("/", tags=["health"])
async def root():
    """Root endpoint with API information."""
    settings = get_settings()
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "list_doctors": "GET /doctors",
            "available_slots": "GET /doctors/{doctor_id}/slots?date=YYYY-MM-DD",
            "book_appointment": "POST /appointments",
            "duplicate_check": "GET /appointments/duplicate-check?name=&date=",
            "admin_doctors": "GET|POST /admin/doctors",
            "admin_appointments": "GET /admin/appointments",
            "update_status": "PATCH /admin/appointments/{appointment_id}/status",
            "archive_appointment": "POST /admin/appointments/{appointment_id}/archive",
            "run_cleanup": "POST /admin/appointments/cleanup",
            "archive": "GET|DELETE /admin/archive",
            "dashboard": "GET /admin/dashboard",
        },
    }
