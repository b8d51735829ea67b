"""
Health check endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import fail, ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("/", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    settings = get_settings()
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Pings MongoDB unless the in-memory store is configured.
    """
    settings = get_settings()
    checks = {}

    if settings.store_backend == "memory":
        checks["database"] = "memory"
    else:
        try:
            from motor.motor_asyncio import AsyncIOMotorClient

            client = AsyncIOMotorClient(settings.database.uri, serverSelectionTimeoutMS=5000)
            await client.admin.command("ping")
            checks["database"] = "ok"
        except Exception as e:
            checks["database"] = f"error: {str(e)[:50]}"
            return JSONResponse(
                status_code=503,
                content=fail(
                    request, "NOT_READY", "Service dependencies unavailable", {"checks": checks}
                ).model_dump(),
            )

    checks["email"] = "configured" if settings.email.is_configured else "disabled"
    return ok(request, data={"status": "ready", "checks": checks}, message="READY")
