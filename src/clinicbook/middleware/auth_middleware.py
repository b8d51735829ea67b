"""
Authentication middleware - validates admin credentials before request processing.

Only the clinic staff endpoints under ``/admin`` require an API key. Patients
book without an account, so the booking, health and docs endpoints stay open.
"""
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from ..core.auth import get_admin_keyring
import logging

logger = logging.getLogger("clinicbook.auth")


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Middleware to enforce authentication on admin endpoints.

    Everything outside ``PROTECTED_PATH_PREFIXES`` is public.
    """

    PROTECTED_PATH_PREFIXES = (
        "/admin",
    )

    def is_protected_endpoint(self, path: str) -> bool:
        """Check if endpoint belongs to the admin surface."""
        normalized_path = path.rstrip("/") or "/"

        for prefix in self.PROTECTED_PATH_PREFIXES:
            if normalized_path == prefix or normalized_path.startswith(prefix + "/"):
                return True

        return False

    async def dispatch(self, request: Request, call_next):
        # CORS preflight never carries credentials
        if request.method == "OPTIONS" or not self.is_protected_endpoint(request.url.path):
            return await call_next(request)

        keyring = get_admin_keyring()

        try:
            staff = keyring.authenticate(
                api_key=request.headers.get("X-API-Key"),
                authorization=request.headers.get("Authorization"),
            )
            request.state.staff = staff
            logger.debug(f"Admin {staff} accessing {request.url.path}")

        except HTTPException as e:
            logger.warning(
                f"Authentication failed for {request.method} {request.url.path}: {e.detail} "
                f"(IP: {request.client.host if request.client else 'unknown'})"
            )

            return JSONResponse(
                status_code=401,
                content={
                    "success": False,
                    "error": "UNAUTHORIZED",
                    "message": "Authentication required for this endpoint",
                    "details": {
                        "path": request.url.path,
                        "method": request.method,
                        "hint": "Provide X-API-Key header or Authorization Bearer token"
                    },
                    "request_id": getattr(request.state, "request_id", ""),
                },
                headers={"WWW-Authenticate": "Bearer"},
            )

        return await call_next(request)
