"""
Request latency logging, labelled by clinic area.

Booking submissions touch the doctor, appointment and ledger stores and
may send a confirmation email, so they get a looser slow threshold than
the read-only public pages.
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("clinicbook.performance")

SLOW_REQUEST_SECONDS = {
    "booking": 2.5,
    "admin": 1.5,
}
DEFAULT_SLOW_REQUEST_SECONDS = 1.0


def request_area(method: str, path: str) -> str:
    """Name the part of the clinic a request belongs to."""
    if path.startswith("/health"):
        return "health"
    if path.startswith("/admin"):
        return "admin"
    if method == "POST" and path.rstrip("/") == "/appointments":
        return "booking"
    if path.startswith("/doctors/") and path.endswith("/slots"):
        return "slots"
    return "public"


class PerformanceMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        area = request_area(request.method, request.url.path)
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        elapsed_ms = round(elapsed * 1000, 2)
        request_id = getattr(request.state, "request_id", "unknown")
        response.headers["X-Process-Time"] = str(elapsed_ms)

        logger.info(
            "%s %s area=%s status=%d latency=%.2fms request_id=%s",
            request.method,
            request.url.path,
            area,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        if elapsed > SLOW_REQUEST_SECONDS.get(area, DEFAULT_SLOW_REQUEST_SECONDS):
            logger.warning(
                "Slow %s request: %s %s took %.2fms (request_id=%s staff=%s)",
                area,
                request.method,
                request.url.path,
                elapsed_ms,
                request_id,
                getattr(request.state, "staff", "-"),
            )
        return response
