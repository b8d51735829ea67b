"""
Request latency logging tests.
"""

import logging

import pytest

from clinicbook.middleware import performance_middleware
from clinicbook.middleware.performance_middleware import request_area


@pytest.mark.parametrize(
    "method, path, area",
    [
        ("GET", "/health/", "health"),
        ("GET", "/admin/dashboard", "admin"),
        ("PATCH", "/admin/appointments/APT-1/status", "admin"),
        ("POST", "/appointments", "booking"),
        ("GET", "/appointments/duplicate-check", "public"),
        ("GET", "/doctors/maria-santos/slots", "slots"),
        ("GET", "/doctors", "public"),
    ],
)
def test_request_area(method, path, area):
    assert request_area(method, path) == area


def test_process_time_header(client):
    response = client.get("/health/")
    assert float(response.headers["X-Process-Time"]) >= 0


def test_slow_request_names_area_and_request_id(client, caplog, monkeypatch):
    monkeypatch.setattr(performance_middleware, "DEFAULT_SLOW_REQUEST_SECONDS", -1.0)
    perf_logger = logging.getLogger("clinicbook.performance")
    caplog.set_level(logging.INFO, logger="clinicbook.performance")
    monkeypatch.setattr(perf_logger, "propagate", False)
    perf_logger.addHandler(caplog.handler)
    try:
        client.get("/doctors", headers={"X-Request-ID": "req-slow"})
    finally:
        perf_logger.removeHandler(caplog.handler)

    slow = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(slow) == 1
    assert slow[0].startswith("Slow public request: GET /doctors")
    assert "request_id=req-slow" in slow[0]
