"""
Shared fixtures: in-memory repositories, a pinned clinic clock and a
TestClient wired to them through dependency overrides.
"""

import os
from datetime import date, datetime

import pytest

os.environ["STORE_BACKEND"] = "memory"
os.environ["APP_ENV"] = "testing"
os.environ["API_KEYS"] = "test-admin-key:admin"
os.environ["CLEANUP_SWEEPER_ENABLED"] = "false"
os.environ["EMAILJS_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"

from fastapi.testclient import TestClient  # noqa: E402

from clinicbook.adapters.db.memory import (  # noqa: E402
    InMemoryAnalyticsRepository,
    InMemoryAppointmentArchiveRepository,
    InMemoryAppointmentRepository,
    InMemoryDayLedgerRepository,
    InMemoryDoctorRepository,
)
from clinicbook.adapters.rate_limit.memory_rate_limiter import SlidingWindowRateLimiter  # noqa: E402
from clinicbook.application.ports.services.notification_service import (  # noqa: E402
    NotificationService,
)
from clinicbook.application.use_cases.book_appointment import BookAppointmentUseCase  # noqa: E402
from clinicbook.core.auth import reset_admin_keyring  # noqa: E402
from clinicbook.core.clock import FixedClock  # noqa: E402
from clinicbook.core.config import reset_settings  # noqa: E402
from clinicbook.core.exceptions import EmailDeliveryError  # noqa: E402
from clinicbook.domain.entities.appointment import Appointment  # noqa: E402
from clinicbook.domain.entities.doctor import Doctor  # noqa: E402
from clinicbook.domain.enums.appointment import AppointmentStatus  # noqa: E402
from clinicbook.domain.services.availability import AvailabilityResolver  # noqa: E402
from clinicbook.domain.services.capacity import CapacityPolicy  # noqa: E402
from clinicbook.domain.services.conflict import ConflictGuard  # noqa: E402
from clinicbook.domain.value_objects.appointment_id import AppointmentId  # noqa: E402
from clinicbook.domain.value_objects.time_of_day import TimeOfDay  # noqa: E402

reset_settings()

# Monday 2025-03-10, 09:30 clinic time
NOW = datetime(2025, 3, 10, 9, 30)
TODAY = NOW.date()
TOMORROW = date(2025, 3, 11)
YESTERDAY = date(2025, 3, 9)

ADMIN_KEY = "test-admin-key"


class RecordingNotificationService(NotificationService):
    """Records confirmations; raises ``EmailDeliveryError`` when ``fail`` is set."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_booking_confirmation(self, appointment, doctor) -> bool:
        if self.fail:
            raise EmailDeliveryError("HTTP 500: upstream error", {"status": 500})
        self.sent.append((appointment, doctor))
        return True


@pytest.fixture
def clock():
    return FixedClock(NOW, timezone="Asia/Manila")


@pytest.fixture
def doctor_repo():
    return InMemoryDoctorRepository()


@pytest.fixture
def appointment_repo():
    return InMemoryAppointmentRepository()


@pytest.fixture
def archive_repo():
    return InMemoryAppointmentArchiveRepository()


@pytest.fixture
def ledger_repo():
    return InMemoryDayLedgerRepository()


@pytest.fixture
def analytics_repo():
    return InMemoryAnalyticsRepository()


@pytest.fixture
def notifier():
    return RecordingNotificationService()


@pytest.fixture
def rate_limiter():
    return SlidingWindowRateLimiter(max_attempts=3, window_seconds=3600)


@pytest.fixture
def resolver():
    return AvailabilityResolver(CapacityPolicy(4))


@pytest.fixture
def book_use_case(
    doctor_repo, appointment_repo, ledger_repo, analytics_repo, notifier, rate_limiter, resolver, clock
):
    return BookAppointmentUseCase(
        doctor_repo,
        appointment_repo,
        ledger_repo,
        analytics_repo,
        notifier,
        rate_limiter,
        resolver,
        ConflictGuard(),
        clock,
    )


@pytest.fixture
def make_doctor():
    def _make(name="Dr. Maria Santos", specialty="General Medicine", start="08:00", end="20:00"):
        return Doctor.create(name, specialty, start, end)

    return _make


@pytest.fixture
def make_appointment():
    counter = {"n": 0}

    def _make(
        doctor_id="maria-santos",
        on_date=TOMORROW,
        time="10:00",
        status=AppointmentStatus.PENDING,
        patient_name=None,
        phone="09171234567",
        email=None,
    ):
        counter["n"] += 1
        return Appointment(
            appointment_id=AppointmentId(f"APT-test{counter['n']:04d}"),
            doctor_id=doctor_id,
            date=on_date,
            time=TimeOfDay.parse(time),
            patient_name=patient_name or f"Patient {counter['n']}",
            phone=phone,
            email=email,
            status=status,
            created_at=datetime(2025, 3, 1, 8, 0, counter["n"] % 60),
        )

    return _make


@pytest.fixture
def client(
    doctor_repo,
    appointment_repo,
    archive_repo,
    ledger_repo,
    analytics_repo,
    notifier,
    rate_limiter,
    clock,
):
    """TestClient over the in-memory stores; lifespan (Mongo, sweeper) is not run."""
    from clinicbook.api import deps
    from clinicbook.app import app
    from clinicbook.core.clock import get_clock

    app.dependency_overrides.update(
        {
            deps.get_doctor_repository: lambda: doctor_repo,
            deps.get_appointment_repository: lambda: appointment_repo,
            deps.get_archive_repository: lambda: archive_repo,
            deps.get_ledger_repository: lambda: ledger_repo,
            deps.get_analytics_repository: lambda: analytics_repo,
            deps.get_notification_service: lambda: notifier,
            deps.get_rate_limiter: lambda: rate_limiter,
            get_clock: lambda: clock,
        }
    )
    reset_admin_keyring()
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_admin_keyring()


@pytest.fixture
def admin_headers():
    return {"X-API-Key": ADMIN_KEY}
