"""Book Appointment use case: validate, check availability, reserve, persist."""

import logging
from typing import List

from ...core.clock import Clock
from ...core.exceptions import ExternalServiceError, StoreUnavailableError, ValidationError
from ...core.utils.datetime_utils import format_display_date, parse_iso_date
from ...core.utils.string_utils import (
    normalize_phone_number,
    validate_email,
    validate_phone_number,
)
from ...domain.entities.appointment import Appointment
from ...domain.enums.appointment import AppointmentStatus, RejectionReason
from ...domain.errors import (
    BookingRejectedError,
    DuplicateBookingError,
    RateLimitExceededError,
)
from ...domain.services.availability import AvailabilityResolver, SlotOutcome
from ...domain.services.capacity import held_times
from ...domain.services.conflict import ConflictGuard
from ...domain.value_objects.appointment_id import AppointmentId
from ...domain.value_objects.time_of_day import TimeOfDay
from ..dto.appointment_dto import BookAppointmentRequest, BookAppointmentResponse
from ..ports.repositories.appointment_repo import (
    AnalyticsRepository,
    AppointmentRepository,
    DayLedgerRepository,
)
from ..ports.repositories.doctor_repo import DoctorRepository
from ..ports.services.notification_service import NotificationService
from ..ports.services.rate_limiter import RateLimiter
from .reconcile_ledger import DEFAULT_CLAIM_GRACE_SECONDS, reconcile_day_ledger

logger = logging.getLogger("clinicbook.booking")

REQUIRED_FIELDS = (
    ("doctor_id", "doctor"),
    ("date", "date"),
    ("time", "time"),
    ("patient_name", "name"),
    ("phone", "phone"),
)


def validate_booking_request(request: BookAppointmentRequest, today) -> List[str]:
    """Return every validation problem with ``request``; empty when valid."""
    errors: List[str] = []
    for attr, label in REQUIRED_FIELDS:
        value = getattr(request, attr)
        if value is None or not str(value).strip():
            errors.append(f"{label} is required")

    if request.date:
        parsed = parse_iso_date(request.date)
        if parsed is None:
            errors.append("Please enter a valid date (YYYY-MM-DD)")
        elif parsed < today:
            errors.append("Please select a future date")

    if request.time:
        try:
            if not TimeOfDay.parse(request.time).is_whole_hour:
                errors.append("Appointments start on the hour (HH:00)")
        except ValueError:
            errors.append("Please choose a valid time (HH:00)")

    if request.phone and not validate_phone_number(request.phone):
        errors.append("Please enter a valid Philippine phone number")

    if request.email and not validate_email(request.email.strip()):
        errors.append("Please enter a valid email address")

    if request.patient_name and len(request.patient_name.strip()) < 2:
        errors.append("Please enter a valid name")

    return errors


class BookAppointmentUseCase:
    """Use case for a public booking submission."""

    def __init__(
        self,
        doctor_repository: DoctorRepository,
        appointment_repository: AppointmentRepository,
        ledger_repository: DayLedgerRepository,
        analytics_repository: AnalyticsRepository,
        notification_service: NotificationService,
        rate_limiter: RateLimiter,
        resolver: AvailabilityResolver,
        conflict_guard: ConflictGuard,
        clock: Clock,
        claim_grace_seconds: int = DEFAULT_CLAIM_GRACE_SECONDS,
    ):
        self._doctors = doctor_repository
        self._appointments = appointment_repository
        self._ledger = ledger_repository
        self._analytics = analytics_repository
        self._notifications = notification_service
        self._rate_limiter = rate_limiter
        self._resolver = resolver
        self._guard = conflict_guard
        self._clock = clock
        self._claim_grace_seconds = claim_grace_seconds

    async def _retry_after_reconcile(
        self, doctor_id: str, on_date, time: TimeOfDay, latest: List[Appointment], now
    ) -> bool:
        """Rebuild a drifted ledger from ``latest`` and claim ``time`` once more."""
        held = held_times(latest)
        repaired = await reconcile_day_ledger(
            self._ledger, doctor_id, on_date, held, now, self._claim_grace_seconds
        )
        if not repaired:
            return False
        return await self._ledger.reserve(
            doctor_id, on_date, time, self._resolver.capacity.max_daily, held, claimed_at=now
        )

    async def execute(self, request: BookAppointmentRequest) -> BookAppointmentResponse:
        now = self._clock.now()
        errors = validate_booking_request(request, now.date())
        if errors:
            raise ValidationError(errors)

        phone = normalize_phone_number(request.phone)
        if not self._rate_limiter.hit(phone, now):
            logger.warning("Booking rate limit hit for phone ending %s", phone[-4:])
            raise RateLimitExceededError(phone, self._rate_limiter.retry_after_seconds(phone, now))

        on_date = parse_iso_date(request.date)
        time = TimeOfDay.parse(request.time)
        doctor_id = request.doctor_id.strip()
        patient_name = request.patient_name.strip()

        doctor = await self._doctors.find_by_id(doctor_id)
        existing = await self._appointments.find_by_doctor_and_date(doctor_id, on_date)
        outcome = self._resolver.validate_requested_slot(doctor, on_date, time, existing, now)
        if not outcome.available:
            self._reject(doctor_id, request, outcome)

        same_day = await self._appointments.find_by_date(on_date)
        duplicate = self._guard.find_duplicate(patient_name, on_date, same_day)
        if duplicate is not None:
            logger.info(
                "Booking rejected: duplicate for date=%s (existing=%s)",
                request.date,
                duplicate.appointment_id,
            )
            raise DuplicateBookingError(
                patient_name, request.date, str(duplicate.appointment_id), format_display_date(on_date)
            )

        max_daily = self._resolver.capacity.max_daily
        reserved = await self._ledger.reserve(
            doctor_id, on_date, time, max_daily, held_times(existing), claimed_at=now
        )
        if not reserved:
            # Either a concurrent booking won, or the ledger drifted from the appointments
            latest = await self._appointments.find_by_doctor_and_date(doctor_id, on_date)
            outcome = self._resolver.validate_requested_slot(doctor, on_date, time, latest, now)
            if outcome.available:
                reserved = await self._retry_after_reconcile(doctor_id, on_date, time, latest, now)
            if not reserved:
                if outcome.available:
                    outcome = SlotOutcome.rejected(
                        RejectionReason.SLOT_TAKEN,
                        "That time was just booked by someone else. Please choose another time.",
                        time=str(time),
                    )
                self._reject(doctor_id, request, outcome)

        appointment = Appointment(
            appointment_id=AppointmentId.generate(),
            doctor_id=doctor_id,
            date=on_date,
            time=time,
            patient_name=patient_name,
            phone=phone,
            email=request.email.strip() if request.email else None,
            reason=request.reason.strip() if request.reason else None,
            status=AppointmentStatus.PENDING,
            created_at=now,
        )
        try:
            await self._appointments.save(appointment)
        except Exception:
            try:
                await self._ledger.release(doctor_id, on_date, time)
            except StoreUnavailableError:
                logger.error(
                    "Failed to release ledger hour %s for doctor=%s date=%s; left for reconciliation",
                    time,
                    doctor_id,
                    request.date,
                    exc_info=True,
                )
            raise

        logger.info(
            "Appointment booked: id=%s doctor=%s date=%s time=%s",
            appointment.appointment_id,
            doctor_id,
            request.date,
            time,
        )

        try:
            await self._analytics.increment_daily_bookings(now.date())
        except StoreUnavailableError as e:
            logger.warning("Failed to update booking analytics: %s", e.message)

        email_sent = False
        email_attempted = bool(appointment.email) and self._notifications.is_enabled
        if email_attempted:
            try:
                email_sent = await self._notifications.send_booking_confirmation(appointment, doctor)
            except ExternalServiceError as e:
                logger.warning(
                    "Confirmation email failed for appointment %s: %s",
                    appointment.appointment_id,
                    e.message,
                )

        return BookAppointmentResponse(
            appointment=appointment,
            doctor_name=doctor.display_name,
            display_date=format_display_date(on_date),
            display_time=time.display(),
            email_sent=email_sent,
            email_attempted=email_attempted,
            message="Appointment booked successfully! We will confirm shortly.",
        )

    @staticmethod
    def _reject(doctor_id: str, request: BookAppointmentRequest, outcome: SlotOutcome) -> None:
        logger.info(
            "Booking rejected: reason=%s doctor=%s date=%s time=%s",
            outcome.reason.value,
            doctor_id,
            request.date,
            request.time,
        )
        raise BookingRejectedError(outcome.reason.value, outcome.message, outcome.params)
