"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class DoctorNotFoundError(DomainError):
    """Doctor not found."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' not found"
        super().__init__(message, "DOCTOR_NOT_FOUND", {"doctor_id": doctor_id})


class DuplicateDoctorError(DomainError):
    """Doctor already exists."""

    def __init__(self, doctor_id: str) -> None:
        message = f"Doctor with ID '{doctor_id}' already exists"
        super().__init__(message, "DUPLICATE_DOCTOR", {"doctor_id": doctor_id})


class AppointmentNotFoundError(DomainError):
    """Appointment not found in either the active or the archive collection."""

    def __init__(self, appointment_id: str) -> None:
        message = f"Appointment with ID '{appointment_id}' not found"
        super().__init__(
            message, "APPOINTMENT_NOT_FOUND", {"appointment_id": appointment_id}
        )


class InvalidDoctorDataError(DomainError):
    """Invalid doctor data."""

    def __init__(self, field: str, value: Any, reason: Optional[str] = None) -> None:
        message = reason or f"Invalid doctor data. Field: {field}, Value: {value}"
        super().__init__(
            message, "INVALID_DOCTOR_DATA", {"field": field, "value": value}
        )


class InvalidShiftError(DomainError):
    """Shift window does not span the required number of hours."""

    def __init__(self, shift_start: str, shift_end: str, required_hours: int) -> None:
        message = (
            f"Doctor shift must be exactly {required_hours} hours "
            f"(got {shift_start} to {shift_end})"
        )
        super().__init__(
            message,
            "INVALID_SHIFT",
            {
                "shift_start": shift_start,
                "shift_end": shift_end,
                "required_hours": required_hours,
            },
        )


class InvalidStatusTransitionError(DomainError):
    """Appointment status change not allowed by the lifecycle."""

    def __init__(self, appointment_id: str, current: str, target: str) -> None:
        message = f"Cannot change appointment '{appointment_id}' from {current} to {target}"
        super().__init__(
            message,
            "INVALID_STATUS_TRANSITION",
            {"appointment_id": appointment_id, "current": current, "target": target},
        )


class BookingRejectedError(DomainError):
    """Requested slot is not bookable.

    Raised by the booking use case from a rejected ``SlotOutcome``; the
    resolver itself never raises.
    """

    def __init__(self, reason: str, message: str, params: Optional[Dict[str, Any]] = None) -> None:
        self.reason = reason
        details = {"reason": reason}
        details.update(params or {})
        super().__init__(message, reason.upper(), details)


class DuplicateBookingError(DomainError):
    """Patient already holds an active appointment on the requested date."""

    def __init__(self, patient_name: str, date: str, appointment_id: str, display_date: str) -> None:
        message = (
            f'A patient named "{patient_name}" already has an appointment on {display_date}. '
            "Please choose a different date or contact the clinic if you need to reschedule."
        )
        super().__init__(
            message,
            "DUPLICATE_BOOKING",
            {"patient_name": patient_name, "date": date, "appointment_id": appointment_id},
        )


class RateLimitExceededError(DomainError):
    """Too many booking attempts from one requester."""

    def __init__(self, key: str, retry_after_seconds: int) -> None:
        message = "Too many appointment attempts. Please try again in an hour."
        super().__init__(
            message,
            "RATE_LIMIT_EXCEEDED",
            {"retry_after_seconds": retry_after_seconds},
        )
        self.key = key
        self.retry_after_seconds = retry_after_seconds
