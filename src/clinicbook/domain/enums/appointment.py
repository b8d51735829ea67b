"""
Appointment status and booking outcome enums.
"""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Lifecycle states of an appointment in the active collection."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class RejectionReason(str, Enum):
    """Why a requested slot cannot be booked."""

    DOCTOR_NOT_FOUND = "doctor_not_found"
    NO_SHIFT = "no_shift"
    PAST = "past"
    OUTSIDE_SHIFT = "outside_shift"
    CAPACITY = "capacity"
    SLOT_TAKEN = "slot_taken"


class AvailabilityReason(str, Enum):
    """Summary of a doctor's bookability on a given date."""

    DOCTOR_NOT_FOUND = "doctor-not-found"
    NO_SHIFT_INFO = "no-shift-info"
    FULLY_BOOKED = "fully-booked"
    AVAILABLE = "available"


class AppointmentSource(str, Enum):
    """Which collection a record was read from."""

    CURRENT = "current"
    ARCHIVE = "archive"
