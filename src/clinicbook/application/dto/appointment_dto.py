"""Appointment DTOs passed between the API layer and use cases."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...domain.entities.appointment import Appointment
from ...domain.enums.appointment import AppointmentSource
from ...domain.services.availability import AvailabilityStatus


@dataclass
class BookAppointmentRequest:
    """Request DTO for a public booking submission."""

    doctor_id: str
    date: str
    time: str
    patient_name: str
    phone: str
    email: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class BookAppointmentResponse:
    """Response DTO for a successful booking."""

    appointment: Appointment
    doctor_name: str
    display_date: str
    display_time: str
    email_sent: bool
    message: str
    email_attempted: bool = False


@dataclass
class SlotView:
    value: str
    display: str


@dataclass
class AvailableSlotsResponse:
    doctor_id: str
    date: str
    slots: List[SlotView]
    status: AvailabilityStatus


@dataclass
class DuplicateCheckResponse:
    is_duplicate: bool
    message: Optional[str] = None
    appointment_id: Optional[str] = None


@dataclass
class AppointmentRecord:
    """An appointment together with the collection it was read from."""

    appointment: Appointment
    source: AppointmentSource


@dataclass
class CleanupResult:
    expired: int = 0
    archived: int = 0
    stale_removed: int = 0
    ledgers_repaired: int = 0
    failed: int = 0

    @property
    def message(self) -> str:
        if self.archived or self.expired:
            return (
                f"Cleanup completed! Archived {self.archived} and expired "
                f"{self.expired} old appointments."
            )
        return "No old appointments found to clean up."


@dataclass
class DoctorLoad:
    doctor_id: str
    doctor_name: str
    today_count: int
    upcoming_count: int
    load_level: str


@dataclass
class DashboardStats:
    total_appointments: int
    pending_appointments: int
    total_doctors: int
    max_daily: int
    recent_appointments: List[Appointment] = field(default_factory=list)
    doctor_loads: List[DoctorLoad] = field(default_factory=list)
    off_shift_doctors: List[Dict[str, Any]] = field(default_factory=list)
    bookings_today: int = 0
