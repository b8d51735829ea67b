"""Doctor DTOs for admin API communication."""

from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.entities.appointment import Appointment
from ...domain.entities.doctor import Doctor


@dataclass
class SaveDoctorRequest:
    """Request DTO for creating or updating a doctor."""

    name: str
    specialty: str
    shift_start: str
    shift_end: str
    doctor_id: Optional[str] = None


@dataclass
class DeleteDoctorResponse:
    doctor_id: str
    doctor_name: str
    upcoming_appointments: int
    message: str


@dataclass
class DoctorAppointmentsResponse:
    """Per-doctor appointment view for the admin dashboard."""

    doctor: Doctor
    total: int
    upcoming_count: int
    past_count: int
    today_count: int
    max_daily: int
    upcoming: List[Appointment] = field(default_factory=list)
    past: List[Appointment] = field(default_factory=list)
