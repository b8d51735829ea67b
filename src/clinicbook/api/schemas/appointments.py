"""
Appointment request/response schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...application.dto.appointment_dto import (
    AvailableSlotsResponse,
    CleanupResult,
    DashboardStats,
    DuplicateCheckResponse,
)
from ...core.utils.datetime_utils import format_display_date
from ...domain.entities.appointment import Appointment
from ...domain.enums.appointment import AppointmentSource, AppointmentStatus


class BookAppointmentRequestSchema(BaseModel):
    """Public booking form.

    Fields default to empty so that missing values are reported together
    with every other validation problem.
    """

    doctor_id: str = Field("", description="Doctor ID")
    date: str = Field("", description="Appointment date (YYYY-MM-DD)")
    time: str = Field("", description="Slot start (HH:00)")
    patient_name: str = Field("", max_length=120, description="Patient full name")
    phone: str = Field("", max_length=32, description="Philippine mobile number")
    email: Optional[str] = Field(None, max_length=254, description="Email for confirmation")
    reason: Optional[str] = Field(None, max_length=1000, description="Reason for visit")


class AppointmentSchema(BaseModel):
    id: str
    doctor_id: str
    date: str
    time: str
    display_date: str
    display_time: str
    patient_name: str
    phone: str
    email: Optional[str] = None
    reason: Optional[str] = None
    status: AppointmentStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    source: Optional[AppointmentSource] = None

    @classmethod
    def from_domain(
        cls, appointment: Appointment, source: Optional[AppointmentSource] = None
    ) -> "AppointmentSchema":
        return cls(
            id=appointment.appointment_id.value,
            doctor_id=appointment.doctor_id,
            date=appointment.date_iso,
            time=str(appointment.time),
            display_date=format_display_date(appointment.date),
            display_time=appointment.time.display(),
            patient_name=appointment.patient_name,
            phone=appointment.phone,
            email=appointment.email,
            reason=appointment.reason,
            status=appointment.status,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
            expired_at=appointment.expired_at,
            archived_at=appointment.archived_at,
            source=source,
        )


class BookingResultSchema(BaseModel):
    appointment: AppointmentSchema
    doctor_name: str
    email_sent: bool


class SlotSchema(BaseModel):
    value: str = Field(..., description="HH:MM")
    display: str = Field(..., description="12-hour label")


class AvailabilityStatusSchema(BaseModel):
    reason: str
    doctor_name: str
    shift_start: Optional[str] = None
    shift_end: Optional[str] = None
    booked_count: int = 0
    max_daily: int = 0
    selected_date: Optional[str] = None


class AvailableSlotsSchema(BaseModel):
    doctor_id: str
    date: str
    slots: List[SlotSchema]
    status: AvailabilityStatusSchema

    @classmethod
    def from_dto(cls, dto: AvailableSlotsResponse) -> "AvailableSlotsSchema":
        status = dto.status
        return cls(
            doctor_id=dto.doctor_id,
            date=dto.date,
            slots=[SlotSchema(value=s.value, display=s.display) for s in dto.slots],
            status=AvailabilityStatusSchema(
                reason=status.reason.value,
                doctor_name=status.doctor_name,
                shift_start=status.shift_start,
                shift_end=status.shift_end,
                booked_count=status.booked_count,
                max_daily=status.max_daily,
                selected_date=status.selected_date,
            ),
        )


class DuplicateCheckSchema(BaseModel):
    is_duplicate: bool
    message: Optional[str] = None
    appointment_id: Optional[str] = None

    @classmethod
    def from_dto(cls, dto: DuplicateCheckResponse) -> "DuplicateCheckSchema":
        return cls(
            is_duplicate=dto.is_duplicate,
            message=dto.message,
            appointment_id=dto.appointment_id,
        )


class UpdateStatusRequestSchema(BaseModel):
    status: AppointmentStatus = Field(..., description="Target status (confirmed or cancelled)")


class CleanupResultSchema(BaseModel):
    expired: int
    archived: int
    stale_removed: int
    ledgers_repaired: int
    failed: int

    @classmethod
    def from_dto(cls, result: CleanupResult) -> "CleanupResultSchema":
        return cls(
            expired=result.expired,
            archived=result.archived,
            stale_removed=result.stale_removed,
            ledgers_repaired=result.ledgers_repaired,
            failed=result.failed,
        )


class DoctorLoadSchema(BaseModel):
    doctor_id: str
    doctor_name: str
    today_count: int
    upcoming_count: int
    load_level: str


class OffShiftDoctorSchema(BaseModel):
    doctor_id: str
    doctor_name: str
    shift_start: str
    shift_end: str


class DashboardSchema(BaseModel):
    total_appointments: int
    pending_appointments: int
    total_doctors: int
    max_daily: int
    bookings_today: int
    recent_appointments: List[AppointmentSchema]
    doctor_loads: List[DoctorLoadSchema]
    off_shift_doctors: List[OffShiftDoctorSchema]

    @classmethod
    def from_dto(cls, stats: DashboardStats) -> "DashboardSchema":
        return cls(
            total_appointments=stats.total_appointments,
            pending_appointments=stats.pending_appointments,
            total_doctors=stats.total_doctors,
            max_daily=stats.max_daily,
            bookings_today=stats.bookings_today,
            recent_appointments=[AppointmentSchema.from_domain(a) for a in stats.recent_appointments],
            doctor_loads=[DoctorLoadSchema(**vars(load)) for load in stats.doctor_loads],
            off_shift_doctors=[OffShiftDoctorSchema(**d) for d in stats.off_shift_doctors],
        )
