"""
Doctor request/response schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...application.dto.doctor_dto import DoctorAppointmentsResponse
from ...domain.entities.doctor import Doctor
from .appointments import AppointmentSchema


class SaveDoctorRequestSchema(BaseModel):
    name: str = Field("", max_length=120, description="Doctor name, e.g. 'Dr. Maria Santos'")
    specialty: str = Field("", max_length=120, description="Specialty name")
    shift_start: str = Field("", description="Shift start (HH:MM, 24h)")
    shift_end: str = Field("", description="Shift end (HH:MM, 24h)")


class DoctorSchema(BaseModel):
    id: str
    name: str
    display_name: str
    specialty: str
    shift_start: Optional[str] = None
    shift_end: Optional[str] = None
    shift_display: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, doctor: Doctor) -> "DoctorSchema":
        window = doctor.shift_window
        return cls(
            id=doctor.doctor_id.value,
            name=doctor.name,
            display_name=doctor.display_name,
            specialty=doctor.specialty,
            shift_start=str(doctor.shift_start) if doctor.shift_start else None,
            shift_end=str(doctor.shift_end) if doctor.shift_end else None,
            shift_display=window.describe() if window else None,
            created_at=doctor.created_at,
            updated_at=doctor.updated_at,
        )


class DeleteDoctorSchema(BaseModel):
    doctor_id: str
    doctor_name: str
    upcoming_appointments: int


class DoctorAppointmentsSchema(BaseModel):
    doctor: DoctorSchema
    total: int
    upcoming_count: int
    past_count: int
    today_count: int
    max_daily: int
    upcoming: List[AppointmentSchema]
    past: List[AppointmentSchema]

    @classmethod
    def from_dto(cls, dto: DoctorAppointmentsResponse) -> "DoctorAppointmentsSchema":
        return cls(
            doctor=DoctorSchema.from_domain(dto.doctor),
            total=dto.total,
            upcoming_count=dto.upcoming_count,
            past_count=dto.past_count,
            today_count=dto.today_count,
            max_daily=dto.max_daily,
            upcoming=[AppointmentSchema.from_domain(a) for a in dto.upcoming],
            past=[AppointmentSchema.from_domain(a) for a in dto.past],
        )
