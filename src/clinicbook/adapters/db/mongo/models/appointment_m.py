"""
MongoDB Beanie models for appointments: the active collection, the
archive, per-day booking ledgers and booking counters.

Dates are stored as ISO ``YYYY-MM-DD`` strings and times as ``HH:MM`` so
that equality filters and lexical sorting match calendar order.
"""

from datetime import datetime
from typing import Dict, List, Optional

from beanie import Document
from pydantic import Field, field_validator
from pymongo import ASCENDING, DESCENDING, IndexModel

from clinicbook.core.utils.datetime_utils import is_valid_date
from clinicbook.domain.enums.appointment import AppointmentStatus
from clinicbook.domain.value_objects.time_of_day import TimeOfDay


def _check_date(v: str) -> str:
    if not is_valid_date(v):
        raise ValueError(f"Invalid appointment date: {v!r}")
    return v


def _check_time(v: str) -> str:
    TimeOfDay.parse(v)
    return v


class AppointmentMongo(Document):
    """MongoDB model for an active appointment."""

    appointment_id: str = Field(..., description="Appointment ID")
    doctor_id: str = Field(..., description="Doctor reference")
    date: str = Field(..., description="Calendar date, YYYY-MM-DD")
    time: str = Field(..., description="Slot start, HH:MM")
    patient_name: str = Field(..., description="Patient full name")
    phone: str = Field(..., description="Normalised phone number")
    email: Optional[str] = None
    reason: Optional[str] = None
    status: AppointmentStatus = Field(default=AppointmentStatus.PENDING)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None

    validate_date = field_validator("date")(_check_date)
    validate_time = field_validator("time")(_check_time)

    class Settings:
        name = "appointments"
        indexes = [
            IndexModel([("appointment_id", ASCENDING)], unique=True),
            IndexModel([("doctor_id", ASCENDING), ("date", ASCENDING)]),
            IndexModel([("date", DESCENDING), ("time", DESCENDING)]),
            "status",
        ]


class ArchivedAppointmentMongo(Document):
    """MongoDB model for an archived appointment."""

    appointment_id: str = Field(..., description="Appointment ID")
    doctor_id: str
    date: str
    time: str
    patient_name: str
    phone: str
    email: Optional[str] = None
    reason: Optional[str] = None
    status: AppointmentStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    expired_at: Optional[datetime] = None
    archived_at: datetime = Field(default_factory=datetime.utcnow)

    validate_date = field_validator("date")(_check_date)
    validate_time = field_validator("time")(_check_time)

    class Settings:
        name = "appointment_archive"
        indexes = [
            IndexModel([("appointment_id", ASCENDING)], unique=True),
            IndexModel([("date", DESCENDING), ("time", DESCENDING)]),
        ]


class DayLedgerMongo(Document):
    """Hours held for one doctor on one date.

    Updated only through conditional ``find_one_and_update`` calls so the
    count and the hour list stay consistent under concurrent bookings.
    ``claims`` records when each hour was claimed by a booking.
    """

    doctor_id: str
    date: str
    booked_count: int = 0
    booked_times: List[str] = Field(default_factory=list)
    claims: Dict[str, datetime] = Field(default_factory=dict)

    class Settings:
        name = "appointment_day_ledgers"
        indexes = [
            IndexModel([("doctor_id", ASCENDING), ("date", ASCENDING)], unique=True),
        ]


class AppointmentCounterMongo(Document):
    """Successful bookings per creation date."""

    date: str
    count: int = 0

    class Settings:
        name = "appointment_analytics"
        indexes = [IndexModel([("date", ASCENDING)], unique=True)]
