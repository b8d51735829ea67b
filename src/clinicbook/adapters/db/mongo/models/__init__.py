"""
MongoDB Beanie document models.
"""

from .appointment_m import (
    AppointmentCounterMongo,
    AppointmentMongo,
    ArchivedAppointmentMongo,
    DayLedgerMongo,
)
from .doctor_m import DoctorMongo

DOCUMENT_MODELS = [
    DoctorMongo,
    AppointmentMongo,
    ArchivedAppointmentMongo,
    DayLedgerMongo,
    AppointmentCounterMongo,
]

__all__ = [
    "AppointmentCounterMongo",
    "AppointmentMongo",
    "ArchivedAppointmentMongo",
    "DayLedgerMongo",
    "DoctorMongo",
    "DOCUMENT_MODELS",
]
