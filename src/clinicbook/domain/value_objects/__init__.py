"""
Value objects package for domain layer.
"""

from .appointment_id import AppointmentId
from .doctor_id import DoctorId
from .time_of_day import MINUTES_PER_DAY, TimeOfDay

__all__ = [
    "AppointmentId",
    "DoctorId",
    "TimeOfDay",
    "MINUTES_PER_DAY",
]
