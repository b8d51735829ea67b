"""
API schemas package.
"""

from .appointments import (
    AppointmentSchema,
    AvailableSlotsSchema,
    BookAppointmentRequestSchema,
    BookingResultSchema,
    DashboardSchema,
    DuplicateCheckSchema,
    UpdateStatusRequestSchema,
)
from .common import ApiResponse, ErrorResponse
from .doctors import DoctorAppointmentsSchema, DoctorSchema, SaveDoctorRequestSchema

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "AppointmentSchema",
    "AvailableSlotsSchema",
    "BookAppointmentRequestSchema",
    "BookingResultSchema",
    "DashboardSchema",
    "DuplicateCheckSchema",
    "UpdateStatusRequestSchema",
    "DoctorAppointmentsSchema",
    "DoctorSchema",
    "SaveDoctorRequestSchema",
]
