"""
Domain enums package.
"""

from .appointment import (
    AppointmentSource,
    AppointmentStatus,
    AvailabilityReason,
    RejectionReason,
)

__all__ = [
    "AppointmentSource",
    "AppointmentStatus",
    "AvailabilityReason",
    "RejectionReason",
]
