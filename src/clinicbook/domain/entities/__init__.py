"""
Domain entities package.
"""

from .appointment import ADMIN_TRANSITIONS, ARCHIVABLE_STATUSES, Appointment
from .doctor import Doctor

__all__ = [
    "Appointment",
    "Doctor",
    "ADMIN_TRANSITIONS",
    "ARCHIVABLE_STATUSES",
]
