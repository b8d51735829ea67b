"""
In-memory repository implementations.
"""

from .repositories import (
    InMemoryAnalyticsRepository,
    InMemoryAppointmentArchiveRepository,
    InMemoryAppointmentRepository,
    InMemoryDayLedgerRepository,
    InMemoryDoctorRepository,
)

__all__ = [
    "InMemoryAnalyticsRepository",
    "InMemoryAppointmentArchiveRepository",
    "InMemoryAppointmentRepository",
    "InMemoryDayLedgerRepository",
    "InMemoryDoctorRepository",
]
