"""
Per-doctor, per-day booking capacity.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List

from ..entities.appointment import Appointment
from ..enums.appointment import AppointmentStatus
from ..value_objects.time_of_day import TimeOfDay

DEFAULT_MAX_DAILY = 4

LOAD_FULL = "full"
LOAD_BUSY = "busy"
LOAD_NORMAL = "normal"


def counts_toward_capacity(appointment: Appointment) -> bool:
    """Every status except cancelled occupies a daily slot, expired included.

    Used by booking, slot listing, and dashboard counts alike.
    """
    return appointment.status != AppointmentStatus.CANCELLED


def held_times(appointments: Iterable[Appointment]) -> List[TimeOfDay]:
    """Hours of ``appointments`` that occupy a daily slot."""
    return [a.time for a in appointments if counts_toward_capacity(a)]


@dataclass(frozen=True)
class CapacityPolicy:
    max_daily: int = DEFAULT_MAX_DAILY

    def __post_init__(self) -> None:
        if self.max_daily < 1:
            raise ValueError("max_daily must be at least 1")

    def remaining_capacity(self, booked_count: int) -> int:
        return max(0, self.max_daily - booked_count)

    def is_at_capacity(self, booked_count: int) -> bool:
        return self.remaining_capacity(booked_count) == 0

    def count_booked(
        self, appointments: Iterable[Appointment], doctor_id: str, on_date: date
    ) -> int:
        return sum(
            1
            for a in appointments
            if a.doctor_id == doctor_id and a.date == on_date and counts_toward_capacity(a)
        )

    def load_level(self, booked_count: int) -> str:
        """Dashboard badge for a doctor's day."""
        if booked_count >= self.max_daily:
            return LOAD_FULL
        if booked_count == self.max_daily - 1:
            return LOAD_BUSY
        return LOAD_NORMAL
