"""
Appointment repository interfaces: active collection, archive collection,
per-day booking ledger and booking analytics.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, List, Optional, Set, Tuple

from ....domain.entities.appointment import Appointment
from ....domain.enums.appointment import AppointmentStatus
from ....domain.value_objects.time_of_day import TimeOfDay


class AppointmentRepository(ABC):
    """Abstract repository for active appointments."""

    @abstractmethod
    async def save(self, appointment: Appointment) -> Appointment:
        """Insert or replace an active appointment."""
        pass

    @abstractmethod
    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        pass

    @abstractmethod
    async def find_all(self, status: Optional[AppointmentStatus] = None) -> List[Appointment]:
        """All active appointments, newest date first."""
        pass

    @abstractmethod
    async def find_by_doctor_and_date(self, doctor_id: str, on_date: date) -> List[Appointment]:
        pass

    @abstractmethod
    async def find_by_date(self, on_date: date) -> List[Appointment]:
        pass

    @abstractmethod
    async def find_by_doctor(self, doctor_id: str) -> List[Appointment]:
        pass

    @abstractmethod
    async def delete(self, appointment_id: str) -> bool:
        pass


class AppointmentArchiveRepository(ABC):
    """Abstract repository for archived appointments."""

    @abstractmethod
    async def save(self, appointment: Appointment) -> Appointment:
        """Store an archived copy (``archived_at`` set)."""
        pass

    @abstractmethod
    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        pass

    @abstractmethod
    async def find_all(self) -> List[Appointment]:
        """All archived appointments, newest date first."""
        pass

    @abstractmethod
    async def find_ids(self) -> Set[str]:
        pass

    @abstractmethod
    async def delete(self, appointment_id: str) -> bool:
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every archived appointment; returns how many were removed."""
        pass


class DayLedgerRepository(ABC):
    """Per-(doctor, date) booking ledger.

    ``reserve`` is a single conditional update in the store, so two
    concurrent bookings cannot both take the last slot of a day or the
    same hour. Each claimed hour remembers when it was claimed so that
    ``reconcile`` can tell a booking still in flight from a leaked hour.
    """

    @abstractmethod
    async def reserve(
        self,
        doctor_id: str,
        on_date: date,
        time: TimeOfDay,
        max_daily: int,
        seed_times: Iterable[TimeOfDay] = (),
        claimed_at: Optional[datetime] = None,
    ) -> bool:
        """Atomically claim ``time``; False when full or the hour is held.

        ``seed_times`` initialises a ledger that does not exist yet from the
        hours already held in the appointments collection.
        """
        pass

    @abstractmethod
    async def reconcile(
        self,
        doctor_id: str,
        on_date: date,
        held_times: Iterable[TimeOfDay],
        settled_before: datetime,
    ) -> bool:
        """Rewrite the ledger to the hours appointments actually hold.

        Hours claimed at or after ``settled_before`` are kept even when no
        appointment holds them yet. The rewrite is conditional on the
        ledger being unchanged since it was read; returns True when the
        ledger was rewritten.
        """
        pass

    @abstractmethod
    async def list_days(self, from_date: date) -> List[Tuple[str, date]]:
        """(doctor_id, date) of every ledger dated ``from_date`` or later."""
        pass

    @abstractmethod
    async def release(self, doctor_id: str, on_date: date, time: TimeOfDay) -> None:
        """Give a claimed hour back. Releasing an unheld hour is a no-op."""
        pass


class AnalyticsRepository(ABC):
    """Booking counters per creation date."""

    @abstractmethod
    async def increment_daily_bookings(self, on_date: date) -> int:
        """Increment and return the counter for ``on_date``."""
        pass

    @abstractmethod
    async def get_daily_bookings(self, on_date: date) -> int:
        pass
