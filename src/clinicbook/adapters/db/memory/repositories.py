"""
In-memory implementations of the repository ports.

Used by the test suite and for running the API without MongoDB
(``STORE_BACKEND=memory``). Each repository serialises its mutations with
an ``asyncio.Lock`` so the ledger keeps the same all-or-nothing semantics
as the MongoDB conditional update.
"""

import asyncio
import copy
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from clinicbook.application.ports.repositories.appointment_repo import (
    AnalyticsRepository,
    AppointmentArchiveRepository,
    AppointmentRepository,
    DayLedgerRepository,
)
from clinicbook.application.ports.repositories.doctor_repo import DoctorRepository
from clinicbook.domain.entities.appointment import Appointment
from clinicbook.domain.entities.doctor import Doctor
from clinicbook.domain.enums.appointment import AppointmentStatus
from clinicbook.domain.value_objects.time_of_day import TimeOfDay


def _newest_first(appointments: Iterable[Appointment]) -> List[Appointment]:
    return sorted(appointments, key=lambda a: (a.date, a.time), reverse=True)


class InMemoryDoctorRepository(DoctorRepository):
    def __init__(self) -> None:
        self._doctors: Dict[str, Doctor] = {}
        self._lock = asyncio.Lock()

    async def save(self, doctor: Doctor) -> Doctor:
        async with self._lock:
            self._doctors[doctor.doctor_id.value] = copy.deepcopy(doctor)
        return doctor

    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        doctor = self._doctors.get(doctor_id)
        return copy.deepcopy(doctor) if doctor else None

    async def exists_by_id(self, doctor_id: str) -> bool:
        return doctor_id in self._doctors

    async def find_all(self, specialty: Optional[str] = None) -> List[Doctor]:
        doctors = [
            d for d in self._doctors.values() if specialty is None or d.specialty == specialty
        ]
        return [copy.deepcopy(d) for d in sorted(doctors, key=lambda d: d.name)]

    async def delete(self, doctor_id: str) -> bool:
        async with self._lock:
            return self._doctors.pop(doctor_id, None) is not None


class _AppointmentStore:
    def __init__(self) -> None:
        self._items: Dict[str, Appointment] = {}
        self._lock = asyncio.Lock()

    async def _put(self, appointment: Appointment) -> Appointment:
        async with self._lock:
            self._items[appointment.appointment_id.value] = copy.deepcopy(appointment)
        return appointment

    def _get(self, appointment_id: str) -> Optional[Appointment]:
        item = self._items.get(appointment_id)
        return copy.deepcopy(item) if item else None

    def _select(self, predicate) -> List[Appointment]:
        return [copy.deepcopy(a) for a in self._items.values() if predicate(a)]

    async def _remove(self, appointment_id: str) -> bool:
        async with self._lock:
            return self._items.pop(appointment_id, None) is not None


class InMemoryAppointmentRepository(_AppointmentStore, AppointmentRepository):
    async def save(self, appointment: Appointment) -> Appointment:
        return await self._put(appointment)

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        return self._get(appointment_id)

    async def find_all(self, status: Optional[AppointmentStatus] = None) -> List[Appointment]:
        return _newest_first(self._select(lambda a: status is None or a.status == status))

    async def find_by_doctor_and_date(self, doctor_id: str, on_date: date) -> List[Appointment]:
        return self._select(lambda a: a.doctor_id == doctor_id and a.date == on_date)

    async def find_by_date(self, on_date: date) -> List[Appointment]:
        return self._select(lambda a: a.date == on_date)

    async def find_by_doctor(self, doctor_id: str) -> List[Appointment]:
        return _newest_first(self._select(lambda a: a.doctor_id == doctor_id))

    async def delete(self, appointment_id: str) -> bool:
        return await self._remove(appointment_id)


class InMemoryAppointmentArchiveRepository(_AppointmentStore, AppointmentArchiveRepository):
    async def save(self, appointment: Appointment) -> Appointment:
        return await self._put(appointment)

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        return self._get(appointment_id)

    async def find_all(self) -> List[Appointment]:
        return _newest_first(self._select(lambda a: True))

    async def find_ids(self) -> Set[str]:
        return set(self._items)

    async def delete(self, appointment_id: str) -> bool:
        return await self._remove(appointment_id)

    async def delete_all(self) -> int:
        async with self._lock:
            count = len(self._items)
            self._items.clear()
        return count


class InMemoryDayLedgerRepository(DayLedgerRepository):
    """Ledgers keyed by (doctor_id, date); each maps a held hour to its claim time."""

    def __init__(self) -> None:
        self._ledgers: Dict[Tuple[str, date], Dict[str, Optional[datetime]]] = {}
        self._lock = asyncio.Lock()

    async def reserve(
        self,
        doctor_id: str,
        on_date: date,
        time: TimeOfDay,
        max_daily: int,
        seed_times: Iterable[TimeOfDay] = (),
        claimed_at: Optional[datetime] = None,
    ) -> bool:
        slot = str(time)
        async with self._lock:
            key = (doctor_id, on_date)
            if key not in self._ledgers:
                self._ledgers[key] = dict.fromkeys(sorted({str(t) for t in seed_times}))
            held = self._ledgers[key]
            if len(held) >= max_daily or slot in held:
                return False
            held[slot] = claimed_at
            return True

    async def release(self, doctor_id: str, on_date: date, time: TimeOfDay) -> None:
        async with self._lock:
            held = self._ledgers.get((doctor_id, on_date))
            if held is not None:
                held.pop(str(time), None)

    async def reconcile(
        self,
        doctor_id: str,
        on_date: date,
        held_times: Iterable[TimeOfDay],
        settled_before: datetime,
    ) -> bool:
        wanted = {str(t) for t in held_times}
        async with self._lock:
            current = self._ledgers.get((doctor_id, on_date))
            if current is None:
                return False
            in_flight = {
                slot
                for slot, claimed_at in current.items()
                if slot not in wanted and claimed_at is not None and claimed_at >= settled_before
            }
            target = wanted | in_flight
            if target == set(current):
                return False
            self._ledgers[(doctor_id, on_date)] = {
                slot: current.get(slot) for slot in sorted(target)
            }
            return True

    async def list_days(self, from_date: date) -> List[Tuple[str, date]]:
        return sorted(key for key in self._ledgers if key[1] >= from_date)

    def held(self, doctor_id: str, on_date: date) -> List[str]:
        return list(self._ledgers.get((doctor_id, on_date), {}))


class InMemoryAnalyticsRepository(AnalyticsRepository):
    def __init__(self) -> None:
        self._counts: Dict[date, int] = defaultdict(int)

    async def increment_daily_bookings(self, on_date: date) -> int:
        self._counts[on_date] += 1
        return self._counts[on_date]

    async def get_daily_bookings(self, on_date: date) -> int:
        return self._counts.get(on_date, 0)
