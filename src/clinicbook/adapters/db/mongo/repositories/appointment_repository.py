"""
MongoDB implementations of the appointment repositories.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional, Set, Tuple

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from clinicbook.application.ports.repositories.appointment_repo import (
    AnalyticsRepository,
    AppointmentArchiveRepository,
    AppointmentRepository,
    DayLedgerRepository,
)
from clinicbook.domain.entities.appointment import Appointment
from clinicbook.domain.enums.appointment import AppointmentStatus
from clinicbook.domain.value_objects.appointment_id import AppointmentId
from clinicbook.domain.value_objects.time_of_day import TimeOfDay

from ..models.appointment_m import (
    AppointmentCounterMongo,
    AppointmentMongo,
    ArchivedAppointmentMongo,
    DayLedgerMongo,
)
from ..store_call import store_call

NEWEST_FIRST = ("-date", "-time")


def _to_domain(doc) -> Appointment:
    return Appointment(
        appointment_id=AppointmentId(doc.appointment_id),
        doctor_id=doc.doctor_id,
        date=date.fromisoformat(doc.date),
        time=TimeOfDay.parse(doc.time),
        patient_name=doc.patient_name,
        phone=doc.phone,
        email=doc.email,
        reason=doc.reason,
        status=AppointmentStatus(doc.status),
        created_at=doc.created_at,
        updated_at=doc.updated_at,
        expired_at=doc.expired_at,
        archived_at=getattr(doc, "archived_at", None),
    )


def _fields(appointment: Appointment) -> dict:
    return {
        "appointment_id": appointment.appointment_id.value,
        "doctor_id": appointment.doctor_id,
        "date": appointment.date_iso,
        "time": str(appointment.time),
        "patient_name": appointment.patient_name,
        "phone": appointment.phone,
        "email": appointment.email,
        "reason": appointment.reason,
        "status": appointment.status,
        "created_at": appointment.created_at,
        "updated_at": appointment.updated_at,
        "expired_at": appointment.expired_at,
    }


class MongoAppointmentRepository(AppointmentRepository):
    """Active appointments collection."""

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout

    async def save(self, appointment: Appointment) -> Appointment:
        async def _save() -> AppointmentMongo:
            doc = await AppointmentMongo.find_one(
                AppointmentMongo.appointment_id == appointment.appointment_id.value
            )
            if doc:
                for key, value in _fields(appointment).items():
                    setattr(doc, key, value)
            else:
                doc = AppointmentMongo(**_fields(appointment))
            await doc.save()
            return doc

        return _to_domain(await store_call("appointments.save", _save(), self._timeout))

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        doc = await store_call(
            "appointments.find_by_id",
            AppointmentMongo.find_one(AppointmentMongo.appointment_id == appointment_id),
            self._timeout,
        )
        return _to_domain(doc) if doc else None

    async def find_all(self, status: Optional[AppointmentStatus] = None) -> List[Appointment]:
        query = (
            AppointmentMongo.find(AppointmentMongo.status == status)
            if status
            else AppointmentMongo.find()
        )
        docs = await store_call(
            "appointments.find_all", query.sort(*NEWEST_FIRST).to_list(), self._timeout
        )
        return [_to_domain(d) for d in docs]

    async def find_by_doctor_and_date(self, doctor_id: str, on_date: date) -> List[Appointment]:
        docs = await store_call(
            "appointments.find_by_doctor_and_date",
            AppointmentMongo.find(
                AppointmentMongo.doctor_id == doctor_id,
                AppointmentMongo.date == on_date.isoformat(),
            ).to_list(),
            self._timeout,
        )
        return [_to_domain(d) for d in docs]

    async def find_by_date(self, on_date: date) -> List[Appointment]:
        docs = await store_call(
            "appointments.find_by_date",
            AppointmentMongo.find(AppointmentMongo.date == on_date.isoformat()).to_list(),
            self._timeout,
        )
        return [_to_domain(d) for d in docs]

    async def find_by_doctor(self, doctor_id: str) -> List[Appointment]:
        docs = await store_call(
            "appointments.find_by_doctor",
            AppointmentMongo.find(AppointmentMongo.doctor_id == doctor_id)
            .sort(*NEWEST_FIRST)
            .to_list(),
            self._timeout,
        )
        return [_to_domain(d) for d in docs]

    async def delete(self, appointment_id: str) -> bool:
        result = await store_call(
            "appointments.delete",
            AppointmentMongo.find(AppointmentMongo.appointment_id == appointment_id).delete(),
            self._timeout,
        )
        return bool(result and result.deleted_count)


class MongoAppointmentArchiveRepository(AppointmentArchiveRepository):
    """Archived appointments collection."""

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout

    async def save(self, appointment: Appointment) -> Appointment:
        async def _save() -> ArchivedAppointmentMongo:
            fields = _fields(appointment)
            fields["archived_at"] = appointment.archived_at
            doc = await ArchivedAppointmentMongo.find_one(
                ArchivedAppointmentMongo.appointment_id == appointment.appointment_id.value
            )
            if doc:
                for key, value in fields.items():
                    setattr(doc, key, value)
            else:
                doc = ArchivedAppointmentMongo(**fields)
            await doc.save()
            return doc

        return _to_domain(await store_call("archive.save", _save(), self._timeout))

    async def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        doc = await store_call(
            "archive.find_by_id",
            ArchivedAppointmentMongo.find_one(
                ArchivedAppointmentMongo.appointment_id == appointment_id
            ),
            self._timeout,
        )
        return _to_domain(doc) if doc else None

    async def find_all(self) -> List[Appointment]:
        docs = await store_call(
            "archive.find_all",
            ArchivedAppointmentMongo.find().sort(*NEWEST_FIRST).to_list(),
            self._timeout,
        )
        return [_to_domain(d) for d in docs]

    async def find_ids(self) -> Set[str]:
        async def _ids() -> Set[str]:
            collection = ArchivedAppointmentMongo.get_motor_collection()
            return set(await collection.distinct("appointment_id"))

        return await store_call("archive.find_ids", _ids(), self._timeout)

    async def delete(self, appointment_id: str) -> bool:
        result = await store_call(
            "archive.delete",
            ArchivedAppointmentMongo.find(
                ArchivedAppointmentMongo.appointment_id == appointment_id
            ).delete(),
            self._timeout,
        )
        return bool(result and result.deleted_count)

    async def delete_all(self) -> int:
        result = await store_call(
            "archive.delete_all", ArchivedAppointmentMongo.find_all().delete(), self._timeout
        )
        return result.deleted_count if result else 0


class MongoDayLedgerRepository(DayLedgerRepository):
    """Per-(doctor, date) ledger using conditional atomic updates.

    Ledger documents hold ``booked_times``, ``booked_count`` and
    ``claims``, a map from claimed hour to claim time. Hours seeded from
    existing appointments have no claim entry.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout

    @staticmethod
    def _claim_update(slot: str, claimed_at: Optional[datetime]) -> dict:
        update = {"$inc": {"booked_count": 1}, "$push": {"booked_times": slot}}
        if claimed_at is not None:
            update["$set"] = {f"claims.{slot}": claimed_at}
        return update

    async def reserve(
        self,
        doctor_id: str,
        on_date: date,
        time: TimeOfDay,
        max_daily: int,
        seed_times: Iterable[TimeOfDay] = (),
        claimed_at: Optional[datetime] = None,
    ) -> bool:
        key = {"doctor_id": doctor_id, "date": on_date.isoformat()}
        slot = str(time)
        seed = sorted({str(t) for t in seed_times})
        open_slot = {**key, "booked_count": {"$lt": max_daily}, "booked_times": {"$ne": slot}}

        async def _claim() -> bool:
            collection = DayLedgerMongo.get_motor_collection()
            claimed = await collection.find_one_and_update(
                open_slot,
                self._claim_update(slot, claimed_at),
                return_document=ReturnDocument.AFTER,
            )
            if claimed is not None:
                return True
            if await collection.count_documents(key, limit=1):
                return False

            # First booking recorded for this day: seed from the hours already held
            if slot in seed or len(seed) >= max_daily:
                return False
            try:
                await collection.insert_one(
                    {
                        **key,
                        "booked_count": len(seed) + 1,
                        "booked_times": seed + [slot],
                        "claims": {slot: claimed_at} if claimed_at is not None else {},
                    }
                )
                return True
            except DuplicateKeyError:
                # A concurrent booking created the ledger first; retry the conditional update
                claimed = await collection.find_one_and_update(
                    open_slot, self._claim_update(slot, claimed_at)
                )
                return claimed is not None

        return await store_call("ledger.reserve", _claim(), self._timeout)

    async def release(self, doctor_id: str, on_date: date, time: TimeOfDay) -> None:
        slot = str(time)

        async def _release() -> None:
            collection = DayLedgerMongo.get_motor_collection()
            await collection.update_one(
                {"doctor_id": doctor_id, "date": on_date.isoformat(), "booked_times": slot},
                {
                    "$inc": {"booked_count": -1},
                    "$pull": {"booked_times": slot},
                    "$unset": {f"claims.{slot}": ""},
                },
            )

        await store_call("ledger.release", _release(), self._timeout)

    async def reconcile(
        self,
        doctor_id: str,
        on_date: date,
        held_times: Iterable[TimeOfDay],
        settled_before: datetime,
    ) -> bool:
        key = {"doctor_id": doctor_id, "date": on_date.isoformat()}
        wanted = {str(t) for t in held_times}

        async def _reconcile() -> bool:
            collection = DayLedgerMongo.get_motor_collection()
            doc = await collection.find_one(key)
            if doc is None:
                return False
            current = list(doc.get("booked_times", []))
            claims = doc.get("claims") or {}
            in_flight = {
                slot
                for slot in current
                if slot not in wanted
                and claims.get(slot) is not None
                and claims[slot] >= settled_before
            }
            target = sorted(wanted | in_flight)
            if set(target) == set(current) and doc.get("booked_count") == len(current):
                return False

            # Only rewrite the exact ledger that was read; a concurrent claim wins
            result = await collection.update_one(
                {**key, "booked_times": current},
                {
                    "$set": {
                        "booked_times": target,
                        "booked_count": len(target),
                        "claims": {slot: claims[slot] for slot in target if slot in claims},
                    }
                },
            )
            return result.modified_count == 1

        return await store_call("ledger.reconcile", _reconcile(), self._timeout)

    async def list_days(self, from_date: date) -> List[Tuple[str, date]]:
        docs = await store_call(
            "ledger.list_days",
            DayLedgerMongo.find(DayLedgerMongo.date >= from_date.isoformat()).to_list(),
            self._timeout,
        )
        return sorted((d.doctor_id, date.fromisoformat(d.date)) for d in docs)


class MongoAnalyticsRepository(AnalyticsRepository):
    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout

    async def increment_daily_bookings(self, on_date: date) -> int:
        async def _increment() -> int:
            collection = AppointmentCounterMongo.get_motor_collection()
            doc = await collection.find_one_and_update(
                {"date": on_date.isoformat()},
                {"$inc": {"count": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
            return int(doc["count"])

        return await store_call("analytics.increment", _increment(), self._timeout)

    async def get_daily_bookings(self, on_date: date) -> int:
        doc = await store_call(
            "analytics.get",
            AppointmentCounterMongo.find_one(AppointmentCounterMongo.date == on_date.isoformat()),
            self._timeout,
        )
        return doc.count if doc else 0
