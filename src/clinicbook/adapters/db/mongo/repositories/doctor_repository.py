"""
MongoDB implementation of DoctorRepository.
"""

from datetime import datetime
from typing import List, Optional

from clinicbook.application.ports.repositories.doctor_repo import DoctorRepository
from clinicbook.domain.entities.doctor import Doctor
from clinicbook.domain.value_objects.doctor_id import DoctorId
from clinicbook.domain.value_objects.time_of_day import TimeOfDay

from ..models.doctor_m import DoctorMongo
from ..store_call import store_call


class MongoDoctorRepository(DoctorRepository):
    """MongoDB implementation of DoctorRepository."""

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout

    async def save(self, doctor: Doctor) -> Doctor:
        async def _save() -> DoctorMongo:
            doctor_mongo = await DoctorMongo.find_one(
                DoctorMongo.doctor_id == doctor.doctor_id.value
            )
            if doctor_mongo:
                doctor_mongo.name = doctor.name
                doctor_mongo.specialty = doctor.specialty
                doctor_mongo.shift_start = str(doctor.shift_start) if doctor.shift_start else None
                doctor_mongo.shift_end = str(doctor.shift_end) if doctor.shift_end else None
                doctor_mongo.updated_at = datetime.utcnow()
            else:
                doctor_mongo = self._domain_to_mongo(doctor)
            await doctor_mongo.save()
            return doctor_mongo

        saved = await store_call("doctors.save", _save(), self._timeout)
        return self._mongo_to_domain(saved)

    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        doctor_mongo = await store_call(
            "doctors.find_by_id",
            DoctorMongo.find_one(DoctorMongo.doctor_id == doctor_id),
            self._timeout,
        )
        return self._mongo_to_domain(doctor_mongo) if doctor_mongo else None

    async def exists_by_id(self, doctor_id: str) -> bool:
        count = await store_call(
            "doctors.exists_by_id",
            DoctorMongo.find(DoctorMongo.doctor_id == doctor_id).count(),
            self._timeout,
        )
        return count > 0

    async def find_all(self, specialty: Optional[str] = None) -> List[Doctor]:
        query = DoctorMongo.find(DoctorMongo.specialty == specialty) if specialty else DoctorMongo.find()
        doctors_mongo = await store_call(
            "doctors.find_all", query.sort("+name").to_list(), self._timeout
        )
        return [self._mongo_to_domain(d) for d in doctors_mongo]

    async def delete(self, doctor_id: str) -> bool:
        async def _delete() -> bool:
            doctor_mongo = await DoctorMongo.find_one(DoctorMongo.doctor_id == doctor_id)
            if not doctor_mongo:
                return False
            await doctor_mongo.delete()
            return True

        return await store_call("doctors.delete", _delete(), self._timeout)

    def _domain_to_mongo(self, doctor: Doctor) -> DoctorMongo:
        return DoctorMongo(
            doctor_id=doctor.doctor_id.value,
            name=doctor.name,
            specialty=doctor.specialty,
            shift_start=str(doctor.shift_start) if doctor.shift_start else None,
            shift_end=str(doctor.shift_end) if doctor.shift_end else None,
            created_at=doctor.created_at,
            updated_at=doctor.updated_at,
        )

    def _mongo_to_domain(self, doctor_mongo: DoctorMongo) -> Doctor:
        return Doctor(
            doctor_id=DoctorId(doctor_mongo.doctor_id),
            name=doctor_mongo.name,
            specialty=doctor_mongo.specialty,
            shift_start=TimeOfDay.parse(doctor_mongo.shift_start) if doctor_mongo.shift_start else None,
            shift_end=TimeOfDay.parse(doctor_mongo.shift_end) if doctor_mongo.shift_end else None,
            created_at=doctor_mongo.created_at,
            updated_at=doctor_mongo.updated_at,
        )
