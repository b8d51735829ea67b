"""List doctors, optionally by specialty."""

from typing import List, Optional

from ...domain.entities.doctor import Doctor
from ..ports.repositories.doctor_repo import DoctorRepository


class ListDoctorsUseCase:
    def __init__(self, doctor_repository: DoctorRepository):
        self._doctors = doctor_repository

    async def execute(self, specialty: Optional[str] = None) -> List[Doctor]:
        specialty = specialty.strip() if specialty else None
        return await self._doctors.find_all(specialty=specialty or None)
