"""Create or update a doctor from the admin dashboard."""

import logging

from ...domain.entities.doctor import Doctor
from ...domain.errors import DoctorNotFoundError, DuplicateDoctorError
from ..dto.doctor_dto import SaveDoctorRequest
from ..ports.repositories.doctor_repo import DoctorRepository

logger = logging.getLogger("clinicbook.doctors")


class SaveDoctorUseCase:
    """Use case for saving a doctor.

    New doctors get an ID derived from their name. Updates keep the ID and
    ``created_at`` of the existing record. The shift length rule applies to
    both.
    """

    def __init__(self, doctor_repository: DoctorRepository, required_shift_hours: int = 12):
        self._doctors = doctor_repository
        self._required_shift_hours = required_shift_hours

    async def create(self, request: SaveDoctorRequest) -> Doctor:
        doctor = Doctor.create(
            name=request.name,
            specialty=request.specialty,
            shift_start=request.shift_start,
            shift_end=request.shift_end,
            required_shift_hours=self._required_shift_hours,
            doctor_id=request.doctor_id,
        )
        if await self._doctors.exists_by_id(str(doctor.doctor_id)):
            raise DuplicateDoctorError(str(doctor.doctor_id))

        saved = await self._doctors.save(doctor)
        logger.info("Doctor added: id=%s specialty=%s", saved.doctor_id, saved.specialty)
        return saved

    async def update(self, doctor_id: str, request: SaveDoctorRequest) -> Doctor:
        existing = await self._doctors.find_by_id(doctor_id)
        if existing is None:
            raise DoctorNotFoundError(doctor_id)

        validated = Doctor.create(
            name=request.name,
            specialty=request.specialty,
            shift_start=request.shift_start,
            shift_end=request.shift_end,
            required_shift_hours=self._required_shift_hours,
            doctor_id=doctor_id,
        )
        existing.apply_update(validated)
        saved = await self._doctors.save(existing)
        logger.info("Doctor updated: id=%s", doctor_id)
        return saved
