"""Delete a doctor without touching their appointments."""

import logging

from ...core.clock import Clock
from ...domain.errors import DoctorNotFoundError
from ...domain.services.capacity import counts_toward_capacity
from ..dto.doctor_dto import DeleteDoctorResponse
from ..ports.repositories.appointment_repo import AppointmentRepository
from ..ports.repositories.doctor_repo import DoctorRepository

logger = logging.getLogger("clinicbook.doctors")


class DeleteDoctorUseCase:
    def __init__(
        self,
        doctor_repository: DoctorRepository,
        appointment_repository: AppointmentRepository,
        clock: Clock,
    ):
        self._doctors = doctor_repository
        self._appointments = appointment_repository
        self._clock = clock

    async def execute(self, doctor_id: str) -> DeleteDoctorResponse:
        doctor = await self._doctors.find_by_id(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(doctor_id)

        today = self._clock.today()
        upcoming = [
            a
            for a in await self._appointments.find_by_doctor(doctor_id)
            if a.date >= today and counts_toward_capacity(a)
        ]

        await self._doctors.delete(doctor_id)
        if upcoming:
            logger.warning(
                "Doctor %s deleted with %d upcoming appointment(s) left in place",
                doctor_id,
                len(upcoming),
            )
            message = (
                f"Doctor removed. {len(upcoming)} upcoming appointment(s) remain "
                "and should be reassigned or cancelled."
            )
        else:
            logger.info("Doctor %s deleted", doctor_id)
            message = "Doctor removed successfully."

        return DeleteDoctorResponse(
            doctor_id=doctor_id,
            doctor_name=doctor.display_name,
            upcoming_appointments=len(upcoming),
            message=message,
        )
