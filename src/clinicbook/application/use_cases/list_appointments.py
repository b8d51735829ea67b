"""Admin listing and lookup of appointments across both collections."""

from typing import List, Optional

from ...domain.entities.appointment import Appointment
from ...domain.enums.appointment import AppointmentSource, AppointmentStatus
from ...domain.errors import AppointmentNotFoundError
from ..dto.appointment_dto import AppointmentRecord
from ..ports.repositories.appointment_repo import (
    AppointmentArchiveRepository,
    AppointmentRepository,
)


class ListAppointmentsUseCase:
    """Active appointments, newest date first.

    Records that already have an archive copy are left out; they are the
    remains of an interrupted archive move.
    """

    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        archive_repository: AppointmentArchiveRepository,
    ):
        self._appointments = appointment_repository
        self._archive = archive_repository

    async def execute(self, status: Optional[AppointmentStatus] = None) -> List[Appointment]:
        active = await self._appointments.find_all(status=status)
        archived_ids = await self._archive.find_ids()
        return [a for a in active if str(a.appointment_id) not in archived_ids]


class GetAppointmentUseCase:
    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        archive_repository: AppointmentArchiveRepository,
    ):
        self._appointments = appointment_repository
        self._archive = archive_repository

    async def execute(self, appointment_id: str) -> AppointmentRecord:
        """Look up an appointment, preferring the archive copy."""
        archived = await self._archive.find_by_id(appointment_id)
        if archived is not None:
            return AppointmentRecord(archived, AppointmentSource.ARCHIVE)
        active = await self._appointments.find_by_id(appointment_id)
        if active is not None:
            return AppointmentRecord(active, AppointmentSource.CURRENT)
        raise AppointmentNotFoundError(appointment_id)
