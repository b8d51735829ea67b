"""Move appointments from the active collection into the archive."""

import logging
from datetime import datetime

from ...core.clock import Clock
from ...domain.entities.appointment import Appointment
from ...domain.enums.appointment import AppointmentStatus
from ...domain.errors import AppointmentNotFoundError, InvalidStatusTransitionError
from ..ports.repositories.appointment_repo import (
    AppointmentArchiveRepository,
    AppointmentRepository,
)

logger = logging.getLogger("clinicbook.appointments")


async def move_to_archive(
    appointments: AppointmentRepository,
    archive: AppointmentArchiveRepository,
    appointment: Appointment,
    at: datetime,
) -> Appointment:
    """Copy then delete.

    If the delete fails the record exists in both collections; readers
    prefer the archive copy and the next sweep removes the active one.
    """
    archived = appointment.archived_copy(at)
    await archive.save(archived)
    await appointments.delete(str(appointment.appointment_id))
    return archived


class ArchiveAppointmentUseCase:
    """Manual archive from the admin dashboard.

    Only appointments that no longer hold a future slot may be archived:
    anything dated before today, or a cancelled one.
    """

    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        archive_repository: AppointmentArchiveRepository,
        clock: Clock,
    ):
        self._appointments = appointment_repository
        self._archive = archive_repository
        self._clock = clock

    async def execute(self, appointment_id: str) -> Appointment:
        appointment = await self._appointments.find_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)

        if appointment.date >= self._clock.today() and appointment.status != AppointmentStatus.CANCELLED:
            raise InvalidStatusTransitionError(appointment_id, appointment.status.value, "archived")

        archived = await move_to_archive(self._appointments, self._archive, appointment, self._clock.now())
        logger.info("Appointment %s moved to archive", appointment_id)
        return archived
