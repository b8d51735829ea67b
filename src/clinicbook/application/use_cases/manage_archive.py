"""Archive view and permanent deletion."""

import logging
from typing import List

from ...core.clock import Clock
from ...core.exceptions import StoreUnavailableError
from ...domain.enums.appointment import AppointmentSource
from ...domain.errors import AppointmentNotFoundError
from ...domain.services.capacity import counts_toward_capacity
from ..dto.appointment_dto import AppointmentRecord
from ..ports.repositories.appointment_repo import (
    AppointmentArchiveRepository,
    AppointmentRepository,
    DayLedgerRepository,
)

logger = logging.getLogger("clinicbook.archive")


class ManageArchiveUseCase:
    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        archive_repository: AppointmentArchiveRepository,
        ledger_repository: DayLedgerRepository,
        clock: Clock,
    ):
        self._appointments = appointment_repository
        self._archive = archive_repository
        self._ledger = ledger_repository
        self._clock = clock

    async def list_past(self) -> List[AppointmentRecord]:
        """Archived appointments plus active ones dated before today.

        An id present in both collections is reported once, from the archive.
        """
        today = self._clock.today()
        archived = await self._archive.find_all()
        active = await self._appointments.find_all()

        records = {
            str(a.appointment_id): AppointmentRecord(a, AppointmentSource.CURRENT)
            for a in active
            if a.date < today
        }
        for a in archived:
            records[str(a.appointment_id)] = AppointmentRecord(a, AppointmentSource.ARCHIVE)

        return sorted(
            records.values(),
            key=lambda r: (r.appointment.date, r.appointment.time),
            reverse=True,
        )

    async def delete(self, appointment_id: str, source: AppointmentSource) -> None:
        if source == AppointmentSource.ARCHIVE:
            if not await self._archive.delete(appointment_id):
                raise AppointmentNotFoundError(appointment_id)
            logger.info("Archived appointment %s deleted", appointment_id)
            return

        appointment = await self._appointments.find_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)
        await self._appointments.delete(appointment_id)
        if counts_toward_capacity(appointment) and appointment.date >= self._clock.today():
            try:
                await self._ledger.release(appointment.doctor_id, appointment.date, appointment.time)
            except StoreUnavailableError:
                logger.error(
                    "Failed to release ledger hour for deleted appointment %s; left for reconciliation",
                    appointment_id,
                    exc_info=True,
                )
        logger.info("Active appointment %s deleted", appointment_id)

    async def delete_all(self) -> int:
        deleted = await self._archive.delete_all()
        logger.warning("Deleted all %d archived appointments", deleted)
        return deleted
