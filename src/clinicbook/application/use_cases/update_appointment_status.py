"""Administrator status changes (confirm / cancel)."""

import logging

from ...core.clock import Clock
from ...core.exceptions import StoreUnavailableError
from ...domain.entities.appointment import Appointment
from ...domain.enums.appointment import AppointmentStatus
from ...domain.errors import AppointmentNotFoundError, InvalidStatusTransitionError
from ...domain.services.capacity import counts_toward_capacity
from ..ports.repositories.appointment_repo import (
    AppointmentArchiveRepository,
    AppointmentRepository,
    DayLedgerRepository,
)

logger = logging.getLogger("clinicbook.appointments")


class UpdateAppointmentStatusUseCase:
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

    async def execute(self, appointment_id: str, target: AppointmentStatus) -> Appointment:
        archived = await self._archive.find_by_id(appointment_id)
        if archived is not None:
            raise InvalidStatusTransitionError(appointment_id, "archived", target.value)

        appointment = await self._appointments.find_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)

        previous = appointment.status
        was_holding = counts_toward_capacity(appointment)
        appointment.transition_to(target, self._clock.now())
        await self._appointments.save(appointment)
        logger.info(
            "Appointment %s status changed %s -> %s", appointment_id, previous.value, target.value
        )

        if was_holding and not counts_toward_capacity(appointment):
            try:
                await self._ledger.release(appointment.doctor_id, appointment.date, appointment.time)
            except StoreUnavailableError:
                logger.error(
                    "Failed to release ledger hour for cancelled appointment %s; left for reconciliation",
                    appointment_id,
                    exc_info=True,
                )
        return appointment
