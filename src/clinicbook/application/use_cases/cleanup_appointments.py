"""Periodic cleanup: expire stale pending appointments and archive past ones."""

import logging
from typing import Optional

from ...core.clock import Clock
from ...core.exceptions import StoreUnavailableError
from ...domain.services.capacity import held_times
from ...domain.services.lifecycle import plan_sweep
from ..dto.appointment_dto import CleanupResult
from ..ports.repositories.appointment_repo import (
    AppointmentArchiveRepository,
    AppointmentRepository,
    DayLedgerRepository,
)
from .archive_appointment import move_to_archive
from .reconcile_ledger import DEFAULT_CLAIM_GRACE_SECONDS, reconcile_day_ledger

logger = logging.getLogger("clinicbook.cleanup")


class CleanupAppointmentsUseCase:
    """Apply one sweep of the appointment lifecycle.

    A store failure on one record is logged and counted; the rest of the
    sweep continues. A failure reading the collections aborts the sweep.
    When a ledger repository is given, ledgers for today and later are
    rebuilt from the appointments they guard.
    """

    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        archive_repository: AppointmentArchiveRepository,
        clock: Clock,
        ledger_repository: Optional[DayLedgerRepository] = None,
        claim_grace_seconds: int = DEFAULT_CLAIM_GRACE_SECONDS,
    ):
        self._appointments = appointment_repository
        self._archive = archive_repository
        self._clock = clock
        self._ledger = ledger_repository
        self._claim_grace_seconds = claim_grace_seconds

    async def execute(self) -> CleanupResult:
        now = self._clock.now()
        active = await self._appointments.find_all()
        archived_ids = await self._archive.find_ids()
        plan = plan_sweep(active, now.date(), archived_ids)
        result = CleanupResult()
        if self._ledger is not None:
            await self._reconcile_ledgers(now, result)
        if plan.is_empty:
            return result

        for appointment in plan.to_expire:
            try:
                appointment.expire(now)
                await self._appointments.save(appointment)
                result.expired += 1
            except StoreUnavailableError:
                result.failed += 1
                logger.error("Failed to expire appointment %s", appointment.appointment_id, exc_info=True)

        for appointment in plan.to_archive:
            try:
                await move_to_archive(self._appointments, self._archive, appointment, now)
                result.archived += 1
            except StoreUnavailableError:
                result.failed += 1
                logger.error("Failed to archive appointment %s", appointment.appointment_id, exc_info=True)

        for appointment in plan.stale_active:
            try:
                await self._appointments.delete(str(appointment.appointment_id))
                result.stale_removed += 1
            except StoreUnavailableError:
                result.failed += 1
                logger.error(
                    "Failed to remove stale active copy %s", appointment.appointment_id, exc_info=True
                )

        logger.info(
            "Cleanup finished: expired=%d archived=%d stale_removed=%d ledgers_repaired=%d failed=%d",
            result.expired,
            result.archived,
            result.stale_removed,
            result.ledgers_repaired,
            result.failed,
        )
        return result

    async def _reconcile_ledgers(self, now, result: CleanupResult) -> None:
        for doctor_id, on_date in await self._ledger.list_days(now.date()):
            try:
                day = await self._appointments.find_by_doctor_and_date(doctor_id, on_date)
                if await reconcile_day_ledger(
                    self._ledger, doctor_id, on_date, held_times(day), now, self._claim_grace_seconds
                ):
                    result.ledgers_repaired += 1
            except StoreUnavailableError:
                result.failed += 1
                logger.error(
                    "Failed to reconcile ledger for doctor=%s date=%s",
                    doctor_id,
                    on_date.isoformat(),
                    exc_info=True,
                )
