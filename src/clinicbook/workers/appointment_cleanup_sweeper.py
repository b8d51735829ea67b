import asyncio
import logging
from typing import Optional

from clinicbook.application.dto.appointment_dto import CleanupResult
from clinicbook.application.use_cases.cleanup_appointments import CleanupAppointmentsUseCase
from clinicbook.core.config import get_settings

logger = logging.getLogger("clinicbook.cleanup")


def build_cleanup_use_case() -> CleanupAppointmentsUseCase:
    """Wire the cleanup use case from the process-wide providers."""
    from clinicbook.api.deps import (
        get_appointment_repository,
        get_archive_repository,
        get_ledger_repository,
    )
    from clinicbook.core.clock import get_clock

    return CleanupAppointmentsUseCase(
        get_appointment_repository(),
        get_archive_repository(),
        get_clock(),
        ledger_repository=get_ledger_repository(),
        claim_grace_seconds=get_settings().booking.ledger_claim_grace_seconds,
    )


async def _sweep_once(use_case: CleanupAppointmentsUseCase) -> CleanupResult:
    """
    Perform a single sweep: expire stale pending appointments, archive past
    ones and drop active copies that already have an archive record.
    """
    result = await use_case.execute()
    if result.failed:
        logger.warning(
            "[CleanupSweeper] Sweep finished with %d failed record(s); they will be retried next run",
            result.failed,
        )
    return result


async def run_appointment_cleanup_forever(
    interval_seconds: Optional[int] = None,
    use_case: Optional[CleanupAppointmentsUseCase] = None,
) -> None:
    """
    Run the cleanup sweep at startup and then on a fixed interval until cancelled.
    """
    settings = get_settings()
    if not settings.cleanup.sweeper_enabled:
        logger.info("[CleanupSweeper] Disabled via CLEANUP_SWEEPER_ENABLED")
        return

    interval = interval_seconds or settings.cleanup.sweeper_interval_seconds
    use_case = use_case or build_cleanup_use_case()

    logger.info("[CleanupSweeper] Starting (interval=%ss)", interval)

    while True:
        try:
            result = await _sweep_once(use_case)
            logger.info("[CleanupSweeper] %s", result.message)
        except Exception as e:  # noqa: PERF203
            logger.error("[CleanupSweeper] Sweep iteration failed: %s", e, exc_info=True)
        await asyncio.sleep(interval)
