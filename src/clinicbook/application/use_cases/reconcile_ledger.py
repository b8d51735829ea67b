"""Repair a day ledger that no longer matches the appointments it guards."""

import logging
from datetime import date, datetime, timedelta
from typing import List

from ...domain.value_objects.time_of_day import TimeOfDay
from ..ports.repositories.appointment_repo import DayLedgerRepository

logger = logging.getLogger("clinicbook.ledger")

DEFAULT_CLAIM_GRACE_SECONDS = 120


async def reconcile_day_ledger(
    ledger: DayLedgerRepository,
    doctor_id: str,
    on_date: date,
    held: List[TimeOfDay],
    now: datetime,
    grace_seconds: int = DEFAULT_CLAIM_GRACE_SECONDS,
) -> bool:
    """Rebuild one ledger from ``held``, keeping claims younger than the grace period.

    Hours leak when a release fails after a cancel or a failed insert, and go
    missing when an insert reported as failed actually landed.
    """
    settled_before = now - timedelta(seconds=grace_seconds)
    repaired = await ledger.reconcile(doctor_id, on_date, held, settled_before)
    if repaired:
        logger.warning(
            "Rebuilt ledger for doctor=%s date=%s from appointments: %s",
            doctor_id,
            on_date.isoformat(),
            ", ".join(str(t) for t in sorted(held)) or "none",
        )
    return repaired
