"""
Cleanup sweep planning for the appointment lifecycle.

Appointments dated strictly before today are either expired (still
pending) or archived (confirmed/cancelled). Expired records stay in the
active collection.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Set

from ..entities.appointment import ARCHIVABLE_STATUSES, Appointment
from ..enums.appointment import AppointmentStatus


@dataclass
class SweepPlan:
    to_expire: List[Appointment] = field(default_factory=list)
    to_archive: List[Appointment] = field(default_factory=list)
    # active copies whose archive copy already exists (interrupted moves)
    stale_active: List[Appointment] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.to_expire or self.to_archive or self.stale_active)


def plan_sweep(
    active: Iterable[Appointment], today: date, archived_ids: Set[str]
) -> SweepPlan:
    plan = SweepPlan()
    for appointment in active:
        if str(appointment.appointment_id) in archived_ids:
            plan.stale_active.append(appointment)
            continue
        if appointment.date >= today:
            continue
        if appointment.status == AppointmentStatus.PENDING:
            plan.to_expire.append(appointment)
        elif appointment.status in ARCHIVABLE_STATUSES:
            plan.to_archive.append(appointment)
    return plan


def dedupe_prefer_archive(
    active: Iterable[Appointment], archived: Iterable[Appointment]
) -> List[Appointment]:
    """Merge both collections, keeping the archive copy when an id is in both."""
    merged = {str(a.appointment_id): a for a in active}
    for a in archived:
        merged[str(a.appointment_id)] = a
    return list(merged.values())
