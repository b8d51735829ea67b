"""Duplicate booking detection."""

from datetime import date
from typing import Iterable, Optional

from ...core.utils.string_utils import normalize_patient_name
from ..entities.appointment import Appointment


class ConflictGuard:
    """Finds an active appointment for the same patient name on the same date."""

    def find_duplicate(
        self, candidate_name: str, candidate_date: date, existing: Iterable[Appointment]
    ) -> Optional[Appointment]:
        wanted = normalize_patient_name(candidate_name)
        if not wanted:
            return None
        for appointment in existing:
            if (
                appointment.date == candidate_date
                and not appointment.is_cancelled
                and normalize_patient_name(appointment.patient_name) == wanted
            ):
                return appointment
        return None
