"""Duplicate booking pre-check, run while the patient fills in the form."""

from ...core.exceptions import ValidationError
from ...core.utils.datetime_utils import format_display_date, parse_iso_date
from ...domain.errors import DuplicateBookingError
from ...domain.services.conflict import ConflictGuard
from ..dto.appointment_dto import DuplicateCheckResponse
from ..ports.repositories.appointment_repo import AppointmentRepository


class CheckDuplicateBookingUseCase:
    def __init__(self, appointment_repository: AppointmentRepository, conflict_guard: ConflictGuard):
        self._appointments = appointment_repository
        self._guard = conflict_guard

    async def execute(self, patient_name: str, date_str: str) -> DuplicateCheckResponse:
        on_date = parse_iso_date(date_str)
        if on_date is None:
            raise ValidationError(["Please enter a valid date (YYYY-MM-DD)"])
        if not patient_name or not patient_name.strip():
            raise ValidationError(["name is required"])

        same_day = await self._appointments.find_by_date(on_date)
        duplicate = self._guard.find_duplicate(patient_name, on_date, same_day)
        if duplicate is None:
            return DuplicateCheckResponse(is_duplicate=False)

        error = DuplicateBookingError(
            patient_name.strip(),
            on_date.isoformat(),
            str(duplicate.appointment_id),
            format_display_date(on_date),
        )
        return DuplicateCheckResponse(
            is_duplicate=True,
            message=error.message,
            appointment_id=str(duplicate.appointment_id),
        )
