"""
Availability resolution: which hourly slots a doctor can take on a date,
and whether one requested slot is bookable.

Functions here are pure. They receive the doctor, the appointments already
held for that doctor/date, and "now"; they return outcomes and never raise
for a rejected slot.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from ...core.utils.datetime_utils import format_display_date
from ..entities.appointment import Appointment
from ..entities.doctor import Doctor
from ..enums.appointment import AvailabilityReason, RejectionReason
from ..value_objects.time_of_day import TimeOfDay
from .capacity import CapacityPolicy, counts_toward_capacity
from .time_grid import enumerate_slots


@dataclass(frozen=True)
class SlotOutcome:
    """Result of validating one requested slot.

    ``reason`` is None when the slot is available.
    """

    reason: Optional[RejectionReason] = None
    message: str = ""
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def available(self) -> bool:
        return self.reason is None

    @classmethod
    def ok(cls) -> "SlotOutcome":
        return cls()

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str, **params: Any) -> "SlotOutcome":
        return cls(reason=reason, message=message, params=params)


@dataclass(frozen=True)
class AvailabilityStatus:
    """Why a doctor's slot list for a date looks the way it does."""

    reason: AvailabilityReason
    doctor_name: str
    shift_start: Optional[str] = None
    shift_end: Optional[str] = None
    booked_count: int = 0
    max_daily: int = 0
    selected_date: Optional[str] = None


class AvailabilityResolver:
    """Combines the time grid, a doctor's shift and daily capacity."""

    def __init__(self, capacity: CapacityPolicy) -> None:
        self.capacity = capacity

    def _held(self, doctor: Doctor, on_date: date, existing: Iterable[Appointment]) -> List[Appointment]:
        doctor_id = str(doctor.doctor_id)
        return [
            a
            for a in existing
            if a.doctor_id == doctor_id and a.date == on_date and counts_toward_capacity(a)
        ]

    def list_available_slots(
        self,
        doctor: Optional[Doctor],
        on_date: date,
        existing: Iterable[Appointment],
        now: datetime,
    ) -> List[TimeOfDay]:
        if doctor is None or not doctor.has_shift:
            return []
        held = self._held(doctor, on_date, existing)
        if self.capacity.is_at_capacity(len(held)):
            return []
        taken = {a.time for a in held}
        window = doctor.shift_window
        return [
            slot
            for slot in enumerate_slots(now, on_date)
            if window.contains(slot) and slot not in taken
        ]

    def validate_requested_slot(
        self,
        doctor: Optional[Doctor],
        on_date: date,
        time: TimeOfDay,
        existing: Iterable[Appointment],
        now: datetime,
    ) -> SlotOutcome:
        if doctor is None:
            return SlotOutcome.rejected(
                RejectionReason.DOCTOR_NOT_FOUND,
                "Doctor information not found. Please choose another doctor.",
            )
        if not doctor.has_shift:
            return SlotOutcome.rejected(
                RejectionReason.NO_SHIFT,
                f"Dr. {doctor.display_name} has no shift hours configured. Please choose another doctor.",
                doctor_id=str(doctor.doctor_id),
            )

        requested = datetime.combine(on_date, time.to_time())
        if requested <= now:
            return SlotOutcome.rejected(
                RejectionReason.PAST,
                "Cannot book appointments in the past. Please choose a future date and time.",
                requested=requested.isoformat(timespec="minutes"),
            )

        window = doctor.shift_window
        if not window.contains(time):
            return SlotOutcome.rejected(
                RejectionReason.OUTSIDE_SHIFT,
                f"Doctor is only available from {window.describe()}. "
                "Please choose a time within these hours.",
                shift_start=str(window.start),
                shift_end=str(window.end),
            )

        held = self._held(doctor, on_date, existing)
        if self.capacity.is_at_capacity(len(held)):
            return SlotOutcome.rejected(
                RejectionReason.CAPACITY,
                "Doctor has reached the maximum appointments for this day. "
                "Please choose another date or doctor.",
                booked_count=len(held),
                max_daily=self.capacity.max_daily,
            )

        if any(a.time == time for a in held):
            return SlotOutcome.rejected(
                RejectionReason.SLOT_TAKEN,
                f"The {time.display()} slot on {format_display_date(on_date)} is already booked. "
                "Please choose another time.",
                time=str(time),
            )

        return SlotOutcome.ok()

    def availability_status(
        self,
        doctor: Optional[Doctor],
        on_date: date,
        existing: Iterable[Appointment],
    ) -> AvailabilityStatus:
        if doctor is None:
            return AvailabilityStatus(AvailabilityReason.DOCTOR_NOT_FOUND, doctor_name="Unknown")
        if not doctor.has_shift:
            return AvailabilityStatus(AvailabilityReason.NO_SHIFT_INFO, doctor_name=doctor.display_name)

        booked = len(self._held(doctor, on_date, existing))
        reason = (
            AvailabilityReason.FULLY_BOOKED
            if self.capacity.is_at_capacity(booked)
            else AvailabilityReason.AVAILABLE
        )
        return AvailabilityStatus(
            reason=reason,
            doctor_name=doctor.display_name,
            shift_start=str(doctor.shift_start),
            shift_end=str(doctor.shift_end),
            booked_count=booked,
            max_daily=self.capacity.max_daily,
            selected_date=format_display_date(on_date),
        )
