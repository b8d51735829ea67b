"""Doctor domain entity: a bookable doctor with a recurring daily shift."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..errors import InvalidDoctorDataError, InvalidShiftError
from ..services.shift_window import ShiftWindow
from ..value_objects.doctor_id import DoctorId
from ..value_objects.time_of_day import TimeOfDay


@dataclass
class Doctor:
    """Doctor domain entity.

    The 12-hour shift rule is enforced by ``Doctor.create`` only. Records
    loaded from the store are trusted as saved, and a missing shift is
    tolerated (such a doctor simply has no bookable slots).
    """

    doctor_id: DoctorId
    name: str
    specialty: str
    shift_start: Optional[TimeOfDay] = None
    shift_end: Optional[TimeOfDay] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self._validate_doctor_data()

    def _validate_doctor_data(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidDoctorDataError("name", self.name, "Doctor name is required")
        if len(self.name) > 120:
            raise InvalidDoctorDataError(
                "name", self.name[:80], f"Name too long (max 120 characters), got {len(self.name)}"
            )
        if self.specialty is None or not str(self.specialty).strip():
            raise InvalidDoctorDataError("specialty", self.specialty, "Specialty is required")

    @classmethod
    def create(
        cls,
        name: str,
        specialty: str,
        shift_start: str,
        shift_end: str,
        required_shift_hours: int = 12,
        doctor_id: Optional[str] = None,
    ) -> "Doctor":
        """Build a new doctor from raw form values, enforcing the shift length rule."""
        name = (name or "").strip()
        specialty = (specialty or "").strip()
        if not name:
            raise InvalidDoctorDataError("name", name, "Doctor name is required")
        if not specialty:
            raise InvalidDoctorDataError("specialty", specialty, "Specialty is required")
        if not shift_start:
            raise InvalidDoctorDataError("shift_start", shift_start, "Shift start time is required")
        if not shift_end:
            raise InvalidDoctorDataError("shift_end", shift_end, "Shift end time is required")

        try:
            start = TimeOfDay.parse(shift_start)
        except ValueError as e:
            raise InvalidDoctorDataError("shift_start", shift_start, str(e))
        try:
            end = TimeOfDay.parse(shift_end)
        except ValueError as e:
            raise InvalidDoctorDataError("shift_end", shift_end, str(e))

        if ShiftWindow(start, end).duration_minutes != required_shift_hours * 60:
            raise InvalidShiftError(str(start), str(end), required_shift_hours)

        identifier = DoctorId(doctor_id) if doctor_id else DoctorId.from_name(name)
        return cls(
            doctor_id=identifier,
            name=name,
            specialty=specialty,
            shift_start=start,
            shift_end=end,
        )

    @property
    def has_shift(self) -> bool:
        return self.shift_start is not None and self.shift_end is not None

    @property
    def shift_window(self) -> Optional[ShiftWindow]:
        if not self.has_shift:
            return None
        return ShiftWindow(self.shift_start, self.shift_end)

    @property
    def display_name(self) -> str:
        """Name without the trailing `` - specialty`` suffix some records carry."""
        return self.name.split(" - ")[0]

    def apply_update(self, other: "Doctor") -> None:
        """Copy editable fields from a freshly validated doctor, keeping identity."""
        self.name = other.name
        self.specialty = other.specialty
        self.shift_start = other.shift_start
        self.shift_end = other.shift_end
        self.updated_at = datetime.utcnow()
