"""MongoDB Beanie model for Doctor documents."""

from datetime import datetime
from typing import Optional

from beanie import Document
from pydantic import Field, field_validator
from pymongo import ASCENDING, IndexModel

from clinicbook.domain.value_objects.time_of_day import TimeOfDay


class DoctorMongo(Document):
    """MongoDB model for Doctor entity."""

    doctor_id: str = Field(..., description="Doctor ID derived from the name")
    name: str = Field(..., description="Doctor display name")
    specialty: str = Field(..., description="Specialty name")
    shift_start: Optional[str] = Field(None, description="Shift start, HH:MM 24h")
    shift_end: Optional[str] = Field(None, description="Shift end, HH:MM 24h")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @field_validator("shift_start", "shift_end")
    @classmethod
    def validate_shift_time(cls, v: Optional[str]) -> Optional[str]:
        if v in (None, ""):
            return None
        TimeOfDay.parse(v)
        return v

    class Settings:
        name = "doctors"
        indexes = [
            IndexModel([("doctor_id", ASCENDING)], unique=True),
            "specialty",
            "name",
        ]
