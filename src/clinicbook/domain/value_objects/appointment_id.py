"""
Appointment ID value object.
Format: APT-<32 hex chars>
"""

import re
from dataclasses import dataclass

from ...core.utils.string_utils import generate_id


@dataclass(frozen=True)
class AppointmentId:
    """Immutable appointment identifier value object."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Appointment ID cannot be empty")
        # Legacy store keys are free-form; only reject obviously unsafe values
        if not re.match(r"^[A-Za-z0-9_\-]{1,64}$", self.value):
            raise ValueError(f"Invalid appointment ID: {self.value!r}")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> "AppointmentId":
        return cls(generate_id("APT-"))
