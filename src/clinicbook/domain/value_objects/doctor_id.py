"""
Doctor ID value object.
Derived from the doctor's display name, e.g. "Dr. Maria Santos" -> "maria-santos".
"""

import re
from dataclasses import dataclass

from ...core.utils.string_utils import generate_id, slugify_doctor_name

_DOCTOR_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,100}$")


@dataclass(frozen=True)
class DoctorId:
    """Immutable doctor identifier value object."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Doctor ID cannot be empty")
        if not _DOCTOR_ID_PATTERN.match(self.value):
            raise ValueError(
                "Doctor ID may only contain letters, digits, hyphens and underscores (max 100)"
            )

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "DoctorId":
        """Derive an ID from a name, falling back to a generated one."""
        slug = slugify_doctor_name(name)[:100].strip("-")
        return cls(slug or generate_id("doc-")[:24])
