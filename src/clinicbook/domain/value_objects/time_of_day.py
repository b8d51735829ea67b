"""
Time-of-day value object.
Format: HH:MM (24h), stored as minutes since midnight.
"""

import re
from dataclasses import dataclass
from datetime import datetime, time

from ...core.utils.datetime_utils import format_time_for_display

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Immutable wall-clock time, compared as integer minutes since midnight."""

    minutes: int

    def __post_init__(self) -> None:
        if not isinstance(self.minutes, int):
            raise ValueError("TimeOfDay minutes must be an integer")
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise ValueError(f"TimeOfDay out of range: {self.minutes}")

    @classmethod
    def parse(cls, value: str) -> "TimeOfDay":
        """Parse ``HH:MM``; raises ValueError on anything else."""
        match = _TIME_PATTERN.match((value or "").strip())
        if not match:
            raise ValueError(f"Time must be in HH:MM 24-hour format, got {value!r}")
        return cls(int(match.group(1)) * 60 + int(match.group(2)))

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> "TimeOfDay":
        return cls(hour * 60 + minute)

    @classmethod
    def from_datetime(cls, instant: datetime) -> "TimeOfDay":
        return cls(instant.hour * 60 + instant.minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    @property
    def is_whole_hour(self) -> bool:
        return self.minute == 0

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def display(self) -> str:
        """12-hour label, e.g. ``1:00 PM``."""
        return format_time_for_display(str(self))
