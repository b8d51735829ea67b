"""
Recurring daily shift window.

Start and end are minutes since midnight. A window whose end is before
its start wraps past midnight.
"""

from dataclasses import dataclass
from typing import Union

from ..value_objects.time_of_day import MINUTES_PER_DAY, TimeOfDay

MinutesLike = Union[int, TimeOfDay]


def _minutes(value: MinutesLike) -> int:
    return value.minutes if isinstance(value, TimeOfDay) else int(value)


def contains(window_start: MinutesLike, window_end: MinutesLike, instant: MinutesLike) -> bool:
    """Return True when ``instant`` falls inside the ``[start, end)`` window.

    ``instant`` is reduced modulo 24h first. ``start == end`` is evaluated
    with the wrapping rule, so it covers the whole day.
    """
    start = _minutes(window_start)
    end = _minutes(window_end)
    t = _minutes(instant) % MINUTES_PER_DAY
    if end <= start:
        return t >= start or t < end
    return start <= t < end


@dataclass(frozen=True)
class ShiftWindow:
    """A doctor's recurring working window."""

    start: TimeOfDay
    end: TimeOfDay

    @property
    def wraps_midnight(self) -> bool:
        return self.end.minutes <= self.start.minutes

    @property
    def duration_minutes(self) -> int:
        """Length measured forward from start to end, modulo 24h."""
        return (self.end.minutes - self.start.minutes) % MINUTES_PER_DAY

    def contains(self, instant: MinutesLike) -> bool:
        return contains(self.start, self.end, instant)

    def describe(self) -> str:
        return f"{self.start.display()} to {self.end.display()}"
