"""
Clock abstraction.

Scheduling logic never reads the ambient clock; "now" is taken once at
the edge from a ``Clock`` bound to the clinic timezone and passed down.
"""

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo


class Clock:
    """Wall clock in the clinic's configured timezone.

    Returned datetimes are naive local times: the whole system works in a
    single clinic timezone and compares calendar dates and minutes only.
    """

    def __init__(self, timezone: str) -> None:
        self._tz = ZoneInfo(timezone)
        self.timezone = timezone

    def now(self) -> datetime:
        return datetime.now(self._tz).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock pinned to a given instant; used by tests and one-off scripts."""

    def __init__(self, instant: datetime, timezone: str = "UTC") -> None:
        super().__init__(timezone)
        self._instant = instant.replace(tzinfo=None)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant.replace(tzinfo=None)


_clock: Optional[Clock] = None


def get_clock() -> Clock:
    """Get the process-wide clinic clock."""
    global _clock
    if _clock is None:
        from .config import get_settings

        _clock = Clock(get_settings().booking.timezone)
    return _clock
