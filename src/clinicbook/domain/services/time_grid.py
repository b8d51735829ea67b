"""
Daily slot catalog: one slot per whole hour, 00:00 through 23:00.
"""

from datetime import date, datetime
from typing import List

from ..value_objects.time_of_day import TimeOfDay

SLOTS_PER_DAY = 24

DAILY_SLOTS = tuple(TimeOfDay.of(hour) for hour in range(SLOTS_PER_DAY))


def enumerate_slots(reference_instant: datetime, target_date: date) -> List[TimeOfDay]:
    """Return the bookable hourly slots for ``target_date`` in ascending order.

    On the reference instant's own date, only slots strictly after its
    time-of-day are kept. Earlier dates are not filtered here; callers
    reject past dates separately.
    """
    if target_date != reference_instant.date():
        return list(DAILY_SLOTS)
    current = TimeOfDay.from_datetime(reference_instant)
    return [slot for slot in DAILY_SLOTS if slot > current]
