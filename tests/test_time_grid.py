"""
Hourly slot catalog tests.
"""

from datetime import date, datetime

from clinicbook.domain.services.time_grid import DAILY_SLOTS, SLOTS_PER_DAY, enumerate_slots
from clinicbook.domain.value_objects.time_of_day import TimeOfDay


def test_catalog_has_one_slot_per_hour():
    assert SLOTS_PER_DAY == 24
    assert [str(s) for s in DAILY_SLOTS][:3] == ["00:00", "01:00", "02:00"]
    assert str(DAILY_SLOTS[-1]) == "23:00"


def test_future_date_returns_every_slot():
    slots = enumerate_slots(datetime(2025, 3, 10, 9, 30), date(2025, 3, 11))
    assert slots == list(DAILY_SLOTS)


def test_same_day_keeps_only_later_slots():
    slots = enumerate_slots(datetime(2025, 3, 10, 9, 30), date(2025, 3, 10))
    assert slots[0] == TimeOfDay.of(10)
    assert len(slots) == 14


def test_slot_at_current_minute_is_dropped():
    slots = enumerate_slots(datetime(2025, 3, 10, 9, 0), date(2025, 3, 10))
    assert TimeOfDay.of(9) not in slots
    assert slots[0] == TimeOfDay.of(10)


def test_late_evening_leaves_no_slots():
    assert enumerate_slots(datetime(2025, 3, 10, 23, 5), date(2025, 3, 10)) == []


def test_slots_are_ascending():
    slots = enumerate_slots(datetime(2025, 3, 10, 0, 0), date(2025, 3, 10))
    assert slots == sorted(slots)
    assert TimeOfDay.of(0) not in slots
