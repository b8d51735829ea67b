"""
Utility and value object tests.
"""

from datetime import date, datetime

import pytest

from clinicbook.core.utils.datetime_utils import (
    format_display_date,
    format_time_for_display,
    is_valid_date,
    parse_iso_date,
)
from clinicbook.core.utils.string_utils import (
    normalize_patient_name,
    normalize_phone_number,
    slugify_doctor_name,
    validate_email,
    validate_phone_number,
)
from clinicbook.domain.value_objects.appointment_id import AppointmentId
from clinicbook.domain.value_objects.time_of_day import TimeOfDay


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Dr. Maria Santos", "maria-santos"),
        ("dr maria  santos", "maria-santos"),
        ("Dr.Jose Rizal", "jose-rizal"),
        ("Drew Barrymore", "drew-barrymore"),
        ("Dr. Andrew O'Neil", "andrew-oneil"),
    ],
)
def test_slugify_doctor_name(name, expected):
    assert slugify_doctor_name(name) == expected


def test_phone_validation():
    assert validate_phone_number("09171234567")
    assert validate_phone_number("+63 917 123 4567")
    assert validate_phone_number("0917-123-4567")
    assert not validate_phone_number("12345")
    assert not validate_phone_number("08171234567")
    assert normalize_phone_number("(0917) 123-4567") == "09171234567"


def test_email_validation():
    assert validate_email("juan@example.com")
    assert not validate_email("juan@example")
    assert not validate_email("juan example.com")


def test_normalize_patient_name():
    assert normalize_patient_name("  Juan Dela Cruz ") == "juan dela cruz"
    assert normalize_patient_name(None) == ""


def test_date_helpers():
    assert parse_iso_date("2025-03-10") == date(2025, 3, 10)
    assert parse_iso_date("2025-02-30") is None
    assert parse_iso_date(None) is None
    assert is_valid_date("2025-03-10")
    assert not is_valid_date("03/10/2025")
    assert format_display_date("2025-03-10") == "Monday, March 10, 2025"
    assert format_display_date(datetime(2025, 3, 10, 9, 30)) == "Monday, March 10, 2025"
    assert format_time_for_display("13:00") == "1:00 PM"
    assert format_time_for_display("00:00") == "12:00 AM"
    assert format_time_for_display("12:00") == "12:00 PM"


class TestTimeOfDay:
    def test_parse_and_render(self):
        value = TimeOfDay.parse("13:00")
        assert value.minutes == 780
        assert str(value) == "13:00"
        assert value.display() == "1:00 PM"
        assert TimeOfDay.parse("00:00").display() == "12:00 AM"

    @pytest.mark.parametrize("raw", ["24:00", "9:00", "12:60", "", "noon"])
    def test_parse_rejects_malformed(self, raw):
        with pytest.raises(ValueError):
            TimeOfDay.parse(raw)

    def test_ordering_and_whole_hour(self):
        assert TimeOfDay.of(9) < TimeOfDay.of(9, 30) < TimeOfDay.of(10)
        assert TimeOfDay.of(10).is_whole_hour
        assert not TimeOfDay.of(10, 15).is_whole_hour

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            TimeOfDay(24 * 60)


def test_appointment_id_generation():
    first = AppointmentId.generate()
    assert str(first).startswith("APT-")
    assert first != AppointmentId.generate()
    with pytest.raises(ValueError):
        AppointmentId("bad id!")
