"""
Date and time utility functions for ClinicBook.
"""

from datetime import date, datetime
from typing import Optional


def parse_iso_date(date_str: str) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string, returning None when malformed."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def is_valid_date(date_str: str, format_str: str = "%Y-%m-%d") -> bool:
    """Check if date string is valid."""
    try:
        datetime.strptime(date_str, format_str)
        return True
    except (TypeError, ValueError):
        return False


def format_time_for_display(time_str: str) -> str:
    """Render ``HH:MM`` as a 12-hour clock label, e.g. ``13:00`` -> ``1:00 PM``."""
    hours, _, minutes = time_str.partition(":")
    hour = int(hours)
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour - 12 if hour > 12 else (12 if hour == 0 else hour)
    return f"{display_hour}:{minutes or '00'} {period}"


def format_display_date(value) -> str:
    """Render a date as ``Monday, March 10, 2025``."""
    if isinstance(value, str):
        parsed = parse_iso_date(value)
        if parsed is None:
            return value
        value = parsed
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.strftime('%A, %B')} {value.day}, {value.year}"
