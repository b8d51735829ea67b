"""
Utility functions for ClinicBook.

This module provides common utility functions used throughout
the application for date, time and string handling.
"""

from .datetime_utils import (
    format_display_date,
    format_time_for_display,
    is_valid_date,
    parse_iso_date,
)
from .string_utils import (
    generate_id,
    normalize_patient_name,
    normalize_phone_number,
    slugify_doctor_name,
    validate_email,
    validate_phone_number,
)

__all__ = [
    "format_display_date",
    "format_time_for_display",
    "is_valid_date",
    "parse_iso_date",
    "generate_id",
    "normalize_patient_name",
    "normalize_phone_number",
    "slugify_doctor_name",
    "validate_email",
    "validate_phone_number",
]
