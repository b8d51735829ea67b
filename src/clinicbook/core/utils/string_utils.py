"""
String utility functions for ClinicBook.
"""

import re
import uuid

_PH_MOBILE_PATTERN = re.compile(r"^(\+63|0)?9\d{9}$")
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def generate_id(prefix: str = "") -> str:
    """Generate a unique ID with optional prefix."""
    unique_id = uuid.uuid4().hex
    return f"{prefix}{unique_id}" if prefix else unique_id


def slugify_doctor_name(name: str) -> str:
    """Derive a doctor identifier from a display name.

    ``"Dr. Maria Santos"`` -> ``"maria-santos"``.
    """
    slug = name.lower()
    slug = re.sub(r"^dr(\.\s*|\s+)", "", slug.strip())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9\-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def normalize_patient_name(name: str) -> str:
    """Comparison key for patient names: trimmed and case-folded."""
    return (name or "").strip().lower()


def normalize_phone_number(phone: str) -> str:
    """Strip spaces, dashes and parentheses from a phone number."""
    return re.sub(r"[\s\-\(\)]", "", phone or "")


def validate_phone_number(phone: str) -> bool:
    """Validate a Philippine mobile number (``09XXXXXXXXX`` / ``+639XXXXXXXXX``)."""
    return bool(_PH_MOBILE_PATTERN.match(normalize_phone_number(phone)))


def validate_email(email: str) -> bool:
    """Validate email address format."""
    return bool(_EMAIL_PATTERN.match(email or ""))
