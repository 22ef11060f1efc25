"""
Input validation and sanitising for guest- and captain-supplied values.
"""
from __future__ import annotations

import re
import uuid
from datetime import date, datetime, time

from email_validator import EmailNotValidError, validate_email

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(:([0-5]\d))?$")
PHONE_RE = re.compile(r"^[\d\s()+-]{10,20}$")


def parse_uuid(value) -> uuid.UUID | None:
    if isinstance(value, uuid.UUID):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def parse_date(value) -> date | None:
    """YYYY-MM-DD only."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str) or not DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_time(value) -> time | None:
    """HH:MM or HH:MM:SS."""
    if isinstance(value, time):
        return value
    if not value or not isinstance(value, str):
        return None
    m = TIME_RE.match(value)
    if not m:
        return None
    return time(int(m.group(1)), int(m.group(2)), int(m.group(4) or 0))


def is_valid_email(email) -> bool:
    if not email or not isinstance(email, str):
        return False
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_phone(phone) -> bool:
    if not phone or not isinstance(phone, str):
        return False
    return bool(PHONE_RE.match(re.sub(r"\s", "", phone)))


def is_valid_party_size(size, max_size: int) -> bool:
    return isinstance(size, int) and not isinstance(size, bool) and 1 <= size <= max_size


def sanitize_string(value, max_length: int = 500) -> str:
    if not value or not isinstance(value, str):
        return ""
    return value.strip()[:max_length]


def sanitize_name(value) -> str:
    return sanitize_string(value, 100)


def sanitize_notes(value) -> str:
    return sanitize_string(value, 2000)


def normalize_email(value) -> str | None:
    value = (value or "").strip().lower()
    return value or None
