from __future__ import annotations

import math
import re
from typing import Any

from ..core.constants import RFID_PATTERN
from ..core.exceptions import InvalidRfid, ValidationError

_RFID_RE = re.compile(RFID_PATTERN)
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_rfid(value: str) -> str:
    rfid = (value or "").strip()
    if not _RFID_RE.match(rfid):
        raise InvalidRfid(f"RFID number must be two uppercase letters followed by 6 digits, got {rfid!r}")
    return rfid


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"Email {email!r} is not valid")
    return email


def require_number(value: Any, field_name: str, *, error: type[ValidationError] = ValidationError) -> float:
    if isinstance(value, bool):
        raise error(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise error(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise error(f"{field_name} must be a number")
    return number


def require_positive(value: Any, field_name: str, *, error: type[ValidationError] = ValidationError) -> float:
    number = require_number(value, field_name, error=error)
    if number <= 0:
        raise error(f"{field_name} must be greater than 0")
    return number


def require_non_negative(value: Any, field_name: str, *, error: type[ValidationError] = ValidationError) -> float:
    number = require_number(value, field_name, error=error)
    if number < 0:
        raise error(f"{field_name} cannot be negative")
    return number
