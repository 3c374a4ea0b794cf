"""Shared validation utilities"""

import re
from datetime import time
from typing import Optional

from .exceptions import ValidationError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(?::[0-5]\d)?$")


def parse_hhmm(value: Optional[str], field: str) -> time:
    """
    Parse a time of day in HH:MM format.

    Seconds are tolerated (HH:MM:SS, as returned by some databases) and dropped.

    Raises:
        ValidationError: If the value is missing or malformed
    """
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)

    match = TIME_PATTERN.match(str(value).strip())
    if not match:
        raise ValidationError(f"{field} must be a time in HH:MM format", field=field)

    return time(int(match.group(1)), int(match.group(2)))


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def validate_title(title: Optional[str]) -> str:
    """Strip and require a non-empty title"""
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Title must not be empty", field="title")
    return cleaned
