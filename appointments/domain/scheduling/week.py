"""
Week window calculation.

Weeks start on Monday. All arithmetic is on calendar dates, so month and year
boundaries and daylight-saving changes never shift a day.

Only weeks lying entirely between date.min and date.max are supported. The
week of 0001-01-01 is the first one (it starts on a Monday); the days from
9999-12-27 on belong to a week that would end in year 10000 and are rejected.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from ...shared.exceptions import ValidationError

DAYS_PER_WEEK = 7

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def week_start(reference: DateLike) -> date:
    """Monday of the week containing reference"""
    day = _as_date(reference)
    return day - timedelta(days=day.weekday())


def week_of(reference: DateLike) -> list[date]:
    """The 7 dates (Monday..Sunday) of the week containing reference"""
    monday = week_start(reference)
    try:
        return [monday + timedelta(days=i) for i in range(DAYS_PER_WEEK)]
    except OverflowError:
        raise ValidationError("Week is outside the supported calendar range", field="date") from None


def shift_week(start: DateLike, offset: int) -> date:
    """Move a week start by whole weeks. The result is always a Monday."""
    try:
        return week_start(start) + timedelta(days=DAYS_PER_WEEK * int(offset))
    except OverflowError:
        raise ValidationError("Week offset leaves the supported calendar range", field="offset") from None


def neighbour_week(start: DateLike, offset: int) -> Optional[date]:
    """Start of the week offset weeks away, or None if that week is not fully representable"""
    try:
        return week_of(shift_week(start, offset))[0]
    except ValidationError:
        return None


def is_today(day: DateLike, today: Optional[date] = None) -> bool:
    return _as_date(day) == (today or date.today())
