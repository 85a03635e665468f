"""
Datetime utilities.

Provides timezone-aware datetime functions and month/period windows.
"""

import calendar
import re
from datetime import UTC, date, datetime, time

from agencyops.utils.exceptions import ValidationError


MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def parse_month(month: str) -> tuple[int, int]:
    """
    Parse a "YYYY-MM" month string.

    Raises:
        ValidationError: If the string is not a valid month
    """
    match = MONTH_PATTERN.match(month or "")
    if not match:
        raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")

    year, month_num = int(match.group(1)), int(match.group(2))
    if not 1 <= month_num <= 12:
        raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")
    return year, month_num


def month_bounds(month: str) -> tuple[date, date]:
    """
    First and last day of a month, both inclusive.

    Args:
        month: "YYYY-MM"

    Returns:
        (first_day, last_day)
    """
    year, month_num = parse_month(month)
    last_day = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1), date(year, month_num, last_day)


def month_datetime_bounds(month: str) -> tuple[datetime, datetime]:
    """UTC datetimes spanning the whole month, end inclusive."""
    first_day, last_day = month_bounds(month)
    return (
        datetime.combine(first_day, time.min, tzinfo=UTC),
        datetime.combine(last_day, time.max, tzinfo=UTC),
    )


def period_bounds(month: str, period: str) -> tuple[datetime, datetime]:
    """
    Measurement window for a bonus period containing the month.

    "quarterly" spans the calendar quarter of the month; anything else
    spans the month itself.
    """
    if period != "quarterly":
        return month_datetime_bounds(month)

    year, month_num = parse_month(month)
    first_month = (month_num - 1) // 3 * 3 + 1
    start, _ = month_datetime_bounds(f"{year:04d}-{first_month:02d}")
    _, end = month_datetime_bounds(f"{year:04d}-{first_month + 2:02d}")
    return start, end


def to_date(value: date | datetime | str | None) -> date | None:
    """Coerce a date, datetime or ISO string to a date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value).date()
