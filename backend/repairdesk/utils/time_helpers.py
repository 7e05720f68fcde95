from datetime import date, datetime, time, timedelta
import re
from typing import Iterator, Optional, Union

from ..core.exceptions import InvalidFieldException

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def time_to_string(t: time) -> str:
    """Always return HH:MM format"""
    return t.strftime("%H:%M")


def parse_time(value: Union[str, time], field: str = "time") -> time:
    """
    Parse HH:MM or HH:MM:SS into a minute-precision time.

    Seconds are dropped so both spellings of the same minute compare equal.

    Raises:
        InvalidFieldException: If the value is not a valid time of day
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    match = _TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidFieldException(field, value, "HH:MM or HH:MM:SS")
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidFieldException(field, value, "HH:MM or HH:MM:SS")
    return time(hour, minute)


def normalize_time(value: Union[str, time], field: str = "time") -> str:
    """Canonical HH:MM spelling of a time input."""
    return time_to_string(parse_time(value, field))


def parse_date(value: Union[str, date], field: str = "date") -> date:
    """
    Parse an ISO calendar date (YYYY-MM-DD).

    Raises:
        InvalidFieldException: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_PATTERN.match(value.strip()):
        raise InvalidFieldException(field, value, "YYYY-MM-DD")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidFieldException(field, value, "YYYY-MM-DD")


def parse_month(value: str, field: str = "month") -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    match = _MONTH_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise InvalidFieldException(field, value, "YYYY-MM")
    return int(match.group(1)), int(match.group(2))


def day_of_week(d: date) -> int:
    """Weekday with Sunday = 0 .. Saturday = 6."""
    return (d.weekday() + 1) % 7


def week_start(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def date_range(start: date, end: date) -> Iterator[date]:
    """Inclusive range of dates."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def add_minutes(t: time, minutes: int) -> Optional[time]:
    """Shift a time of day; None when the result would cross midnight."""
    shifted = datetime.combine(date.min, t) + timedelta(minutes=minutes)
    if shifted.date() != date.min:
        return None
    return shifted.time()


def minutes_of(t: time) -> int:
    return t.hour * 60 + t.minute
