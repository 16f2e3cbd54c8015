"""Wall-clock helpers

All instants handled by the scheduler are naive datetimes in the restaurant's
local time. Timezone-aware input is converted to the server's local time and
stripped.
"""

from datetime import date, datetime, time
from typing import Union

from app.scheduling.errors import InvalidHoursError

DateLike = Union[date, datetime, str]


def local_now() -> datetime:
    return datetime.now().replace(microsecond=0)


def as_local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def as_date(value: DateLike) -> date:
    """Normalize a date, datetime or YYYY-MM-DD string to a calendar date"""
    if isinstance(value, datetime):
        return as_local_naive(value).date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        raise InvalidHoursError(f"Invalid date: {value!r}")


def day_of_week(day: date) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday"""
    return (day.weekday() + 1) % 7


def parse_hhmm(value: str) -> time:
    """Parse an "HH:MM" string"""
    try:
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))
    except (AttributeError, ValueError):
        raise InvalidHoursError(f"Invalid time: {value!r}, expected HH:MM")


def format_hhmm(value: Union[time, datetime]) -> str:
    return value.strftime("%H:%M")


def at_time(day: date, hhmm: str) -> datetime:
    """Combine a calendar date with an "HH:MM" wall-clock time"""
    return datetime.combine(day, parse_hhmm(hhmm))
