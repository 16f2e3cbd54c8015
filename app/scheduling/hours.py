"""Opening-hours resolution

Turns a restaurant's weekly schedule and its exceptional dates into the
effective opening window of one calendar date.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from app.scheduling.errors import InvalidHoursError
from app.scheduling.timeutils import DateLike, as_date, day_of_week, parse_hhmm

logger = structlog.get_logger()

FALLBACK_OPEN_TIME = "09:00"
FALLBACK_CLOSE_TIME = "22:00"


@dataclass(frozen=True)
class HoursWindow:
    """Effective opening window of a date"""
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None


CLOSED = HoursWindow(is_open=False)


def validate_window(is_open: bool, open_time: Optional[str], close_time: Optional[str]) -> None:
    """Raise InvalidHoursError unless an open entry has both times and opens before it closes"""
    if not is_open:
        return
    if not open_time or not close_time:
        raise InvalidHoursError("Open days need both an opening and a closing time")
    if parse_hhmm(open_time) >= parse_hhmm(close_time):
        raise InvalidHoursError(f"Opening time {open_time} must be before closing time {close_time}")


def _window_of(entry) -> HoursWindow:
    if not entry.is_open:
        return CLOSED
    try:
        validate_window(True, entry.open_time, entry.close_time)
    except InvalidHoursError as e:
        logger.warning("Unusable opening hours entry treated as closed", error=str(e))
        return CLOSED
    return HoursWindow(is_open=True, open_time=entry.open_time, close_time=entry.close_time)


def resolve_hours(
    day: DateLike,
    weekly_hours: Iterable,
    exceptional_dates: Iterable = (),
    default_open: Optional[str] = None,
    default_close: Optional[str] = None,
) -> HoursWindow:
    """
    Resolve the opening window of ``day``.

    ``weekly_hours`` items expose ``day_of_week``, ``is_open``, ``open_time``
    and ``close_time``; ``exceptional_dates`` items expose ``date`` plus the
    same hour fields. An exceptional date wins over the weekly entry whether
    it opens or closes the restaurant. A weekday with no entry at all falls
    back to the default window.
    """
    target = as_date(day)

    for exceptional in exceptional_dates:
        if as_date(exceptional.date) == target:
            return _window_of(exceptional)

    weekday = day_of_week(target)
    for entry in weekly_hours:
        if entry.day_of_week == weekday:
            return _window_of(entry)

    open_time = default_open or FALLBACK_OPEN_TIME
    close_time = default_close or FALLBACK_CLOSE_TIME
    logger.warning(
        "No opening hours configured for weekday, using default window",
        date=target.isoformat(),
        day_of_week=weekday,
        open_time=open_time,
        close_time=close_time,
    )
    return HoursWindow(is_open=True, open_time=open_time, close_time=close_time)
