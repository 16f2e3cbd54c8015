"""Bookable time slot generation"""

from datetime import datetime, timedelta
from typing import Iterator, List, Optional, Sequence, Tuple

from app.scheduling.capacity import count_overlapping_in
from app.scheduling.errors import InvalidHoursError
from app.scheduling.hours import HoursWindow
from app.scheduling.timeutils import DateLike, as_date, at_time, format_hhmm, local_now

DEFAULT_MIN_LEAD_MINUTES = 30


def _check_positive(name: str, value: int) -> None:
    if value is None or value <= 0:
        raise InvalidHoursError(f"{name} must be a positive number of minutes, got {value!r}")


def iter_slot_starts(
    day: DateLike,
    window: HoursWindow,
    duration_minutes: int,
    granularity_minutes: int,
    min_lead_minutes: int = DEFAULT_MIN_LEAD_MINUTES,
    now: Optional[datetime] = None,
) -> Iterator[datetime]:
    """
    Yield the start of every slot of ``day`` in ascending order.

    A slot starts on a granularity step from the opening time, must leave
    room for the full reservation before closing, and must not start before
    ``now + min_lead_minutes``.
    """
    _check_positive("Reservation duration", duration_minutes)
    _check_positive("Slot granularity", granularity_minutes)
    if not window.is_open:
        return

    target = as_date(day)
    current = at_time(target, window.open_time)
    last_start = at_time(target, window.close_time) - timedelta(minutes=duration_minutes)
    earliest = (now or local_now()) + timedelta(minutes=min_lead_minutes or 0)
    step = timedelta(minutes=granularity_minutes)

    while current <= last_start:
        if current >= earliest:
            yield current
        current += step


def generate_slots(
    day: DateLike,
    window: HoursWindow,
    duration_minutes: int,
    granularity_minutes: int,
    min_lead_minutes: int = DEFAULT_MIN_LEAD_MINUTES,
    now: Optional[datetime] = None,
) -> List[str]:
    """Slot start times of ``day`` as "HH:MM" strings"""
    return [
        format_hhmm(start)
        for start in iter_slot_starts(
            day, window, duration_minutes, granularity_minutes, min_lead_minutes, now
        )
    ]


def slot_interval(day: DateLike, start: str, duration_minutes: int) -> Tuple[datetime, datetime]:
    """The [time_from, time_to) interval of the slot starting at ``start`` on ``day``"""
    _check_positive("Reservation duration", duration_minutes)
    time_from = at_time(as_date(day), start)
    return time_from, time_from + timedelta(minutes=duration_minutes)


def annotate_slots(
    day: DateLike,
    slots: Sequence[str],
    duration_minutes: int,
    reservations: Sequence,
    max_simultaneous: int,
) -> List[Tuple[str, bool]]:
    """Pair each slot with whether the global capacity still admits a booking there"""
    annotated = []
    for start in slots:
        time_from, time_to = slot_interval(day, start, duration_minutes)
        taken = count_overlapping_in(reservations, time_from, time_to)
        annotated.append((start, taken < max_simultaneous))
    return annotated
