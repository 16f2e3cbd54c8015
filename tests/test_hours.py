"""Tests for opening-hours resolution"""

import pytest
from datetime import date
from types import SimpleNamespace

from app.scheduling.errors import InvalidHoursError
from app.scheduling.hours import CLOSED, HoursWindow, resolve_hours, validate_window
from app.scheduling.timeutils import as_date, day_of_week

TUESDAY = date(2025, 3, 4)
SUNDAY = date(2025, 3, 2)


def weekly(day, is_open=True, open_time="09:00", close_time="22:00"):
    return SimpleNamespace(day_of_week=day, is_open=is_open, open_time=open_time, close_time=close_time)


def exceptional(day, is_open=False, open_time=None, close_time=None):
    return SimpleNamespace(date=day, is_open=is_open, open_time=open_time, close_time=close_time)


WEEK = [weekly(0, is_open=False, open_time=None, close_time=None)] + [weekly(d) for d in range(1, 6)] + [
    weekly(6, is_open=False, open_time=None, close_time=None)
]


def test_day_of_week_starts_on_sunday():
    assert day_of_week(SUNDAY) == 0
    assert day_of_week(TUESDAY) == 2
    assert day_of_week(date(2025, 3, 8)) == 6


def test_weekly_entry_applies():
    window = resolve_hours(TUESDAY, WEEK)
    assert window == HoursWindow(is_open=True, open_time="09:00", close_time="22:00")


def test_closed_weekday():
    assert resolve_hours(SUNDAY, WEEK) == CLOSED


def test_exceptional_closure_wins_over_weekly_hours():
    window = resolve_hours(TUESDAY, WEEK, [exceptional(TUESDAY)])
    assert not window.is_open


def test_exceptional_opening_on_closed_weekday():
    window = resolve_hours(
        SUNDAY, WEEK, [exceptional(SUNDAY, is_open=True, open_time="12:00", close_time="16:00")]
    )
    assert window == HoursWindow(is_open=True, open_time="12:00", close_time="16:00")


def test_exceptional_date_for_other_day_is_ignored():
    window = resolve_hours(TUESDAY, WEEK, [exceptional(date(2025, 3, 5))])
    assert window.is_open


def test_missing_weekday_falls_back_to_default_window():
    window = resolve_hours(TUESDAY, [])
    assert window == HoursWindow(is_open=True, open_time="09:00", close_time="22:00")

    window = resolve_hours(TUESDAY, [], default_open="10:00", default_close="18:00")
    assert window.open_time == "10:00"
    assert window.close_time == "18:00"


def test_open_entry_without_times_is_closed():
    assert resolve_hours(TUESDAY, [weekly(2, open_time=None)]) == CLOSED
    assert resolve_hours(TUESDAY, [weekly(2, open_time="22:00", close_time="09:00")]) == CLOSED


def test_accepts_string_and_datetime_dates():
    assert resolve_hours("2025-03-04", WEEK).is_open
    assert resolve_hours("2025-03-02T12:00:00", WEEK) == CLOSED
    assert as_date("2025-03-04") == TUESDAY


def test_invalid_date_string():
    with pytest.raises(InvalidHoursError):
        as_date("not-a-date")


def test_validate_window():
    validate_window(False, None, None)
    validate_window(True, "09:00", "22:00")

    with pytest.raises(InvalidHoursError):
        validate_window(True, "09:00", None)
    with pytest.raises(InvalidHoursError):
        validate_window(True, "22:00", "22:00")
    with pytest.raises(InvalidHoursError):
        validate_window(True, "9am", "22:00")
