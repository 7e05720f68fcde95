from datetime import date, time

import pytest

from repairdesk.core.exceptions import InvalidFieldException
from repairdesk.utils.time_helpers import (
    add_minutes,
    date_range,
    day_of_week,
    normalize_time,
    parse_date,
    parse_month,
    parse_time,
    week_start,
)


@pytest.mark.parametrize("raw", ["14:30", "14:30:00", " 14:30 ", "14:30:59"])
def test_parse_time_accepts_both_spellings(raw):
    assert parse_time(raw) == time(14, 30)


def test_normalize_time_is_canonical():
    assert normalize_time("09:05:00") == "09:05"
    assert normalize_time(time(9, 5, 30)) == "09:05"


@pytest.mark.parametrize("raw", ["", "9:30", "24:00", "12:60", "noon", "12:30:61", None])
def test_parse_time_rejects_malformed_input(raw):
    with pytest.raises(InvalidFieldException) as exc_info:
        parse_time(raw, "appointment_time")
    assert exc_info.value.details["field"] == "appointment_time"
    assert exc_info.value.code == "INVALID_FIELD"


def test_parse_date():
    assert parse_date("2030-01-07") == date(2030, 1, 7)
    assert parse_date(date(2030, 1, 7)) == date(2030, 1, 7)


@pytest.mark.parametrize("raw", ["2030-02-30", "07/01/2030", "2030-1-7", "", "tomorrow"])
def test_parse_date_rejects_invalid(raw):
    with pytest.raises(InvalidFieldException):
        parse_date(raw)


def test_parse_month():
    assert parse_month("2030-02") == (2030, 2)
    with pytest.raises(InvalidFieldException):
        parse_month("2030-13")
    with pytest.raises(InvalidFieldException):
        parse_month("2030-2")


def test_day_of_week_counts_from_sunday():
    assert day_of_week(date(2030, 1, 6)) == 0  # Sunday
    assert day_of_week(date(2030, 1, 7)) == 1  # Monday
    assert day_of_week(date(2030, 1, 12)) == 6  # Saturday


def test_week_start_is_monday():
    assert week_start(date(2030, 1, 10)) == date(2030, 1, 7)
    assert week_start(date(2030, 1, 7)) == date(2030, 1, 7)
    assert week_start(date(2030, 1, 13)) == date(2030, 1, 7)


def test_date_range_is_inclusive():
    days = list(date_range(date(2030, 1, 30), date(2030, 2, 2)))
    assert days == [date(2030, 1, 30), date(2030, 1, 31), date(2030, 2, 1), date(2030, 2, 2)]
    assert list(date_range(date(2030, 1, 2), date(2030, 1, 1))) == []


def test_add_minutes_stops_at_midnight():
    assert add_minutes(time(9, 30), 30) == time(10, 0)
    assert add_minutes(time(23, 45), 30) is None
