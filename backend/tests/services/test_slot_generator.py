from datetime import date, time

import pytest

from repairdesk.models.business_hours import BusinessHours
from repairdesk.models.special_date import SpecialDate, SpecialDateType
from repairdesk.services.slot_generator import (
    OperatingWindow,
    TimeRange,
    generate_time_slots,
    resolve_operating_window,
)

MONDAY = date(2030, 1, 7)
SUNDAY = date(2030, 1, 6)


def _week():
    return {
        0: BusinessHours(day_of_week=0, open_time=time(10, 0), close_time=time(14, 0), is_active=False),
        1: BusinessHours(
            day_of_week=1,
            open_time=time(9, 0),
            close_time=time(17, 0),
            break_start=time(12, 0),
            break_end=time(13, 0),
            is_active=True,
        ),
    }


def _open(open_time, close_time, break_start=None, break_end=None):
    return OperatingWindow(
        target_date=MONDAY,
        is_open=True,
        open_time=open_time,
        close_time=close_time,
        break_start=break_start,
        break_end=break_end,
    )


def test_weekday_with_lunch_break_yields_fourteen_slots():
    window = resolve_operating_window(MONDAY, _week())
    slots = generate_time_slots(window, 30)

    assert len(slots) == 14
    starts = [s.start for s in slots]
    assert starts[0] == time(9, 0)
    assert slots[-1] == TimeRange(time(16, 30), time(17, 0))
    assert time(12, 0) not in starts
    assert time(12, 30) not in starts
    assert time(11, 30) in starts
    assert time(13, 0) in starts


def test_slots_are_contiguous_and_fixed_length():
    slots = generate_time_slots(_open(time(9, 0), time(11, 0)), 30)
    assert [(s.start, s.end) for s in slots] == [
        (time(9, 0), time(9, 30)),
        (time(9, 30), time(10, 0)),
        (time(10, 0), time(10, 30)),
        (time(10, 30), time(11, 0)),
    ]


def test_trailing_partial_slot_is_dropped():
    slots = generate_time_slots(_open(time(9, 0), time(10, 45)), 30)
    assert [s.start for s in slots] == [time(9, 0), time(9, 30), time(10, 0)]
    assert slots[-1].end == time(10, 30)


def test_window_shorter_than_duration_yields_nothing():
    assert generate_time_slots(_open(time(9, 0), time(9, 20)), 30) == []


def test_slot_touching_break_is_excluded():
    # 45 minute slots: 11:15-12:00 ends at the break and is kept, 12:00-12:45 overlaps it
    slots = generate_time_slots(_open(time(9, 0), time(14, 0), time(12, 0), time(13, 0)), 45)
    starts = [s.start for s in slots]
    assert time(11, 15) in starts
    assert time(12, 0) not in starts
    assert time(12, 45) not in starts
    assert time(13, 30) not in starts  # 13:30-14:15 would pass closing


def test_inactive_weekday_is_closed():
    window = resolve_operating_window(SUNDAY, _week())
    assert window.is_open is False
    assert generate_time_slots(window, 30) == []


def test_missing_weekday_row_is_closed():
    window = resolve_operating_window(date(2030, 1, 8), _week())  # Tuesday, no row
    assert window.is_open is False


@pytest.mark.parametrize("date_type", ["holiday", "closure"])
def test_closing_special_date_wins_over_weekday(date_type):
    special = SpecialDate(date=MONDAY, type=date_type, name="Shop closed")
    window = resolve_operating_window(MONDAY, _week(), special)

    assert window.is_open is False
    assert window.special_type == SpecialDateType(date_type)
    assert generate_time_slots(window, 30) == []


def test_special_hours_replace_weekday_hours_and_break():
    special = SpecialDate(
        date=MONDAY, type="special_hours", open_time=time(10, 0), close_time=time(14, 0)
    )
    window = resolve_operating_window(MONDAY, _week(), special)

    assert window.is_open is True
    assert (window.open_time, window.close_time) == (time(10, 0), time(14, 0))
    assert window.break_window is None
    slots = generate_time_slots(window, 30)
    assert len(slots) == 8
    assert time(12, 0) in [s.start for s in slots]


def test_special_hours_open_a_normally_closed_day():
    special = SpecialDate(
        date=SUNDAY, type="special_hours", open_time=time(11, 0), close_time=time(13, 0)
    )
    window = resolve_operating_window(SUNDAY, _week(), special)
    assert window.is_open is True
    assert len(generate_time_slots(window, 30)) == 4


def test_special_hours_without_window_is_closed():
    special = SpecialDate(date=MONDAY, type="special_hours")
    window = resolve_operating_window(MONDAY, _week(), special)
    assert window.is_open is False


def test_non_positive_duration_is_rejected():
    with pytest.raises(ValueError):
        generate_time_slots(_open(time(9, 0), time(10, 0)), 0)
