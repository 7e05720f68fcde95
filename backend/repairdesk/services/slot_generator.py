# backend/repairdesk/services/slot_generator.py
"""
Slot math for a single date.

Pure functions with no database access:
- resolve_operating_window() decides whether a date is open and with which
  hours, consulting the special date before the weekday default
- generate_time_slots() cuts an operating window into fixed-length slots,
  skipping any slot that touches the break window

Only full-duration slots are produced; a trailing remainder shorter than the
slot duration is dropped.
"""

from __future__ import annotations

from datetime import date, time
from typing import List, Mapping, NamedTuple, Optional

from ..models.business_hours import BusinessHours
from ..models.special_date import SpecialDate, SpecialDateType
from ..utils.time_helpers import add_minutes, day_of_week, minutes_of


class TimeRange(NamedTuple):
    """A [start, end) interval within one day."""

    start: time
    end: time

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end


class OperatingWindow(NamedTuple):
    """Effective hours for one date after applying overrides."""

    target_date: date
    is_open: bool
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    special_type: Optional[SpecialDateType] = None

    @property
    def break_window(self) -> Optional[TimeRange]:
        if self.break_start is None or self.break_end is None:
            return None
        return TimeRange(self.break_start, self.break_end)

    @property
    def is_special(self) -> bool:
        return self.special_type is not None


def closed_window(target_date: date, special_type: Optional[SpecialDateType] = None) -> OperatingWindow:
    return OperatingWindow(target_date=target_date, is_open=False, special_type=special_type)


def resolve_operating_window(
    target_date: date,
    business_hours: Mapping[int, BusinessHours],
    special_date: Optional[SpecialDate] = None,
) -> OperatingWindow:
    """
    Work out the operating window for a date.

    Args:
        target_date: The calendar date
        business_hours: Weekly hours keyed by day_of_week (Sunday = 0)
        special_date: Override row for this date, if any

    Returns:
        OperatingWindow; closed when the date is a holiday/closure, when a
        special_hours override lacks a valid window, or when the weekday has
        no active business hours
    """
    if special_date is not None:
        special_type = special_date.date_type
        if special_type.closes_shop:
            return closed_window(target_date, special_type)
        if (
            special_date.open_time is None
            or special_date.close_time is None
            or special_date.open_time >= special_date.close_time
        ):
            return closed_window(target_date, special_type)
        # Custom hours replace the weekday row; its break does not apply
        return OperatingWindow(
            target_date=target_date,
            is_open=True,
            open_time=special_date.open_time,
            close_time=special_date.close_time,
            special_type=special_type,
        )

    hours = business_hours.get(day_of_week(target_date))
    if hours is None or not hours.is_active or hours.open_time >= hours.close_time:
        return closed_window(target_date)

    return OperatingWindow(
        target_date=target_date,
        is_open=True,
        open_time=hours.open_time,
        close_time=hours.close_time,
        break_start=hours.break_start if hours.has_break else None,
        break_end=hours.break_end if hours.has_break else None,
    )


def generate_time_slots(window: OperatingWindow, duration_minutes: int) -> List[TimeRange]:
    """
    Cut an operating window into consecutive slots of duration_minutes.

    Slots start at open_time and step by the duration. A slot is kept only if
    it ends at or before close_time and does not overlap the break.

    Returns:
        Ordered list of TimeRange; empty for a closed window
    """
    if duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")
    if not window.is_open or window.open_time is None or window.close_time is None:
        return []

    break_window = window.break_window
    slots: List[TimeRange] = []
    cursor: Optional[time] = window.open_time
    close_minutes = minutes_of(window.close_time)

    while cursor is not None and minutes_of(cursor) + duration_minutes <= close_minutes:
        end = add_minutes(cursor, duration_minutes)
        if end is None:
            break
        candidate = TimeRange(cursor, end)
        if break_window is None or not candidate.overlaps(break_window):
            slots.append(candidate)
        cursor = end

    return slots
