# backend/repairdesk/schemas/availability.py
"""
Availability schemas for the public scheduling API.

Dates are YYYY-MM-DD strings and times are HH:MM strings so that every
response uses a single canonical spelling regardless of how the caller
wrote the input.
"""

from typing import Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import Field

from ..core.constants import MAX_SLOT_DURATION
from ._strict_base import StrictModel, StrictRequestModel

DataT = TypeVar("DataT")


class TimeSlot(StrictModel):
    """A generated slot on a given date."""

    id: Optional[str] = None
    date: str = Field(description="Date in YYYY-MM-DD format")
    start_time: str = Field(description="Start time in HH:MM format")
    end_time: str = Field(description="End time in HH:MM format")
    duration_minutes: int
    is_available: bool = True


class BreakWindow(StrictModel):
    start_time: str
    end_time: str


class SpecialDateInfo(StrictModel):
    """Override that shaped a day's hours."""

    type: str
    name: Optional[str] = None


class DayAvailability(StrictModel):
    """
    Availability for a single date.

    `slots` holds the free slots only; `available_slots` is their count.
    """

    date: str
    day_of_week: int = Field(ge=0, le=6, description="Sunday = 0")
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    slots: List[TimeSlot] = Field(default_factory=list)
    available_slots: int = 0
    break_window: Optional[BreakWindow] = None
    special_date: Optional[SpecialDateInfo] = None


class CalendarDay(StrictModel):
    """One entry of a week or month view."""

    date: str
    day_of_week: int = Field(ge=0, le=6)
    is_today: bool
    is_past: bool
    is_open: bool
    is_available: bool
    available_slots: int
    special_date: Optional[SpecialDateInfo] = None
    slots: Optional[List[TimeSlot]] = None


class WeekAvailability(StrictModel):
    week_start: str
    week_end: str
    days: List[CalendarDay]


class MonthAvailability(StrictModel):
    year: int
    month: int
    days: Dict[str, CalendarDay]


class SuggestedTimesRequest(StrictRequestModel):
    """Options for the suggested-times shortlist."""

    issue_type: Optional[str] = Field(default=None, max_length=100)
    urgency: Optional[Literal["low", "normal", "high", "emergency"]] = None
    preferred_date: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0, le=MAX_SLOT_DURATION)


class SlotCheckResponse(StrictModel):
    date: str
    time: str
    duration: int
    is_available: bool


class AvailabilityResponse(StrictModel, Generic[DataT]):
    """Envelope used by the public availability endpoints."""

    success: bool = True
    data: DataT
    warnings: Optional[List[str]] = None
