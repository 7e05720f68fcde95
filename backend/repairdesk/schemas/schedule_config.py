# backend/repairdesk/schemas/schedule_config.py
"""Admin schemas for weekly business hours and special dates."""

from typing import TYPE_CHECKING, Literal, Optional

from pydantic import Field

from ..core.constants import DAYS_OF_WEEK, MAX_NAME_LENGTH
from ..utils.time_helpers import time_to_string
from ._strict_base import StrictModel, StrictRequestModel

if TYPE_CHECKING:
    from ..models.business_hours import BusinessHours
    from ..models.special_date import SpecialDate


class BusinessHoursUpdate(StrictRequestModel):
    """Replacement hours for one weekday. Break fields come as a pair."""

    open_time: str = Field(description="HH:MM or HH:MM:SS")
    close_time: str = Field(description="HH:MM or HH:MM:SS")
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    is_active: bool = True


class BusinessHoursResponse(StrictModel):
    id: str
    day_of_week: int
    day_name: str
    open_time: str
    close_time: str
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    is_active: bool

    @classmethod
    def from_model(cls, row: "BusinessHours") -> "BusinessHoursResponse":
        return cls(
            id=row.id,
            day_of_week=row.day_of_week,
            day_name=DAYS_OF_WEEK[row.day_of_week],
            open_time=time_to_string(row.open_time),
            close_time=time_to_string(row.close_time),
            break_start=time_to_string(row.break_start) if row.break_start else None,
            break_end=time_to_string(row.break_end) if row.break_end else None,
            is_active=bool(row.is_active),
        )


class SpecialDateCreate(StrictRequestModel):
    """New holiday, closure or special-hours override."""

    date: str = Field(description="YYYY-MM-DD")
    type: Literal["holiday", "closure", "special_hours"]
    name: Optional[str] = Field(default=None, max_length=MAX_NAME_LENGTH)
    notes: Optional[str] = None
    open_time: Optional[str] = None
    close_time: Optional[str] = None


class SpecialDateResponse(StrictModel):
    id: str
    date: str
    type: str
    name: Optional[str] = None
    notes: Optional[str] = None
    open_time: Optional[str] = None
    close_time: Optional[str] = None

    @classmethod
    def from_model(cls, row: "SpecialDate") -> "SpecialDateResponse":
        return cls(
            id=row.id,
            date=row.date.isoformat(),
            type=row.type,
            name=row.name,
            notes=row.notes,
            open_time=time_to_string(row.open_time) if row.open_time else None,
            close_time=time_to_string(row.close_time) if row.close_time else None,
        )


class DeleteResponse(StrictModel):
    success: bool
    message: str
