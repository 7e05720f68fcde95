# backend/repairdesk/schemas/__init__.py
"""
Pydantic schemas for the RepairDesk API.

All DTOs serialize with camelCase keys and accept either camelCase or
snake_case on input.
"""

from .appointment import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from .availability import (
    AvailabilityResponse,
    BreakWindow,
    CalendarDay,
    DayAvailability,
    MonthAvailability,
    SlotCheckResponse,
    SpecialDateInfo,
    SuggestedTimesRequest,
    TimeSlot,
    WeekAvailability,
)
from .schedule_config import (
    BusinessHoursResponse,
    BusinessHoursUpdate,
    DeleteResponse,
    SpecialDateCreate,
    SpecialDateResponse,
)
from .slot_generation import (
    GeneratedDay,
    GenerationStatus,
    GenerationStatusDay,
    SlotGenerationRequest,
    SlotGenerationResult,
    SlotGenerationSummary,
)

__all__ = [
    "AppointmentCancel",
    "AppointmentCreate",
    "AppointmentReschedule",
    "AppointmentResponse",
    "AvailabilityResponse",
    "BreakWindow",
    "BusinessHoursResponse",
    "BusinessHoursUpdate",
    "CalendarDay",
    "DayAvailability",
    "DeleteResponse",
    "GeneratedDay",
    "GenerationStatus",
    "GenerationStatusDay",
    "MonthAvailability",
    "SlotCheckResponse",
    "SlotGenerationRequest",
    "SlotGenerationResult",
    "SlotGenerationSummary",
    "SpecialDateCreate",
    "SpecialDateInfo",
    "SpecialDateResponse",
    "SuggestedTimesRequest",
    "TimeSlot",
    "WeekAvailability",
]
