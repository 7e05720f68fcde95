# backend/repairdesk/schemas/slot_generation.py
"""Admin schemas for bulk slot generation and generation status."""

from typing import List, Literal, Optional

from pydantic import Field

from ..core.constants import DEFAULT_GENERATION_DAYS, DEFAULT_SLOT_DURATION
from ._strict_base import StrictModel, StrictRequestModel


class SlotGenerationRequest(StrictRequestModel):
    """
    Bulk generation window.

    Either give start_date/end_date, or rely on days_ahead counted from today.
    Limits are enforced by SlotGenerationService so direct callers get the
    same validation errors as the API.
    """

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    days_ahead: int = DEFAULT_GENERATION_DAYS
    slot_duration: int = DEFAULT_SLOT_DURATION
    force: bool = False


class GeneratedDay(StrictModel):
    date: str
    status: Literal["generated", "skipped", "failed"]
    slots_created: int = 0
    reason: Optional[str] = None


class SlotGenerationSummary(StrictModel):
    total_days: int
    successful: int
    failed: int
    skipped: int
    slots_created: int


class SlotGenerationResult(StrictModel):
    start_date: str
    end_date: str
    slot_duration: int
    force: bool
    summary: SlotGenerationSummary
    details: List[GeneratedDay] = Field(default_factory=list)


class GenerationStatusDay(StrictModel):
    date: str
    day_of_week: int
    is_open: bool
    has_slots: bool
    slot_count: int
    available_count: int
    needs_generation: bool


class GenerationStatus(StrictModel):
    start_date: str
    end_date: str
    total_days: int
    open_days: int
    days_with_slots: int
    days_needing_generation: int
    days: List[GenerationStatusDay]
