# backend/repairdesk/routes/v1/availability.py
"""
Public availability routes - API v1

Unauthenticated endpoints customers use to find and check appointment times.

Endpoints:
    GET  /public/availability              - Day, week, month or next-available view
    GET  /public/availability/check        - Whether one slot can be booked
    POST /public/availability/suggestions  - Suggested times shortlist
"""

import asyncio
import logging
from typing import Any, List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies.services import get_availability_service
from ...core.config import settings
from ...core.exceptions import DomainException
from ...schemas.availability import (
    AvailabilityResponse,
    SlotCheckResponse,
    SuggestedTimesRequest,
    TimeSlot,
)
from ...services.availability_service import AvailabilityService
from ...utils.time_helpers import normalize_time, parse_date, parse_month

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public-availability"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=None)
async def get_availability(
    date: Optional[str] = Query(None, description="Single day view (YYYY-MM-DD)"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Week containing this date"),
    month: Optional[str] = Query(None, description="Month view (YYYY-MM)"),
    next_available: bool = Query(False, alias="nextAvailable", description="Next available dates (default view)"),
    limit: Optional[int] = Query(None, description="Number of dates for nextAvailable"),
    include_slots: bool = Query(False, alias="includeSlots", description="Per-slot detail in week/month views"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse[Any]:
    """
    Availability in one of four shapes, picked by the query parameters.

    Precedence: date, startDate, month, then next available dates, which is
    also what nextAvailable=true or no parameters at all return.
    """
    try:
        if date:
            data: Any = await asyncio.to_thread(availability_service.get_date_availability, date)
            return AvailabilityResponse[Any](data=data)

        if start_date:
            data = await asyncio.to_thread(
                availability_service.get_week_availability, start_date, include_slots
            )
            return AvailabilityResponse[Any](data=data)

        if month:
            year, month_number = parse_month(month)
            data = await asyncio.to_thread(
                availability_service.get_month_availability, year, month_number, include_slots
            )
            return AvailabilityResponse[Any](data=data)

        requested = limit if limit is not None else settings.default_next_available_limit
        days = await asyncio.to_thread(availability_service.get_next_available_dates, requested)
        warnings = None
        if len(days) < requested:
            warnings = [
                f"Only {len(days)} available dates found in the next "
                f"{settings.next_available_scan_days} days"
            ]
        return AvailabilityResponse[Any](data=days, warnings=warnings)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/check", response_model=AvailabilityResponse[SlotCheckResponse])
async def check_slot(
    date: str = Query(..., description="YYYY-MM-DD"),
    time: str = Query(..., description="HH:MM or HH:MM:SS"),
    duration: Optional[int] = Query(None, description="Minutes; defaults to one slot"),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse[SlotCheckResponse]:
    """Whether an appointment can start at the given date and time."""
    try:
        available = await asyncio.to_thread(
            availability_service.is_slot_available, date, time, duration
        )
        return AvailabilityResponse[SlotCheckResponse](
            data=SlotCheckResponse(
                date=parse_date(date).isoformat(),
                time=normalize_time(time),
                duration=duration or availability_service.generation_service.slot_duration,
                is_available=available,
            )
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/suggestions", response_model=AvailabilityResponse[List[TimeSlot]])
async def get_suggested_times(
    payload: Optional[SuggestedTimesRequest] = Body(None),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse[List[TimeSlot]]:
    """Shortlist of bookable times based on urgency or a preferred date."""
    payload = payload or SuggestedTimesRequest()
    try:
        suggestions = await asyncio.to_thread(
            availability_service.get_suggested_times,
            payload.urgency,
            payload.preferred_date,
            payload.duration,
            payload.issue_type,
        )
        warnings = ["No available times found"] if not suggestions else None
        return AvailabilityResponse[List[TimeSlot]](data=suggestions, warnings=warnings)
    except DomainException as e:
        handle_domain_exception(e)
