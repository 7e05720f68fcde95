# backend/repairdesk/routes/v1/admin_schedule.py
"""
Admin schedule configuration routes - API v1

All endpoints require the admin bearer token.

Endpoints:
    GET    /admin/business-hours          - Weekly hours
    GET    /admin/business-hours/{day}    - Hours for one weekday (Sunday = 0)
    PUT    /admin/business-hours/{day}    - Create or replace one weekday
    GET    /admin/special-dates           - Overrides, optionally in a range
    POST   /admin/special-dates           - Add a holiday, closure or special hours
    DELETE /admin/special-dates/{date}    - Remove an override
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_schedule_config_service
from ...core.exceptions import DomainException, NotFoundException
from ...schemas.schedule_config import (
    BusinessHoursResponse,
    BusinessHoursUpdate,
    DeleteResponse,
    SpecialDateCreate,
    SpecialDateResponse,
)
from ...services.schedule_config_service import ScheduleConfigService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-schedule"], dependencies=[Depends(require_admin)])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/business-hours", response_model=List[BusinessHoursResponse])
async def list_business_hours(
    config_service: ScheduleConfigService = Depends(get_schedule_config_service),
) -> List[BusinessHoursResponse]:
    try:
        return await asyncio.to_thread(config_service.list_business_hours)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/business-hours/{day}", response_model=BusinessHoursResponse)
async def get_business_hours(
    day: int = Path(..., description="Day of week, Sunday = 0"),
    config_service: ScheduleConfigService = Depends(get_schedule_config_service),
) -> BusinessHoursResponse:
    try:
        return await asyncio.to_thread(config_service.get_business_hours, day)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/business-hours/{day}", response_model=BusinessHoursResponse)
async def update_business_hours(
    day: int = Path(..., description="Day of week, Sunday = 0"),
    payload: BusinessHoursUpdate = Body(...),
    config_service: ScheduleConfigService = Depends(get_schedule_config_service),
) -> BusinessHoursResponse:
    """Replace one weekday's hours and refresh its already-generated free slots."""
    try:
        return await asyncio.to_thread(config_service.update_business_hours, day, payload)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/special-dates", response_model=List[SpecialDateResponse])
async def list_special_dates(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    config_service: ScheduleConfigService = Depends(get_schedule_config_service),
) -> List[SpecialDateResponse]:
    try:
        return await asyncio.to_thread(config_service.list_special_dates, start_date, end_date)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/special-dates", response_model=SpecialDateResponse, status_code=status.HTTP_201_CREATED
)
async def add_special_date(
    payload: SpecialDateCreate = Body(...),
    config_service: ScheduleConfigService = Depends(get_schedule_config_service),
) -> SpecialDateResponse:
    try:
        return await asyncio.to_thread(config_service.add_special_date, payload)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/special-dates/{special_date}", response_model=DeleteResponse)
async def remove_special_date(
    special_date: str = Path(..., description="YYYY-MM-DD"),
    config_service: ScheduleConfigService = Depends(get_schedule_config_service),
) -> DeleteResponse:
    try:
        removed = await asyncio.to_thread(config_service.remove_special_date, special_date)
        if not removed:
            raise NotFoundException(
                f"No special date on {special_date}",
                code="SPECIAL_DATE_NOT_FOUND",
                details={"date": special_date},
            )
        return DeleteResponse(success=True, message=f"Special date {special_date} removed")
    except DomainException as e:
        handle_domain_exception(e)
