# backend/repairdesk/routes/v1/admin_slots.py
"""
Admin slot generation routes - API v1

Endpoints:
    POST /admin/slots/generate  - Generate slots for a date range
    GET  /admin/slots/generate  - Generation status for upcoming days

This is what a periodic pre-generation job calls; lazy generation keeps the
public endpoints correct without it.
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies.auth import require_admin
from ...api.dependencies.services import get_slot_generation_service
from ...core.constants import DEFAULT_GENERATION_DAYS
from ...core.exceptions import DomainException
from ...schemas.slot_generation import GenerationStatus, SlotGenerationRequest, SlotGenerationResult
from ...services.slot_generation_service import SlotGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-slots"], dependencies=[Depends(require_admin)])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/generate", response_model=SlotGenerationResult)
async def generate_slots(
    payload: Optional[SlotGenerationRequest] = Body(None),
    generation_service: SlotGenerationService = Depends(get_slot_generation_service),
) -> SlotGenerationResult:
    """Generate slots and report per-day results."""
    payload = payload or SlotGenerationRequest()
    try:
        return await asyncio.to_thread(
            generation_service.generate_slots,
            payload.start_date,
            payload.end_date,
            payload.days_ahead,
            payload.slot_duration,
            payload.force,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/generate", response_model=GenerationStatus)
async def get_generation_status(
    days: int = Query(DEFAULT_GENERATION_DAYS, description="Days ahead to report"),
    generation_service: SlotGenerationService = Depends(get_slot_generation_service),
) -> GenerationStatus:
    try:
        return await asyncio.to_thread(generation_service.get_generation_status, days)
    except DomainException as e:
        handle_domain_exception(e)
