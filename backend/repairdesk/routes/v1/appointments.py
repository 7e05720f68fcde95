# backend/repairdesk/routes/v1/appointments.py
"""
Appointment routes - API v1

Endpoints:
    POST /appointments                    - Book an appointment into a slot
    GET  /appointments                    - List appointments
    GET  /appointments/{id}               - Appointment details
    POST /appointments/{id}/cancel        - Cancel and release the slot
    POST /appointments/{id}/reschedule    - Move to another slot
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from ...api.dependencies.services import get_appointment_service
from ...core.exceptions import DomainException
from ...schemas.appointment import (
    AppointmentCancel,
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from ...services.appointment_service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["appointments"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# ============================================================================
# Static routes (no path parameters)
# ============================================================================


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    payload: AppointmentCreate = Body(...),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    """
    Book an appointment.

    Responds 409 SLOT_UNAVAILABLE when the slot is closed or was taken; the
    client should re-query availability and let the customer pick again.
    """
    try:
        return await asyncio.to_thread(appointment_service.create_appointment, payload)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    status_filter: Optional[str] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> List[AppointmentResponse]:
    try:
        return await asyncio.to_thread(
            appointment_service.list_appointments, date, status_filter, skip, limit
        )
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# Dynamic routes (with path parameters)
# ============================================================================


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    try:
        return await asyncio.to_thread(appointment_service.get_appointment, appointment_id)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: str,
    payload: Optional[AppointmentCancel] = Body(None),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    """Cancel an appointment and return its slot to the pool."""
    reason = payload.reason if payload else None
    try:
        return await asyncio.to_thread(appointment_service.cancel_appointment, appointment_id, reason)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: str,
    payload: AppointmentReschedule = Body(...),
    appointment_service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentResponse:
    """Move an appointment to a new slot; nothing changes if the slot is taken."""
    try:
        return await asyncio.to_thread(
            appointment_service.reschedule_appointment, appointment_id, payload
        )
    except DomainException as e:
        handle_domain_exception(e)
