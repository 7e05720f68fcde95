# backend/repairdesk/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected. Services are built per
request around the request's session; none of them hold state between calls.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.appointment_service import AppointmentService
from ...services.availability_service import AvailabilityService
from ...services.schedule_config_service import ScheduleConfigService
from ...services.slot_generation_service import SlotGenerationService
from .database import get_db

logger = logging.getLogger(__name__)


def get_slot_generation_service(db: Session = Depends(get_db)) -> SlotGenerationService:
    """Get slot generation service instance."""
    return SlotGenerationService(db)


def get_availability_service(
    db: Session = Depends(get_db),
    generation_service: SlotGenerationService = Depends(get_slot_generation_service),
) -> AvailabilityService:
    """
    Get availability service instance with all dependencies.

    Args:
        db: Database session
        generation_service: Lazy slot generation

    Returns:
        AvailabilityService instance
    """
    return AvailabilityService(db, generation_service=generation_service)


def get_schedule_config_service(
    db: Session = Depends(get_db),
    generation_service: SlotGenerationService = Depends(get_slot_generation_service),
) -> ScheduleConfigService:
    """Get schedule configuration service instance."""
    return ScheduleConfigService(db, generation_service=generation_service)


def get_appointment_service(
    db: Session = Depends(get_db),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AppointmentService:
    """Get appointment service instance."""
    return AppointmentService(db, availability_service=availability_service)
