# backend/repairdesk/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import require_admin
from .database import get_db
from .services import (
    get_appointment_service,
    get_availability_service,
    get_schedule_config_service,
    get_slot_generation_service,
)

__all__ = [
    # Auth
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_appointment_service",
    "get_availability_service",
    "get_schedule_config_service",
    "get_slot_generation_service",
]
