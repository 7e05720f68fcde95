# backend/repairdesk/repositories/__init__.py
"""
Repository Pattern Implementation for RepairDesk

This package provides the repository layer for data access,
separating scheduling logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic create and lookup helpers
- RepositoryFactory: Factory for creating repository instances
- BusinessHoursRepository: Weekly open/close/break rows
- SpecialDateRepository: Holidays, closures and special hours
- AppointmentSlotRepository: Generated slots, insert-if-absent and reservation
- AppointmentRepository: Appointment lookups and listings

Usage:
    from repairdesk.repositories import RepositoryFactory

    # In a service:
    slot_repository = RepositoryFactory.create_appointment_slot_repository(db)
    reserved = slot_repository.reserve_slot(slot_id, appointment_id)

Repositories never commit; services own the transaction boundary.
"""

from .appointment_repository import AppointmentRepository
from .appointment_slot_repository import AppointmentSlotRepository
from .base_repository import BaseRepository
from .business_hours_repository import BusinessHoursRepository
from .factory import RepositoryFactory
from .special_date_repository import SpecialDateRepository

__all__ = [
    "AppointmentRepository",
    "AppointmentSlotRepository",
    "BaseRepository",
    "BusinessHoursRepository",
    "RepositoryFactory",
    "SpecialDateRepository",
]
