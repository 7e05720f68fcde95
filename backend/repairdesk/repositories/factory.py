# backend/repairdesk/repositories/factory.py
"""
Repository Factory for RepairDesk

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .appointment_repository import AppointmentRepository
    from .appointment_slot_repository import AppointmentSlotRepository
    from .business_hours_repository import BusinessHoursRepository
    from .special_date_repository import SpecialDateRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_base_repository(db: Session, model) -> BaseRepository:
        """
        Create a generic base repository for any model.

        Args:
            db: Database session
            model: SQLAlchemy model class

        Returns:
            BaseRepository instance
        """
        return BaseRepository(db, model)

    @staticmethod
    def create_business_hours_repository(db: Session) -> "BusinessHoursRepository":
        """Create repository for weekly business hours."""
        from .business_hours_repository import BusinessHoursRepository

        return BusinessHoursRepository(db)

    @staticmethod
    def create_special_date_repository(db: Session) -> "SpecialDateRepository":
        """Create repository for holidays, closures and special hours."""
        from .special_date_repository import SpecialDateRepository

        return SpecialDateRepository(db)

    @staticmethod
    def create_appointment_slot_repository(db: Session) -> "AppointmentSlotRepository":
        """Create repository for generated slots and reservations."""
        from .appointment_slot_repository import AppointmentSlotRepository

        return AppointmentSlotRepository(db)

    @staticmethod
    def create_appointment_repository(db: Session) -> "AppointmentRepository":
        """Create repository for appointments."""
        from .appointment_repository import AppointmentRepository

        return AppointmentRepository(db)
