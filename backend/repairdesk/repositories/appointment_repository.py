# backend/repairdesk/repositories/appointment_repository.py
"""
Appointment Repository

Lookup and listing queries for appointments. Slot binding lives in
AppointmentSlotRepository; this repository only touches the appointments table.
"""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.appointment import Appointment
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AppointmentRepository(BaseRepository[Appointment]):
    """Repository for appointments."""

    def __init__(self, db: Session):
        super().__init__(db, Appointment)

    def get_by_number(self, appointment_number: str) -> Optional[Appointment]:
        return self.find_one_by(appointment_number=appointment_number)

    def list_appointments(
        self,
        scheduled_date: Optional[date] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Appointment]:
        """
        Appointments ordered by scheduled date and time.

        Args:
            scheduled_date: Only appointments on this date
            status: Only appointments with this status
            skip: Pagination offset
            limit: Page size

        Returns:
            List of appointments
        """
        try:
            query = self.db.query(Appointment)
            if scheduled_date is not None:
                query = query.filter(Appointment.scheduled_date == scheduled_date)
            if status is not None:
                query = query.filter(Appointment.status == status)
            return (
                query.order_by(Appointment.scheduled_date, Appointment.scheduled_time)
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing appointments: {str(e)}")
            raise RepositoryException(f"Failed to list appointments: {str(e)}")

