# backend/repairdesk/repositories/business_hours_repository.py
"""
BusinessHours Repository

Read paths for the weekly schedule plus the admin upsert.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.business_hours import BusinessHours
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BusinessHoursRepository(BaseRepository[BusinessHours]):
    """Repository for weekly business hours."""

    def __init__(self, db: Session):
        super().__init__(db, BusinessHours)

    def get_all_ordered(self) -> List[BusinessHours]:
        """All weekday rows ordered Sunday..Saturday."""
        try:
            return self.db.query(BusinessHours).order_by(BusinessHours.day_of_week).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting business hours: {str(e)}")
            raise RepositoryException(f"Failed to get business hours: {str(e)}")

    def get_by_day(self, day_of_week: int) -> Optional[BusinessHours]:
        return self.find_one_by(day_of_week=day_of_week)

    def get_week_map(self) -> Dict[int, BusinessHours]:
        """
        Business hours keyed by day_of_week.

        One query; callers resolve many dates against the result.
        """
        return {row.day_of_week: row for row in self.get_all_ordered()}

    def upsert(self, day_of_week: int, **fields: Any) -> BusinessHours:
        """
        Create or update the row for a weekday.

        Does NOT commit.
        """
        existing = self.get_by_day(day_of_week)
        if existing is None:
            return self.create(day_of_week=day_of_week, **fields)

        try:
            for key, value in fields.items():
                setattr(existing, key, value)
            self.db.flush()
            return existing
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating business hours for day {day_of_week}: {str(e)}")
            raise RepositoryException(f"Failed to update business hours: {str(e)}")
