# backend/repairdesk/repositories/special_date_repository.py
"""
SpecialDate Repository

Date-keyed overrides: single-date lookups for the day view and range
lookups for week/month/next-available scans.
"""

from datetime import date
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.special_date import SpecialDate
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class SpecialDateRepository(BaseRepository[SpecialDate]):
    """Repository for holidays, closures and special hours."""

    def __init__(self, db: Session):
        super().__init__(db, SpecialDate)

    def get_by_date(self, target_date: date) -> Optional[SpecialDate]:
        return self.find_one_by(date=target_date)

    def get_in_range(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[SpecialDate]:
        """
        Special dates between start_date and end_date (inclusive), ordered by date.

        Either bound may be omitted.
        """
        try:
            query = self.db.query(SpecialDate)
            if start_date is not None:
                query = query.filter(SpecialDate.date >= start_date)
            if end_date is not None:
                query = query.filter(SpecialDate.date <= end_date)
            return query.order_by(SpecialDate.date).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting special dates: {str(e)}")
            raise RepositoryException(f"Failed to get special dates: {str(e)}")

    def get_map_for_range(self, start_date: date, end_date: date) -> Dict[date, SpecialDate]:
        """Special dates in range keyed by date (one query)."""
        return {row.date: row for row in self.get_in_range(start_date, end_date)}

    def delete_by_date(self, target_date: date) -> bool:
        """Delete the override for a date. Does NOT commit."""
        try:
            deleted = (
                self.db.query(SpecialDate)
                .filter(SpecialDate.date == target_date)
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return bool(deleted)
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting special date {target_date}: {str(e)}")
            raise RepositoryException(f"Failed to delete special date: {str(e)}")
