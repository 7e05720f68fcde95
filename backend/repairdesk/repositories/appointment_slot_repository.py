# backend/repairdesk/repositories/appointment_slot_repository.py
"""
AppointmentSlot Repository

Data access for generated slots.

Key responsibilities:
- Ordered slot retrieval per date and per date range
- Aggregate queries (dates with slots, free-slot counts) so range views cost
  a fixed number of round trips instead of one query per day
- Insert-if-absent on the (slot_date, start_time) unique key
- Single-statement compare-and-set reservation and release

Nothing here commits; callers run inside BaseService.transaction().
"""

from datetime import date
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.appointment_slot import AppointmentSlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AppointmentSlotRepository(BaseRepository[AppointmentSlot]):
    """Repository for generated appointment slots."""

    def __init__(self, db: Session):
        super().__init__(db, AppointmentSlot)
        self.logger = logging.getLogger(__name__)

    # Slot Retrieval

    def get_slots_for_date(self, target_date: date, available_only: bool = False) -> List[AppointmentSlot]:
        """
        All slots for a date ordered by start time.

        Args:
            target_date: The date
            available_only: Only return slots that are still free

        Returns:
            List of slots ordered by start time
        """
        try:
            query = self.db.query(AppointmentSlot).filter(AppointmentSlot.slot_date == target_date)
            if available_only:
                query = query.filter(AppointmentSlot.is_available.is_(True))
            return query.order_by(AppointmentSlot.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting slots for {target_date}: {str(e)}")
            raise RepositoryException(f"Failed to get slots: {str(e)}")

    def get_slots_for_dates(
        self, dates: Sequence[date], available_only: bool = True
    ) -> Dict[date, List[AppointmentSlot]]:
        """
        Slots for several dates in one query, grouped by date.

        Dates with no matching slots are absent from the result.
        """
        if not dates:
            return {}
        try:
            query = self.db.query(AppointmentSlot).filter(AppointmentSlot.slot_date.in_(list(dates)))
            if available_only:
                query = query.filter(AppointmentSlot.is_available.is_(True))
            rows = query.order_by(AppointmentSlot.slot_date, AppointmentSlot.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting slots for dates: {str(e)}")
            raise RepositoryException(f"Failed to get slots: {str(e)}")

        grouped: Dict[date, List[AppointmentSlot]] = {}
        for slot in rows:
            grouped.setdefault(slot.slot_date, []).append(slot)
        return grouped

    # Aggregates

    def get_dates_with_slots(self, start_date: date, end_date: Optional[date] = None) -> Set[date]:
        """Distinct dates from start_date (to end_date, if given) that already have slot rows."""
        try:
            query = self.db.query(AppointmentSlot.slot_date).filter(AppointmentSlot.slot_date >= start_date)
            if end_date is not None:
                query = query.filter(AppointmentSlot.slot_date <= end_date)
            rows = query.distinct().all()
            return {row[0] for row in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting dates with slots: {str(e)}")
            raise RepositoryException(f"Failed to get slot dates: {str(e)}")

    def count_slots_by_date(
        self, start_date: date, end_date: date, available_only: bool = True
    ) -> Dict[date, int]:
        """
        Slot counts per date for a range, in a single grouped query.

        Args:
            start_date: First date (inclusive)
            end_date: Last date (inclusive)
            available_only: Count only free slots

        Returns:
            Mapping of date to count; dates without matching slots are absent
        """
        try:
            query = self.db.query(AppointmentSlot.slot_date, func.count(AppointmentSlot.id)).filter(
                AppointmentSlot.slot_date >= start_date,
                AppointmentSlot.slot_date <= end_date,
            )
            if available_only:
                query = query.filter(AppointmentSlot.is_available.is_(True))
            rows = query.group_by(AppointmentSlot.slot_date).all()
            return {row[0]: int(row[1]) for row in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting slots by date: {str(e)}")
            raise RepositoryException(f"Failed to count slots: {str(e)}")

    # Writes

    def insert_slots_if_absent(self, rows: Sequence[Mapping[str, Any]]) -> None:
        """
        Insert slot rows, silently skipping any (slot_date, start_time) already present.

        Uses INSERT .. ON CONFLICT DO NOTHING on PostgreSQL and SQLite in a
        single executemany; other dialects fall back to one savepoint per row.
        Does NOT commit.
        """
        if not rows:
            return

        dialect = self.dialect_name
        try:
            if dialect in ("postgresql", "sqlite"):
                if dialect == "postgresql":
                    from sqlalchemy.dialects.postgresql import insert as dialect_insert
                else:
                    from sqlalchemy.dialects.sqlite import insert as dialect_insert

                stmt = dialect_insert(AppointmentSlot).on_conflict_do_nothing(
                    index_elements=["slot_date", "start_time"]
                )
                self.db.execute(stmt, [dict(row) for row in rows])
                return

            for row in rows:
                try:
                    with self.db.begin_nested():
                        self.db.add(AppointmentSlot(**row))
                except IntegrityError:
                    self.logger.debug(
                        "Slot %s %s already exists; skipping", row.get("slot_date"), row.get("start_time")
                    )
        except SQLAlchemyError as e:
            self.logger.error(f"Error inserting slots: {str(e)}")
            raise RepositoryException(f"Failed to insert slots: {str(e)}")

    def reserve_slot(self, slot_id: str, appointment_id: str) -> bool:
        """
        Atomically claim a free slot for an appointment.

        Single conditional UPDATE guarded by is_available; when two callers race
        for the same slot only one statement matches a row.

        Returns:
            True if this call flipped the slot, False if it was already taken
        """
        try:
            result = self.db.execute(
                update(AppointmentSlot)
                .where(
                    AppointmentSlot.id == slot_id,
                    AppointmentSlot.is_available.is_(True),
                )
                .values(is_available=False, appointment_id=appointment_id, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            self._expire_cached_slots()
            return result.rowcount == 1
        except SQLAlchemyError as e:
            self.logger.error(f"Error reserving slot {slot_id}: {str(e)}")
            raise RepositoryException(f"Failed to reserve slot: {str(e)}")

    def release_by_appointment(self, appointment_id: str) -> int:
        """
        Return every slot bound to an appointment to the free pool.

        Returns:
            Number of slots released (0 when nothing was bound)
        """
        try:
            result = self.db.execute(
                update(AppointmentSlot)
                .where(AppointmentSlot.appointment_id == appointment_id)
                .values(is_available=True, appointment_id=None, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            released = int(result.rowcount or 0)
            if released:
                self._expire_cached_slots()
            return released
        except SQLAlchemyError as e:
            self.logger.error(f"Error releasing slots for appointment {appointment_id}: {str(e)}")
            raise RepositoryException(f"Failed to release slot: {str(e)}")

    def delete_free_slots_for_dates(self, dates: Iterable[date]) -> int:
        """
        Delete unreserved slots for the given dates so they can be regenerated.

        Reserved slots are kept.
        """
        date_list = list(dates)
        if not date_list:
            return 0
        try:
            deleted = (
                self.db.query(AppointmentSlot)
                .filter(
                    AppointmentSlot.slot_date.in_(date_list),
                    AppointmentSlot.is_available.is_(True),
                    AppointmentSlot.appointment_id.is_(None),
                )
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return int(deleted or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting free slots: {str(e)}")
            raise RepositoryException(f"Failed to delete slots: {str(e)}")

    def _expire_cached_slots(self) -> None:
        """Expire slot objects loaded in this session after a bulk UPDATE."""
        for obj in list(self.db.identity_map.values()):
            if isinstance(obj, AppointmentSlot):
                self.db.expire(obj)
