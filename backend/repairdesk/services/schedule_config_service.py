# backend/repairdesk/services/schedule_config_service.py
"""
Schedule Configuration Service for RepairDesk

Admin operations on weekly business hours and special dates.

Each change is validated, written, and followed (in the same transaction) by
a refresh of the free slots of affected dates that were already generated,
so lazily generated slots never drift from the configuration. Reserved
slots are never touched by a refresh.
"""

from datetime import time
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BusinessRuleException,
    InvalidFieldException,
    NotFoundException,
    SpecialDateExistsException,
)
from ..models.special_date import SpecialDateType
from ..repositories.factory import RepositoryFactory
from ..schemas.schedule_config import (
    BusinessHoursResponse,
    BusinessHoursUpdate,
    SpecialDateCreate,
    SpecialDateResponse,
)
from ..utils.time_helpers import day_of_week, parse_date, parse_time
from .base import BaseService
from .slot_generation_service import SlotGenerationService

logger = logging.getLogger(__name__)


def _validate_day(day: int) -> int:
    if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
        raise InvalidFieldException("day_of_week", day, "an integer between 0 (Sunday) and 6 (Saturday)")
    return day


class ScheduleConfigService(BaseService):
    """Business hours and special date administration."""

    def __init__(self, db: Session, generation_service: Optional[SlotGenerationService] = None):
        super().__init__(db)
        self.business_hours_repository = RepositoryFactory.create_business_hours_repository(db)
        self.special_date_repository = RepositoryFactory.create_special_date_repository(db)
        self.generation_service = generation_service or SlotGenerationService(
            db,
            business_hours_repository=self.business_hours_repository,
            special_date_repository=self.special_date_repository,
        )

    # Business hours

    @BaseService.measure_operation("list_business_hours")
    def list_business_hours(self) -> List[BusinessHoursResponse]:
        return [
            BusinessHoursResponse.from_model(row)
            for row in self.business_hours_repository.get_all_ordered()
        ]

    @BaseService.measure_operation("get_business_hours")
    def get_business_hours(self, day: int) -> BusinessHoursResponse:
        row = self.business_hours_repository.get_by_day(_validate_day(day))
        if row is None:
            raise NotFoundException(
                f"No business hours configured for day {day}",
                code="BUSINESS_HOURS_NOT_FOUND",
                details={"day_of_week": day},
            )
        return BusinessHoursResponse.from_model(row)

    @BaseService.measure_operation("update_business_hours")
    def update_business_hours(self, day: int, data: BusinessHoursUpdate) -> BusinessHoursResponse:
        """
        Create or replace the hours for one weekday.

        Raises:
            ValidationException: Unparseable times
            BusinessRuleException: open >= close, or a break outside opening hours
        """
        day = _validate_day(day)
        open_time = parse_time(data.open_time, "open_time")
        close_time = parse_time(data.close_time, "close_time")
        break_start, break_end = self._parse_break(data.break_start, data.break_end)
        self._check_hours(open_time, close_time, break_start, break_end)

        with self.transaction():
            row = self.business_hours_repository.upsert(
                day,
                open_time=open_time,
                close_time=close_time,
                break_start=break_start,
                break_end=break_end,
                is_active=data.is_active,
            )
            affected = [
                d for d in self.generation_service.generated_dates_from_today() if day_of_week(d) == day
            ]
            refreshed = self.generation_service.refresh_dates(affected)

        self.logger.info(f"Business hours for day {day} updated; {refreshed} generated dates refreshed")
        return BusinessHoursResponse.from_model(row)

    # Special dates

    @BaseService.measure_operation("list_special_dates")
    def list_special_dates(
        self, start_date: Optional[str] = None, end_date: Optional[str] = None
    ) -> List[SpecialDateResponse]:
        start = parse_date(start_date, "start_date") if start_date else None
        end = parse_date(end_date, "end_date") if end_date else None
        return [
            SpecialDateResponse.from_model(row)
            for row in self.special_date_repository.get_in_range(start, end)
        ]

    @BaseService.measure_operation("add_special_date")
    def add_special_date(self, data: SpecialDateCreate) -> SpecialDateResponse:
        """
        Add a holiday, closure or special-hours override.

        Raises:
            SpecialDateExistsException: The date already has an override
            BusinessRuleException: Hours missing/invalid for special_hours, or
                present for holiday/closure
        """
        target = parse_date(data.date, "date")
        date_type = SpecialDateType(data.type)
        open_time = parse_time(data.open_time, "open_time") if data.open_time else None
        close_time = parse_time(data.close_time, "close_time") if data.close_time else None

        if date_type.closes_shop:
            if open_time is not None or close_time is not None:
                raise BusinessRuleException(
                    f"A {date_type.value} closes the shop and cannot carry hours",
                    code="INVALID_SPECIAL_DATE",
                    details={"type": date_type.value},
                )
        else:
            if open_time is None or close_time is None:
                raise BusinessRuleException(
                    "special_hours requires open_time and close_time",
                    code="INVALID_SPECIAL_DATE",
                    details={"type": date_type.value},
                )
            self._check_hours(open_time, close_time)

        with self.transaction():
            if self.special_date_repository.get_by_date(target) is not None:
                raise SpecialDateExistsException(target.isoformat())
            row = self.special_date_repository.create(
                date=target,
                type=date_type.value,
                name=data.name,
                notes=data.notes,
                open_time=open_time,
                close_time=close_time,
            )
            self.generation_service.refresh_dates([target])

        self.logger.info(f"Special date {target} ({date_type.value}) added")
        return SpecialDateResponse.from_model(row)

    @BaseService.measure_operation("remove_special_date")
    def remove_special_date(self, target_date: str) -> bool:
        """Remove the override for a date; False when there was none."""
        target = parse_date(target_date, "date")
        with self.transaction():
            removed = self.special_date_repository.delete_by_date(target)
            if removed:
                self.generation_service.refresh_dates([target])

        if removed:
            self.logger.info(f"Special date {target} removed")
        return removed

    # Validation helpers

    @staticmethod
    def _parse_break(
        break_start: Optional[str], break_end: Optional[str]
    ) -> Tuple[Optional[time], Optional[time]]:
        if not break_start and not break_end:
            return None, None
        if not break_start or not break_end:
            raise BusinessRuleException(
                "break_start and break_end must be given together",
                code="INVALID_BREAK",
                details={"break_start": break_start, "break_end": break_end},
            )
        return parse_time(break_start, "break_start"), parse_time(break_end, "break_end")

    @staticmethod
    def _check_hours(
        open_time: time,
        close_time: time,
        break_start: Optional[time] = None,
        break_end: Optional[time] = None,
    ) -> None:
        if open_time >= close_time:
            raise BusinessRuleException(
                "open_time must be before close_time",
                code="INVALID_HOURS",
                details={"open_time": open_time.isoformat("minutes"), "close_time": close_time.isoformat("minutes")},
            )
        if break_start is not None and break_end is not None:
            if not (open_time <= break_start < break_end <= close_time):
                raise BusinessRuleException(
                    "Break must fall within opening hours and start before it ends",
                    code="INVALID_BREAK",
                    details={
                        "break_start": break_start.isoformat("minutes"),
                        "break_end": break_end.isoformat("minutes"),
                    },
                )
