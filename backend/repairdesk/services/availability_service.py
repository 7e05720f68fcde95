# backend/repairdesk/services/availability_service.py
"""
Availability Service for RepairDesk

Public surface for reading and mutating appointment availability.

Every read first makes sure slots exist for the requested dates (lazy
generation through SlotGenerationService) and then answers from the slot
rows. Range views (week, month, next available) use a fixed number of
batched queries regardless of how many days they cover.

Expected outcomes are return values: a closed day yields an empty slot list,
a missing or taken slot yields False. Data-access failures propagate as
RepositoryException/ServiceException and are never reported as "no
availability".
"""

import calendar
from datetime import date, time, timedelta
import logging
from typing import Dict, List, Optional, Sequence, Union

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import (
    EMERGENCY_SLOTS_PER_DAY,
    MAX_SUGGESTIONS,
    PREFERRED_DATE_SLOT_LIMIT,
    SUGGESTION_DATES,
    SUGGESTION_SLOTS_PER_DATE,
)
from ..core.exceptions import InvalidFieldException, SlotUnavailableException
from ..core.timezone_utils import get_business_today
from ..models.appointment_slot import AppointmentSlot
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.appointment_slot_repository import AppointmentSlotRepository
from ..repositories.factory import RepositoryFactory
from ..schemas.availability import (
    BreakWindow,
    CalendarDay,
    DayAvailability,
    MonthAvailability,
    SpecialDateInfo,
    TimeSlot,
    WeekAvailability,
)
from ..utils.time_helpers import (
    date_range,
    day_of_week,
    parse_date,
    parse_time,
    time_to_string,
    week_start,
)
from .base import BaseService
from .slot_generation_service import SlotGenerationService
from .slot_generator import OperatingWindow

logger = logging.getLogger(__name__)

DateInput = Union[str, date]
TimeInput = Union[str, time]


def slot_to_schema(slot: AppointmentSlot) -> TimeSlot:
    return TimeSlot(
        id=slot.id,
        date=slot.slot_date.isoformat(),
        start_time=time_to_string(slot.start_time),
        end_time=time_to_string(slot.end_time),
        duration_minutes=slot.duration_minutes,
        is_available=bool(slot.is_available),
    )


def _special_info(window: OperatingWindow, name: Optional[str] = None) -> Optional[SpecialDateInfo]:
    if window.special_type is None:
        return None
    return SpecialDateInfo(type=window.special_type.value, name=name)


def slot_chain(
    slots_by_start: Dict[time, AppointmentSlot], start: time, duration_minutes: int
) -> Optional[List[AppointmentSlot]]:
    """
    Free back-to-back slots starting at `start` that cover duration_minutes.

    A slot that is missing, reserved, or not contiguous with the previous one
    breaks the chain and the result is None.
    """
    chain: List[AppointmentSlot] = []
    remaining = duration_minutes
    cursor: Optional[time] = start
    while remaining > 0:
        slot = slots_by_start.get(cursor) if cursor is not None else None
        if slot is None or not slot.is_available:
            return None
        chain.append(slot)
        remaining -= slot.duration_minutes
        cursor = slot.end_time
    return chain


def covers_duration(
    slots_by_start: Dict[time, AppointmentSlot], start: time, duration_minutes: int
) -> bool:
    return slot_chain(slots_by_start, start, duration_minutes) is not None


class AvailabilityService(BaseService):
    """
    Day, week and month availability, next-available search, slot checks,
    reservation and release.
    """

    def __init__(
        self,
        db: Session,
        slot_repository: Optional[AppointmentSlotRepository] = None,
        generation_service: Optional[SlotGenerationService] = None,
    ):
        super().__init__(db)
        self.slot_repository = slot_repository or RepositoryFactory.create_appointment_slot_repository(db)
        self.special_date_repository = RepositoryFactory.create_special_date_repository(db)
        self.generation_service = generation_service or SlotGenerationService(
            db, slot_repository=self.slot_repository
        )

    # Views

    @BaseService.measure_operation("get_date_availability")
    def get_date_availability(self, target_date: DateInput) -> DayAvailability:
        """
        Free slots for a single date.

        Args:
            target_date: Date as YYYY-MM-DD or date

        Returns:
            DayAvailability; closed dates have is_open=False and no slots
        """
        target = parse_date(target_date)
        window = self.generation_service.ensure_slots(target)[target]

        free_slots: List[AppointmentSlot] = []
        if window.is_open:
            free_slots = self.slot_repository.get_slots_for_date(target, available_only=True)

        special_name = None
        if window.is_special:
            special = self.special_date_repository.get_by_date(target)
            special_name = special.name if special else None

        break_window = window.break_window
        return DayAvailability(
            date=target.isoformat(),
            day_of_week=day_of_week(target),
            is_open=window.is_open,
            open_time=time_to_string(window.open_time) if window.open_time else None,
            close_time=time_to_string(window.close_time) if window.close_time else None,
            slots=[slot_to_schema(slot) for slot in free_slots],
            available_slots=len(free_slots),
            break_window=(
                BreakWindow(
                    start_time=time_to_string(break_window.start),
                    end_time=time_to_string(break_window.end),
                )
                if break_window
                else None
            ),
            special_date=_special_info(window, special_name),
        )

    @BaseService.measure_operation("get_week_availability")
    def get_week_availability(self, anchor_date: DateInput, include_slots: bool = False) -> WeekAvailability:
        """
        Monday-start week containing anchor_date.

        Args:
            anchor_date: Any date in the week
            include_slots: Populate each day's free slot list

        Returns:
            WeekAvailability with seven CalendarDay entries
        """
        start = week_start(parse_date(anchor_date, "start_date"))
        end = start + timedelta(days=6)
        days = self._calendar_days(start, end, include_slots)
        return WeekAvailability(week_start=start.isoformat(), week_end=end.isoformat(), days=days)

    @BaseService.measure_operation("get_month_availability")
    def get_month_availability(self, year: int, month: int, include_slots: bool = False) -> MonthAvailability:
        """
        Every day of a calendar month keyed by ISO date.

        Raises:
            InvalidFieldException: If year/month do not name a calendar month
        """
        if not 1 <= month <= 12:
            raise InvalidFieldException("month", month, "a month between 1 and 12")
        if not 1 <= year <= 9999:
            raise InvalidFieldException("year", year, "a four digit year")

        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])
        days = self._calendar_days(start, end, include_slots)
        return MonthAvailability(year=year, month=month, days={day.date: day for day in days})

    @BaseService.measure_operation("get_next_available_dates")
    def get_next_available_dates(self, limit: Optional[int] = None, include_slots: bool = True) -> List[CalendarDay]:
        """
        First `limit` dates from today that are open and have a free slot.

        Scans at most settings.next_available_scan_days calendar days and
        returns whatever it found within that window, possibly fewer than
        requested. Query count does not depend on the scan length.
        """
        limit = settings.default_next_available_limit if limit is None else limit
        if not isinstance(limit, int) or limit < 1:
            raise InvalidFieldException("limit", limit, "a positive integer")

        today = get_business_today()
        end = today + timedelta(days=settings.next_available_scan_days - 1)
        windows = self.generation_service.ensure_slots(today, end)
        free_counts = self.slot_repository.count_slots_by_date(today, end, available_only=True)

        found: List[CalendarDay] = []
        for target in date_range(today, end):
            window = windows[target]
            count = free_counts.get(target, 0)
            if window.is_open and count > 0:
                found.append(self._calendar_day(target, window, count, today))
                if len(found) >= limit:
                    break

        if include_slots and found:
            slots_by_date = self.slot_repository.get_slots_for_dates(
                [date.fromisoformat(day.date) for day in found], available_only=True
            )
            for day in found:
                day.slots = [
                    slot_to_schema(slot) for slot in slots_by_date.get(date.fromisoformat(day.date), [])
                ]
        return found

    # Slot checks and reservation

    @BaseService.measure_operation("is_slot_available")
    def is_slot_available(
        self, target_date: DateInput, start_time: TimeInput, duration_minutes: Optional[int] = None
    ) -> bool:
        """
        Whether an appointment of duration_minutes can start at start_time.

        HH:MM and HH:MM:SS spell the same minute. Longer durations need the
        following back-to-back slots to be free as well. Past dates are never
        available.
        """
        target = parse_date(target_date)
        slot_time = parse_time(start_time)
        duration = self._validate_duration(duration_minutes)

        if target < get_business_today():
            return False

        window = self.generation_service.ensure_slots(target)[target]
        if not window.is_open:
            return False

        slots = self.slot_repository.get_slots_for_date(target)
        return covers_duration({slot.start_time: slot for slot in slots}, slot_time, duration)

    @BaseService.measure_operation("reserve_slot")
    def reserve_slot(
        self,
        target_date: DateInput,
        start_time: TimeInput,
        appointment_id: str,
        duration_minutes: Optional[int] = None,
    ) -> bool:
        """
        Bind the slots covering [start_time, start_time + duration) to an appointment.

        Each slot is claimed with a conditional UPDATE on is_available; of two
        racing callers exactly one gets True. A partial claim is rolled back.

        Returns:
            True if reserved, False if a slot does not exist or is taken
        """
        target = parse_date(target_date)
        slot_time = parse_time(start_time)
        duration = self._validate_duration(duration_minutes)
        if not appointment_id:
            raise InvalidFieldException("appointment_id", appointment_id, "a non-empty identifier")

        try:
            with self.transaction():
                if not self.reserve_in_session(target, slot_time, appointment_id, duration):
                    raise SlotUnavailableException(target.isoformat(), time_to_string(slot_time))
        except SlotUnavailableException:
            return False
        return True

    def reserve_in_session(
        self,
        target: date,
        slot_time: time,
        appointment_id: str,
        duration_minutes: Optional[int] = None,
    ) -> bool:
        """
        Reservation inside the caller's transaction. Does NOT commit.

        Generates the date's slots if needed, then claims every back-to-back
        slot covering duration_minutes. On False the caller must roll back,
        since slots claimed earlier in the chain stay bound until it does.
        """
        duration = self._validate_duration(duration_minutes)
        label = f"{target} {time_to_string(slot_time)}"
        if target < get_business_today():
            prometheus_metrics.record_slot_reservation("past")
            self.logger.info(f"Slot {label} is in the past")
            return False

        window = self.generation_service.ensure_slots_in_session(target, target)[target]
        slots = self.slot_repository.get_slots_for_date(target) if window.is_open else []
        slots_by_start = {slot.start_time: slot for slot in slots}
        if slot_time not in slots_by_start:
            prometheus_metrics.record_slot_reservation("missing")
            self.logger.info(f"No slot at {label} to reserve")
            return False

        chain = slot_chain(slots_by_start, slot_time, duration)
        if chain is None:
            prometheus_metrics.record_slot_reservation("taken")
            self.logger.info(f"Slots for {duration} minutes from {label} are not all free")
            return False

        for slot in chain:
            if not self.slot_repository.reserve_slot(slot.id, appointment_id):
                prometheus_metrics.record_slot_reservation("taken")
                self.logger.info(f"Slot {slot.slot_date} {time_to_string(slot.start_time)} already taken")
                return False

        prometheus_metrics.record_slot_reservation("reserved")
        self.logger.info(f"Reserved {len(chain)} slot(s) from {label} for appointment {appointment_id}")
        return True

    @BaseService.measure_operation("release_slot")
    def release_slot(self, appointment_id: str) -> bool:
        """
        Return the appointment's slot to the free pool.

        Safe to call repeatedly; returns False when nothing was bound.
        """
        if not appointment_id:
            raise InvalidFieldException("appointment_id", appointment_id, "a non-empty identifier")
        with self.transaction():
            released = self.release_in_session(appointment_id)
        return released

    def release_in_session(self, appointment_id: str) -> bool:
        """Release inside the caller's transaction. Does NOT commit."""
        released = self.slot_repository.release_by_appointment(appointment_id)
        if released:
            self.logger.info(f"Released {released} slot(s) for appointment {appointment_id}")
        return released > 0

    # Suggestions

    @BaseService.measure_operation("get_suggested_times")
    def get_suggested_times(
        self,
        urgency: Optional[str] = None,
        preferred_date: Optional[DateInput] = None,
        duration_minutes: Optional[int] = None,
        issue_type: Optional[str] = None,
    ) -> List[TimeSlot]:
        """
        Policy-based shortlist of slots.

        - emergency: up to 3 slots from today and up to 3 from tomorrow
        - preferred_date: up to 5 slots from that date
        - otherwise: up to 2 slots from each of the next 3 available dates, 6 max

        Only slots whose following back-to-back free slots cover the requested
        duration are offered.
        """
        duration = self._validate_duration(duration_minutes)
        if issue_type:
            self.logger.debug(f"Suggesting times for issue type {issue_type}")

        if urgency == "emergency":
            today = get_business_today()
            tomorrow = today + timedelta(days=1)
            return self._suggest_from_dates([today, tomorrow], EMERGENCY_SLOTS_PER_DAY, duration)

        if preferred_date:
            target = parse_date(preferred_date, "preferred_date")
            if target < get_business_today():
                return []
            return self._suggest_from_dates([target], PREFERRED_DATE_SLOT_LIMIT, duration)

        next_dates = self.get_next_available_dates(SUGGESTION_DATES, include_slots=False)
        dates = [date.fromisoformat(day.date) for day in next_dates]
        return self._suggest_from_dates(dates, SUGGESTION_SLOTS_PER_DATE, duration)[:MAX_SUGGESTIONS]

    # Helpers

    def _suggest_from_dates(self, dates: Sequence[date], per_date: int, duration: int) -> List[TimeSlot]:
        if not dates:
            return []
        windows = self.generation_service.ensure_slots(min(dates), max(dates))
        open_dates = [d for d in dates if windows[d].is_open]
        slots_by_date = self.slot_repository.get_slots_for_dates(open_dates, available_only=True)

        suggestions: List[TimeSlot] = []
        for target in open_dates:
            free = slots_by_date.get(target, [])
            by_start = {slot.start_time: slot for slot in free}
            picked = [slot for slot in free if covers_duration(by_start, slot.start_time, duration)]
            suggestions.extend(slot_to_schema(slot) for slot in picked[:per_date])
        return suggestions

    def _calendar_days(self, start: date, end: date, include_slots: bool) -> List[CalendarDay]:
        today = get_business_today()
        windows = self.generation_service.ensure_slots(start, end)
        free_counts = self.slot_repository.count_slots_by_date(start, end, available_only=True)
        specials = self.special_date_repository.get_map_for_range(start, end)

        slots_by_date: Dict[date, List[AppointmentSlot]] = {}
        if include_slots:
            open_dates = [d for d, w in windows.items() if w.is_open]
            slots_by_date = self.slot_repository.get_slots_for_dates(open_dates, available_only=True)

        days = []
        for target in date_range(start, end):
            window = windows[target]
            count = free_counts.get(target, 0) if window.is_open else 0
            special = specials.get(target)
            day = self._calendar_day(target, window, count, today, special.name if special else None)
            if include_slots:
                day.slots = [slot_to_schema(slot) for slot in slots_by_date.get(target, [])]
            days.append(day)
        return days

    @staticmethod
    def _calendar_day(
        target: date,
        window: OperatingWindow,
        free_count: int,
        today: date,
        special_name: Optional[str] = None,
    ) -> CalendarDay:
        is_past = target < today
        return CalendarDay(
            date=target.isoformat(),
            day_of_week=day_of_week(target),
            is_today=target == today,
            is_past=is_past,
            is_open=window.is_open,
            is_available=window.is_open and free_count > 0 and not is_past,
            available_slots=free_count,
            special_date=_special_info(window, special_name),
        )

    @staticmethod
    def _validate_duration(duration_minutes: Optional[int]) -> int:
        duration = settings.slot_duration_minutes if duration_minutes is None else duration_minutes
        if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
            raise InvalidFieldException("duration", duration_minutes, "a positive number of minutes")
        return duration
