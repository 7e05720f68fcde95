# backend/repairdesk/services/slot_generation_service.py
"""
Slot Generation Service for RepairDesk

Turns operating windows into persisted slot rows.

Three entry points:
- ensure_slots() is the lazy path used before every availability read or
  reservation. It resolves a whole date range with a fixed number of queries
  (hours, special dates, dates already generated, one bulk insert-if-absent)
  and never regenerates a date that already has rows.
- generate_slots() is the admin bulk path with per-day reporting and an
  optional force mode that rebuilds the free slots of a date.
- refresh_dates() rebuilds the free slots of already-generated dates after a
  business-hours or special-date change; reserved slots are left untouched.
"""

from datetime import date, timedelta
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set

from sqlalchemy.orm import Session
import ulid

from ..core.config import settings
from ..core.constants import (
    DEFAULT_GENERATION_DAYS,
    MAX_GENERATION_SLOT_DURATION,
    MIN_GENERATION_SLOT_DURATION,
)
from ..core.exceptions import InvalidFieldException, ValidationException
from ..core.timezone_utils import get_business_today
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.appointment_slot_repository import AppointmentSlotRepository
from ..repositories.business_hours_repository import BusinessHoursRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.special_date_repository import SpecialDateRepository
from ..schemas.slot_generation import (
    GeneratedDay,
    GenerationStatus,
    GenerationStatusDay,
    SlotGenerationResult,
    SlotGenerationSummary,
)
from ..utils.time_helpers import date_range, day_of_week, parse_date
from .base import BaseService
from .slot_generator import OperatingWindow, TimeRange, generate_time_slots, resolve_operating_window

logger = logging.getLogger(__name__)


def build_slot_rows(
    window: OperatingWindow,
    duration_minutes: int,
    occupied: Sequence[TimeRange] = (),
) -> List[Dict]:
    """
    Insert payloads for one date's generated slots.

    Slots overlapping an occupied range (kept reserved slots) are left out.
    """
    rows = []
    for slot in generate_time_slots(window, duration_minutes):
        if any(slot.overlaps(taken) for taken in occupied):
            continue
        rows.append(
            {
                "id": str(ulid.ULID()),
                "slot_date": window.target_date,
                "start_time": slot.start,
                "end_time": slot.end,
                "duration_minutes": duration_minutes,
                "is_available": True,
            }
        )
    return rows


class SlotGenerationService(BaseService):
    """Lazy, bulk and refresh generation of appointment slots."""

    def __init__(
        self,
        db: Session,
        slot_repository: Optional[AppointmentSlotRepository] = None,
        business_hours_repository: Optional[BusinessHoursRepository] = None,
        special_date_repository: Optional[SpecialDateRepository] = None,
        slot_duration: Optional[int] = None,
    ):
        super().__init__(db)
        self.slot_repository = slot_repository or RepositoryFactory.create_appointment_slot_repository(db)
        self.business_hours_repository = (
            business_hours_repository or RepositoryFactory.create_business_hours_repository(db)
        )
        self.special_date_repository = (
            special_date_repository or RepositoryFactory.create_special_date_repository(db)
        )
        self.slot_duration = slot_duration or settings.slot_duration_minutes

    # Window resolution

    def resolve_windows(self, start_date: date, end_date: date) -> Dict[date, OperatingWindow]:
        """
        Operating window for every date in [start_date, end_date].

        Two queries regardless of range length.
        """
        business_hours = self.business_hours_repository.get_week_map()
        special_dates = self.special_date_repository.get_map_for_range(start_date, end_date)
        return {
            target: resolve_operating_window(target, business_hours, special_dates.get(target))
            for target in date_range(start_date, end_date)
        }

    # Lazy generation

    def ensure_slots_in_session(self, start_date: date, end_date: date) -> Dict[date, OperatingWindow]:
        """
        Generate slots for open dates in the range that have none yet.

        Runs in the caller's transaction and does NOT commit.

        Returns:
            Operating window per date, so callers need not resolve them again
        """
        windows = self.resolve_windows(start_date, end_date)
        generated = self.slot_repository.get_dates_with_slots(start_date, end_date)

        rows: List[Dict] = []
        new_dates = 0
        for target, window in windows.items():
            if target in generated or not window.is_open:
                continue
            date_rows = build_slot_rows(window, self.slot_duration)
            if date_rows:
                new_dates += 1
                rows.extend(date_rows)

        if rows:
            self.slot_repository.insert_slots_if_absent(rows)
            self.logger.info(
                f"Generated {len(rows)} slots across {new_dates} dates between {start_date} and {end_date}"
            )
            prometheus_metrics.record_slots_generated("lazy", new_dates)
        return windows

    @BaseService.measure_operation("ensure_slots")
    def ensure_slots(self, start_date: date, end_date: Optional[date] = None) -> Dict[date, OperatingWindow]:
        """
        Make sure slots exist for every open date in the range, committing the result.

        Concurrent callers may both insert; the (slot_date, start_time) unique key
        turns the loser's rows into no-ops.
        """
        end_date = end_date or start_date
        with self.transaction():
            return self.ensure_slots_in_session(start_date, end_date)

    # Admin bulk generation

    @BaseService.measure_operation("generate_slots")
    def generate_slots(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        days_ahead: int = DEFAULT_GENERATION_DAYS,
        slot_duration: Optional[int] = None,
        force: bool = False,
    ) -> SlotGenerationResult:
        """
        Generate slots for a date range and report what happened per day.

        Args:
            start_date: First date (YYYY-MM-DD); defaults to today
            end_date: Last date (YYYY-MM-DD); defaults to start + days_ahead - 1
            days_ahead: Length of the default range
            slot_duration: Slot length in minutes; defaults to the configured duration
            force: Rebuild the free slots of dates that already have slots

        Returns:
            SlotGenerationResult with summary and per-day details

        Raises:
            ValidationException: If the range or duration is out of bounds
        """
        duration = self.slot_duration if slot_duration is None else slot_duration
        max_days = settings.max_generation_days

        if not 1 <= days_ahead <= max_days:
            raise InvalidFieldException("days_ahead", days_ahead, f"an integer between 1 and {max_days}")
        if not MIN_GENERATION_SLOT_DURATION <= duration <= MAX_GENERATION_SLOT_DURATION:
            raise InvalidFieldException(
                "slot_duration",
                duration,
                f"minutes between {MIN_GENERATION_SLOT_DURATION} and {MAX_GENERATION_SLOT_DURATION}",
            )

        start = parse_date(start_date, "start_date") if start_date else get_business_today()
        end = parse_date(end_date, "end_date") if end_date else start + timedelta(days=days_ahead - 1)
        if end < start:
            raise ValidationException(
                "end_date must not be before start_date",
                code="INVALID_DATE_RANGE",
                details={"start_date": start.isoformat(), "end_date": end.isoformat()},
            )
        if (end - start).days + 1 > max_days:
            raise ValidationException(
                f"Date range cannot exceed {max_days} days",
                code="INVALID_DATE_RANGE",
                details={"start_date": start.isoformat(), "end_date": end.isoformat()},
            )

        details: List[GeneratedDay] = []
        with self.transaction():
            windows = self.resolve_windows(start, end)
            existing_counts = self.slot_repository.count_slots_by_date(start, end, available_only=False)
            free_counts = self.slot_repository.count_slots_by_date(start, end, available_only=True)

            to_generate: List[OperatingWindow] = []
            for target, window in windows.items():
                iso = target.isoformat()
                has_slots = existing_counts.get(target, 0) > 0
                if not window.is_open:
                    details.append(GeneratedDay(date=iso, status="skipped", reason="closed"))
                elif has_slots and not force:
                    details.append(GeneratedDay(date=iso, status="skipped", reason="slots_exist"))
                else:
                    to_generate.append(window)

            forced_dates = [w.target_date for w in to_generate if existing_counts.get(w.target_date, 0) > 0]
            occupied = self._reserved_ranges(forced_dates)
            if forced_dates:
                deleted = self.slot_repository.delete_free_slots_for_dates(forced_dates)
                self.logger.info(f"Force regeneration removed {deleted} free slots on {len(forced_dates)} dates")

            rows: List[Dict] = []
            planned: Dict[date, int] = {}
            for window in to_generate:
                date_rows = build_slot_rows(window, duration, occupied.get(window.target_date, ()))
                planned[window.target_date] = len(date_rows)
                rows.extend(date_rows)
            self.slot_repository.insert_slots_if_absent(rows)

            after_counts = self.slot_repository.count_slots_by_date(start, end, available_only=False)
            for window in to_generate:
                target = window.target_date
                iso = target.isoformat()
                kept = existing_counts.get(target, 0) - free_counts.get(target, 0)
                created = max(after_counts.get(target, 0) - kept, 0)
                if planned[target] == 0 and kept == 0:
                    details.append(
                        GeneratedDay(
                            date=iso,
                            status="failed",
                            reason="operating window shorter than slot duration",
                        )
                    )
                else:
                    details.append(GeneratedDay(date=iso, status="generated", slots_created=created))

        details.sort(key=lambda d: d.date)
        summary = SlotGenerationSummary(
            total_days=len(details),
            successful=sum(1 for d in details if d.status == "generated"),
            failed=sum(1 for d in details if d.status == "failed"),
            skipped=sum(1 for d in details if d.status == "skipped"),
            slots_created=sum(d.slots_created for d in details),
        )
        prometheus_metrics.record_slots_generated("admin", summary.successful)
        self.logger.info(
            f"Slot generation {start} to {end}: {summary.successful} generated, "
            f"{summary.skipped} skipped, {summary.failed} failed, {summary.slots_created} slots"
        )
        return SlotGenerationResult(
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            slot_duration=duration,
            force=force,
            summary=summary,
            details=details,
        )

    @BaseService.measure_operation("get_generation_status")
    def get_generation_status(self, days: int = DEFAULT_GENERATION_DAYS) -> GenerationStatus:
        """Per-day overview of which upcoming dates are open and generated."""
        max_days = settings.max_generation_days
        if not 1 <= days <= max_days:
            raise InvalidFieldException("days", days, f"an integer between 1 and {max_days}")

        start = get_business_today()
        end = start + timedelta(days=days - 1)
        windows = self.resolve_windows(start, end)
        slot_counts = self.slot_repository.count_slots_by_date(start, end, available_only=False)
        free_counts = self.slot_repository.count_slots_by_date(start, end, available_only=True)

        entries = []
        for target, window in windows.items():
            slot_count = slot_counts.get(target, 0)
            entries.append(
                GenerationStatusDay(
                    date=target.isoformat(),
                    day_of_week=day_of_week(target),
                    is_open=window.is_open,
                    has_slots=slot_count > 0,
                    slot_count=slot_count,
                    available_count=free_counts.get(target, 0),
                    needs_generation=window.is_open and slot_count == 0,
                )
            )

        return GenerationStatus(
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            total_days=len(entries),
            open_days=sum(1 for e in entries if e.is_open),
            days_with_slots=sum(1 for e in entries if e.has_slots),
            days_needing_generation=sum(1 for e in entries if e.needs_generation),
            days=entries,
        )

    # Refresh after configuration changes

    def refresh_dates(self, dates: Iterable[date]) -> int:
        """
        Rebuild the free slots of already-generated dates from the current configuration.

        Past dates and dates with no slots are ignored. Runs in the caller's
        transaction and does NOT commit.

        Returns:
            Number of dates refreshed
        """
        today = get_business_today()
        candidates = sorted({d for d in dates if d >= today})
        if not candidates:
            return 0

        generated = self.slot_repository.get_dates_with_slots(candidates[0], candidates[-1])
        targets = [d for d in candidates if d in generated]
        if not targets:
            return 0

        occupied = self._reserved_ranges(targets)
        self.slot_repository.delete_free_slots_for_dates(targets)

        windows = self.resolve_windows(targets[0], targets[-1])
        rows: List[Dict] = []
        for target in targets:
            rows.extend(build_slot_rows(windows[target], self.slot_duration, occupied.get(target, ())))
        self.slot_repository.insert_slots_if_absent(rows)

        prometheus_metrics.record_slots_generated("refresh", len(targets))
        self.logger.info(f"Refreshed slots for {len(targets)} dates after configuration change")
        return len(targets)

    def generated_dates_from_today(self) -> Set[date]:
        """Dates from today onwards that already have slot rows."""
        return self.slot_repository.get_dates_with_slots(get_business_today())

    def _reserved_ranges(self, dates: Sequence[date]) -> Dict[date, List[TimeRange]]:
        reserved = self.slot_repository.get_slots_for_dates(dates, available_only=False)
        return {
            target: [TimeRange(slot.start_time, slot.end_time) for slot in slots if not slot.is_available]
            for target, slots in reserved.items()
        }
