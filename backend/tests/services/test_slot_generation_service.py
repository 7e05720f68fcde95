from datetime import date, time

import pytest

from repairdesk.core.exceptions import InvalidFieldException, ValidationException
from repairdesk.models.appointment_slot import AppointmentSlot
from repairdesk.models.special_date import SpecialDate
from repairdesk.services.availability_service import AvailabilityService
from repairdesk.services.slot_generation_service import SlotGenerationService, build_slot_rows
from repairdesk.services.slot_generator import OperatingWindow, TimeRange

TUESDAY = date(2030, 1, 8)


@pytest.fixture
def service(db, standard_week, fixed_today):
    return SlotGenerationService(db)


def _details_by_date(result):
    return {d.date: d for d in result.details}


def _slots(db, target):
    return (
        db.query(AppointmentSlot)
        .filter(AppointmentSlot.slot_date == target)
        .order_by(AppointmentSlot.start_time)
        .all()
    )


def test_build_slot_rows_skips_occupied_ranges():
    window = OperatingWindow(TUESDAY, True, time(9, 0), time(11, 0))
    rows = build_slot_rows(window, 30, occupied=[TimeRange(time(9, 30), time(10, 0))])

    assert [row["start_time"] for row in rows] == [time(9, 0), time(10, 0), time(10, 30)]
    assert all(row["is_available"] and row["slot_date"] == TUESDAY for row in rows)
    assert len({row["id"] for row in rows}) == 3


def test_generate_week_reports_each_day(service):
    result = service.generate_slots(start_date="2030-01-07", end_date="2030-01-13")

    assert result.summary.total_days == 7
    assert result.summary.successful == 6
    assert result.summary.skipped == 1
    assert result.summary.failed == 0
    assert result.summary.slots_created == 5 * 14 + 8

    details = _details_by_date(result)
    assert details["2030-01-13"].status == "skipped"
    assert details["2030-01-13"].reason == "closed"
    assert details["2030-01-12"].slots_created == 8
    assert [d.date for d in result.details] == sorted(details)


def test_second_run_skips_generated_days(service, db):
    service.generate_slots(start_date="2030-01-07", end_date="2030-01-13")
    result = service.generate_slots(start_date="2030-01-07", end_date="2030-01-13")

    assert result.summary.successful == 0
    assert result.summary.slots_created == 0
    assert _details_by_date(result)["2030-01-08"].reason == "slots_exist"
    assert len(_slots(db, TUESDAY)) == 14


def test_default_range_starts_today(service):
    result = service.generate_slots(days_ahead=3)

    assert (result.start_date, result.end_date) == ("2030-01-07", "2030-01-09")
    assert result.slot_duration == 30
    assert result.summary.successful == 3


def test_force_keeps_reserved_slots(service, db):
    service.generate_slots(start_date="2030-01-08", end_date="2030-01-08")
    availability = AvailabilityService(db, generation_service=service)
    assert availability.reserve_slot("2030-01-08", "10:00", "01APPOINTMENT0000000000001")

    result = service.generate_slots(start_date="2030-01-08", end_date="2030-01-08", force=True)

    day = _details_by_date(result)["2030-01-08"]
    assert day.status == "generated"
    assert day.slots_created == 13
    slots = _slots(db, TUESDAY)
    assert len(slots) == 14
    reserved = [s for s in slots if not s.is_available]
    assert [(s.start_time, s.appointment_id) for s in reserved] == [
        (time(10, 0), "01APPOINTMENT0000000000001")
    ]


def test_force_with_new_duration_works_around_reservations(service, db):
    service.generate_slots(start_date="2030-01-08", end_date="2030-01-08")
    AvailabilityService(db, generation_service=service).reserve_slot(
        "2030-01-08", "10:00", "01APPOINTMENT0000000000001"
    )

    result = service.generate_slots(
        start_date="2030-01-08", end_date="2030-01-08", slot_duration=60, force=True
    )

    assert result.summary.slots_created == 6
    starts = [(s.start_time, s.duration_minutes) for s in _slots(db, TUESDAY)]
    assert starts == [
        (time(9, 0), 60),
        (time(10, 0), 30),
        (time(11, 0), 60),
        (time(13, 0), 60),
        (time(14, 0), 60),
        (time(15, 0), 60),
        (time(16, 0), 60),
    ]


def test_window_shorter_than_slot_is_reported_failed(service, db):
    db.add(
        SpecialDate(
            date=date(2030, 1, 9), type="special_hours", open_time=time(10, 0), close_time=time(10, 20)
        )
    )
    db.commit()

    result = service.generate_slots(start_date="2030-01-09", end_date="2030-01-09")

    day = _details_by_date(result)["2030-01-09"]
    assert day.status == "failed"
    assert day.reason == "operating window shorter than slot duration"
    assert result.summary.failed == 1


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"days_ahead": 0}, "days_ahead"),
        ({"days_ahead": 91}, "days_ahead"),
        ({"slot_duration": 10}, "slot_duration"),
        ({"slot_duration": 121}, "slot_duration"),
        ({"start_date": "2030-13-01"}, "start_date"),
    ],
)
def test_invalid_parameters(service, kwargs, field):
    with pytest.raises(InvalidFieldException) as exc_info:
        service.generate_slots(**kwargs)
    assert exc_info.value.details["field"] == field


def test_invalid_ranges(service):
    with pytest.raises(ValidationException) as exc_info:
        service.generate_slots(start_date="2030-01-10", end_date="2030-01-09")
    assert exc_info.value.code == "INVALID_DATE_RANGE"

    with pytest.raises(ValidationException) as exc_info:
        service.generate_slots(start_date="2030-01-01", end_date="2030-06-01")
    assert exc_info.value.code == "INVALID_DATE_RANGE"


def test_ensure_slots_only_fills_missing_dates(service, db):
    service.ensure_slots(date(2030, 1, 7))
    windows = service.ensure_slots(date(2030, 1, 7), date(2030, 1, 9))

    assert set(windows) == {date(2030, 1, 7), date(2030, 1, 8), date(2030, 1, 9)}
    assert len(_slots(db, date(2030, 1, 7))) == 14
    assert len(_slots(db, date(2030, 1, 9))) == 14


def test_generation_status(service):
    service.ensure_slots(date(2030, 1, 7))

    status = service.get_generation_status(days=7)

    assert (status.start_date, status.end_date) == ("2030-01-07", "2030-01-13")
    assert status.total_days == 7
    assert status.open_days == 6
    assert status.days_with_slots == 1
    assert status.days_needing_generation == 5
    assert status.days[0].slot_count == 14
    assert status.days[0].available_count == 14
    assert status.days[6].is_open is False
    assert status.days[6].needs_generation is False


def test_generation_status_rejects_bad_window(service):
    with pytest.raises(InvalidFieldException):
        service.get_generation_status(days=0)
