from datetime import date, time

import pytest

from repairdesk.core.exceptions import (
    BusinessRuleException,
    InvalidFieldException,
    NotFoundException,
    SpecialDateExistsException,
)
from repairdesk.models.appointment_slot import AppointmentSlot
from repairdesk.schemas.schedule_config import BusinessHoursUpdate, SpecialDateCreate
from repairdesk.services.availability_service import AvailabilityService
from repairdesk.services.schedule_config_service import ScheduleConfigService

APPOINTMENT_ID = "01APPOINTMENT0000000000001"


@pytest.fixture
def availability(db, standard_week, fixed_today):
    return AvailabilityService(db)


@pytest.fixture
def service(db, standard_week, fixed_today):
    return ScheduleConfigService(db)


def _slots(db, iso_date):
    return (
        db.query(AppointmentSlot)
        .filter(AppointmentSlot.slot_date == date.fromisoformat(iso_date))
        .order_by(AppointmentSlot.start_time)
        .all()
    )


def _free_starts(db, iso_date):
    return [s.start_time for s in _slots(db, iso_date) if s.is_available]


class TestBusinessHours:
    def test_list_is_ordered_sunday_first(self, service):
        rows = service.list_business_hours()

        assert [r.day_of_week for r in rows] == list(range(7))
        assert rows[0].day_name == "Sunday"
        assert rows[0].is_active is False
        assert (rows[1].open_time, rows[1].break_start) == ("09:00", "12:00")

    def test_get_single_day(self, service):
        monday = service.get_business_hours(1)
        assert monday.day_name == "Monday"
        assert monday.close_time == "17:00"

    def test_missing_day_is_not_found(self, db, fixed_today):
        with pytest.raises(NotFoundException) as exc_info:
            ScheduleConfigService(db).get_business_hours(3)
        assert exc_info.value.code == "BUSINESS_HOURS_NOT_FOUND"

    def test_update_creates_missing_row(self, db, fixed_today):
        service = ScheduleConfigService(db)
        saved = service.update_business_hours(3, BusinessHoursUpdate(open_time="08:00", close_time="12:00"))

        assert saved.day_name == "Wednesday"
        assert service.get_business_hours(3).open_time == "08:00"

    def test_update_refreshes_generated_dates_and_keeps_reservations(self, service, availability, db):
        availability.get_date_availability("2030-01-08")
        availability.get_date_availability("2030-01-15")
        assert availability.reserve_slot("2030-01-08", "09:00", APPOINTMENT_ID)

        service.update_business_hours(
            2, BusinessHoursUpdate(open_time="10:00", close_time="15:00", is_active=True)
        )

        kept = [s for s in _slots(db, "2030-01-08") if not s.is_available]
        assert [(s.start_time, s.appointment_id) for s in kept] == [(time(9, 0), APPOINTMENT_ID)]
        free = _free_starts(db, "2030-01-08")
        assert free[0] == time(10, 0)
        assert free[-1] == time(14, 30)
        assert time(12, 0) in free
        assert len(free) == 10
        assert len(_free_starts(db, "2030-01-15")) == 10

    def test_refresh_ignores_past_dates(self, service, availability, db):
        availability.get_date_availability("2030-01-01")

        service.update_business_hours(2, BusinessHoursUpdate(open_time="10:00", close_time="11:00"))

        assert len(_slots(db, "2030-01-01")) == 14

    def test_deactivating_a_day_clears_free_slots(self, service, availability, db):
        availability.get_date_availability("2030-01-12")
        availability.reserve_slot("2030-01-12", "11:00", APPOINTMENT_ID)

        service.update_business_hours(
            6, BusinessHoursUpdate(open_time="10:00", close_time="14:00", is_active=False)
        )

        remaining = _slots(db, "2030-01-12")
        assert [(s.start_time, s.is_available) for s in remaining] == [(time(11, 0), False)]
        assert availability.get_date_availability("2030-01-12").is_open is False

    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"open_time": "17:00", "close_time": "09:00"}, "INVALID_HOURS"),
            ({"open_time": "09:00", "close_time": "09:00"}, "INVALID_HOURS"),
            ({"open_time": "09:00", "close_time": "17:00", "break_start": "12:00"}, "INVALID_BREAK"),
            (
                {"open_time": "09:00", "close_time": "17:00", "break_start": "08:00", "break_end": "09:30"},
                "INVALID_BREAK",
            ),
            (
                {"open_time": "09:00", "close_time": "17:00", "break_start": "13:00", "break_end": "12:00"},
                "INVALID_BREAK",
            ),
        ],
    )
    def test_invalid_hours_are_rejected(self, service, payload, code):
        with pytest.raises(BusinessRuleException) as exc_info:
            service.update_business_hours(1, BusinessHoursUpdate(**payload))
        assert exc_info.value.code == code

    def test_invalid_day_and_time_are_rejected(self, service):
        with pytest.raises(InvalidFieldException):
            service.update_business_hours(7, BusinessHoursUpdate(open_time="09:00", close_time="17:00"))
        with pytest.raises(InvalidFieldException):
            service.update_business_hours(1, BusinessHoursUpdate(open_time="9am", close_time="17:00"))


class TestSpecialDates:
    def test_holiday_clears_free_slots_but_keeps_reservations(self, service, availability, db):
        availability.get_date_availability("2030-01-09")
        availability.reserve_slot("2030-01-09", "11:00", APPOINTMENT_ID)

        created = service.add_special_date(SpecialDateCreate(date="2030-01-09", type="holiday", name="Founders Day"))

        assert created.type == "holiday"
        assert created.open_time is None
        remaining = _slots(db, "2030-01-09")
        assert [(s.start_time, s.appointment_id) for s in remaining] == [(time(11, 0), APPOINTMENT_ID)]
        day = availability.get_date_availability("2030-01-09")
        assert day.is_open is False
        assert day.slots == []

    def test_special_hours_regenerate_generated_date(self, service, availability, db):
        availability.get_date_availability("2030-01-10")

        service.add_special_date(
            SpecialDateCreate(date="2030-01-10", type="special_hours", open_time="13:00", close_time="15:00")
        )

        assert _free_starts(db, "2030-01-10") == [time(13, 0), time(13, 30), time(14, 0), time(14, 30)]

    def test_duplicate_date_conflicts(self, service):
        service.add_special_date(SpecialDateCreate(date="2030-02-14", type="closure"))
        with pytest.raises(SpecialDateExistsException) as exc_info:
            service.add_special_date(SpecialDateCreate(date="2030-02-14", type="holiday"))
        assert exc_info.value.code == "SPECIAL_DATE_EXISTS"

    def test_closure_with_hours_is_rejected(self, service):
        with pytest.raises(BusinessRuleException) as exc_info:
            service.add_special_date(
                SpecialDateCreate(date="2030-02-14", type="holiday", open_time="10:00", close_time="12:00")
            )
        assert exc_info.value.code == "INVALID_SPECIAL_DATE"

    def test_special_hours_need_a_window(self, service):
        with pytest.raises(BusinessRuleException) as exc_info:
            service.add_special_date(SpecialDateCreate(date="2030-02-14", type="special_hours", open_time="10:00"))
        assert exc_info.value.code == "INVALID_SPECIAL_DATE"

        with pytest.raises(BusinessRuleException) as exc_info:
            service.add_special_date(
                SpecialDateCreate(date="2030-02-14", type="special_hours", open_time="12:00", close_time="10:00")
            )
        assert exc_info.value.code == "INVALID_HOURS"

    def test_remove_restores_weekday_hours(self, service, availability, db):
        availability.get_date_availability("2030-01-09")
        availability.reserve_slot("2030-01-09", "11:00", APPOINTMENT_ID)
        service.add_special_date(SpecialDateCreate(date="2030-01-09", type="closure"))

        assert service.remove_special_date("2030-01-09") is True

        assert len(_slots(db, "2030-01-09")) == 14
        assert len(_free_starts(db, "2030-01-09")) == 13
        assert availability.get_date_availability("2030-01-09").available_slots == 13

    def test_remove_ungenerated_date_falls_back_to_lazy_generation(self, service, availability):
        service.add_special_date(SpecialDateCreate(date="2030-01-16", type="holiday"))
        assert availability.get_date_availability("2030-01-16").is_open is False

        assert service.remove_special_date("2030-01-16") is True
        assert availability.get_date_availability("2030-01-16").available_slots == 14

    def test_remove_missing_date_returns_false(self, service):
        assert service.remove_special_date("2030-03-01") is False

    def test_list_in_range(self, service):
        for iso in ("2030-01-20", "2030-02-10", "2030-03-05"):
            service.add_special_date(SpecialDateCreate(date=iso, type="closure"))

        listed = service.list_special_dates("2030-02-01", "2030-03-31")
        assert [s.date for s in listed] == ["2030-02-10", "2030-03-05"]
        assert len(service.list_special_dates()) == 3
