# backend/repairdesk/services/appointment_service.py
"""
Appointment Service for RepairDesk

Appointment lifecycle on top of slot reservation.

Creating, cancelling and rescheduling each run in a single transaction that
covers both the appointment row and its slot, so a lost reservation race
never leaves an appointment without a slot or a slot locked without an
appointment.
"""

from datetime import date, datetime, timezone
import logging
import secrets
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BusinessRuleException,
    InvalidFieldException,
    NotFoundException,
    SlotUnavailableException,
)
from ..core.timezone_utils import get_business_today
from ..models.appointment import Appointment, AppointmentStatus
from ..repositories.factory import RepositoryFactory
from ..schemas.appointment import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from ..utils.time_helpers import parse_date, parse_time, time_to_string
from .availability_service import AvailabilityService
from .base import BaseService

logger = logging.getLogger(__name__)

_NUMBER_ALPHABET = "0123456789ABCDEFGHJKLMNPQRSTUVWXYZ"


def generate_appointment_number(created_on: date) -> str:
    """APT-YYYYMMDD-XXXX with a random base-34 suffix."""
    suffix = "".join(secrets.choice(_NUMBER_ALPHABET) for _ in range(4))
    return f"APT-{created_on:%Y%m%d}-{suffix}"


class AppointmentService(BaseService):
    """Create, cancel, reschedule and look up appointments."""

    def __init__(self, db: Session, availability_service: Optional[AvailabilityService] = None):
        super().__init__(db)
        self.appointment_repository = RepositoryFactory.create_appointment_repository(db)
        self.availability_service = availability_service or AvailabilityService(db)

    @BaseService.measure_operation("create_appointment")
    def create_appointment(self, data: AppointmentCreate) -> AppointmentResponse:
        """
        Book an appointment into the slots covering its duration from data.appointment_date/time.

        Raises:
            ValidationException: Unparseable date/time
            SlotUnavailableException: The slot is closed, missing, or taken
        """
        slot_date = parse_date(data.appointment_date, "appointment_date")
        slot_time = parse_time(data.appointment_time, "appointment_time")
        duration = data.duration_minutes or self.availability_service.generation_service.slot_duration

        if not self.availability_service.is_slot_available(slot_date, slot_time, duration):
            raise SlotUnavailableException(slot_date.isoformat(), time_to_string(slot_time))

        number = self._unique_number()
        with self.transaction():
            appointment = self.appointment_repository.create(
                appointment_number=number,
                customer_name=data.customer_name,
                customer_email=data.customer_email,
                customer_phone=data.customer_phone,
                scheduled_date=slot_date,
                scheduled_time=slot_time,
                duration_minutes=duration,
                issues=list(data.issues),
                description=data.description,
                notes=data.notes,
                urgency=data.urgency,
                source=data.source,
                status=AppointmentStatus.SCHEDULED.value,
            )
            if not self.availability_service.reserve_in_session(
                slot_date, slot_time, appointment.id, duration
            ):
                # Raising rolls back the appointment insert and any slots already claimed
                raise SlotUnavailableException(slot_date.isoformat(), time_to_string(slot_time))

        self.logger.info(
            f"Appointment {appointment.appointment_number} booked for {slot_date} {time_to_string(slot_time)}"
        )
        return AppointmentResponse.from_model(appointment)

    @BaseService.measure_operation("cancel_appointment")
    def cancel_appointment(self, appointment_id: str, reason: Optional[str] = None) -> AppointmentResponse:
        """
        Cancel an appointment and release its slots.

        Cancelling an already cancelled appointment returns it unchanged.

        Raises:
            NotFoundException: Unknown appointment
            BusinessRuleException: Appointment is past the cancellable states
        """
        appointment = self._get_or_404(appointment_id)
        if appointment.status == AppointmentStatus.CANCELLED.value:
            return AppointmentResponse.from_model(appointment)
        self._require_active(appointment, "cancelled")

        with self.transaction():
            appointment.status = AppointmentStatus.CANCELLED.value
            appointment.cancellation_reason = reason
            appointment.cancelled_at = datetime.now(timezone.utc)
            self.appointment_repository.flush()
            self.availability_service.release_in_session(appointment.id)

        self.logger.info(f"Appointment {appointment.appointment_number} cancelled")
        return AppointmentResponse.from_model(appointment)

    @BaseService.measure_operation("reschedule_appointment")
    def reschedule_appointment(self, appointment_id: str, data: AppointmentReschedule) -> AppointmentResponse:
        """
        Move an appointment to another slot.

        The old slots are released and the new ones reserved in one transaction;
        if any new slot is taken nothing changes.

        Raises:
            NotFoundException: Unknown appointment
            BusinessRuleException: Appointment cannot be rescheduled
            SlotUnavailableException: The new slot is not bookable
        """
        appointment = self._get_or_404(appointment_id)
        self._require_active(appointment, "rescheduled")

        new_date = parse_date(data.appointment_date, "appointment_date")
        new_time = parse_time(data.appointment_time, "appointment_time")
        if new_date == appointment.scheduled_date and new_time == appointment.scheduled_time:
            return AppointmentResponse.from_model(appointment)

        # Old slots are released first, so the new window may overlap them
        with self.transaction():
            self.availability_service.release_in_session(appointment.id)
            if not self.availability_service.reserve_in_session(
                new_date, new_time, appointment.id, appointment.duration_minutes
            ):
                raise SlotUnavailableException(new_date.isoformat(), time_to_string(new_time))
            appointment.scheduled_date = new_date
            appointment.scheduled_time = new_time
            self.appointment_repository.flush()

        self.logger.info(
            f"Appointment {appointment.appointment_number} moved to {new_date} {time_to_string(new_time)}"
        )
        return AppointmentResponse.from_model(appointment)

    @BaseService.measure_operation("get_appointment")
    def get_appointment(self, appointment_id: str) -> AppointmentResponse:
        return AppointmentResponse.from_model(self._get_or_404(appointment_id))

    @BaseService.measure_operation("list_appointments")
    def list_appointments(
        self,
        scheduled_date: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[AppointmentResponse]:
        target = parse_date(scheduled_date, "date") if scheduled_date else None
        if status is not None and status not in {s.value for s in AppointmentStatus}:
            raise InvalidFieldException("status", status, "one of " + ", ".join(s.value for s in AppointmentStatus))
        rows = self.appointment_repository.list_appointments(target, status, skip=skip, limit=limit)
        return [AppointmentResponse.from_model(row) for row in rows]

    # Helpers

    def _get_or_404(self, appointment_id: str) -> Appointment:
        appointment = self.appointment_repository.get_by_id(appointment_id)
        if appointment is None:
            raise NotFoundException(
                "Appointment not found",
                code="APPOINTMENT_NOT_FOUND",
                details={"appointment_id": appointment_id},
            )
        return appointment

    @staticmethod
    def _require_active(appointment: Appointment, action: str) -> None:
        if not appointment.is_active:
            raise BusinessRuleException(
                f"Appointment in status '{appointment.status}' cannot be {action}",
                code="APPOINTMENT_NOT_ACTIVE",
                details={"status": appointment.status},
            )

    def _unique_number(self) -> str:
        for _ in range(5):
            number = generate_appointment_number(get_business_today())
            if self.appointment_repository.get_by_number(number) is None:
                return number
        raise BusinessRuleException(
            "Could not allocate an appointment number", code="APPOINTMENT_NUMBER_EXHAUSTED"
        )
