# backend/repairdesk/schemas/appointment.py
"""Appointment request/response schemas."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Literal, Optional

from pydantic import Field

from ..core.constants import MAX_NAME_LENGTH, MAX_REASON_LENGTH, MAX_SLOT_DURATION
from ..utils.time_helpers import time_to_string
from ._strict_base import StrictModel, StrictRequestModel

if TYPE_CHECKING:
    from ..models.appointment import Appointment


class AppointmentCreate(StrictRequestModel):
    """Public booking request for one slot."""

    customer_name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    customer_email: Optional[str] = Field(default=None, max_length=255)
    customer_phone: Optional[str] = Field(default=None, max_length=50)
    appointment_date: str = Field(description="YYYY-MM-DD")
    appointment_time: str = Field(description="HH:MM or HH:MM:SS")
    duration_minutes: Optional[int] = Field(default=None, gt=0, le=MAX_SLOT_DURATION)
    issues: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    notes: Optional[str] = None
    urgency: Literal["walk-in", "scheduled", "emergency"] = "scheduled"
    source: Literal["website", "phone", "walk-in", "email"] = "website"


class AppointmentCancel(StrictRequestModel):
    reason: Optional[str] = Field(default=None, max_length=MAX_REASON_LENGTH)


class AppointmentReschedule(StrictRequestModel):
    appointment_date: str
    appointment_time: str


class AppointmentResponse(StrictModel):
    id: str
    appointment_number: str
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    scheduled_date: str
    scheduled_time: str
    duration_minutes: int
    issues: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    notes: Optional[str] = None
    urgency: str
    source: str
    status: str
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, appointment: "Appointment") -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            appointment_number=appointment.appointment_number,
            customer_name=appointment.customer_name,
            customer_email=appointment.customer_email,
            customer_phone=appointment.customer_phone,
            scheduled_date=appointment.scheduled_date.isoformat(),
            scheduled_time=time_to_string(appointment.scheduled_time),
            duration_minutes=appointment.duration_minutes,
            issues=list(appointment.issues or []),
            description=appointment.description,
            notes=appointment.notes,
            urgency=appointment.urgency,
            source=appointment.source,
            status=appointment.status,
            cancellation_reason=appointment.cancellation_reason,
            created_at=appointment.created_at,
            cancelled_at=appointment.cancelled_at,
        )
