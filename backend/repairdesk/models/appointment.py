# backend/repairdesk/models/appointment.py
"""
Appointment model.

Appointments store their scheduled date/time directly; the link to the
reserved slot lives on AppointmentSlot.appointment_id so a slot can be
released without touching the appointment row.
"""

from enum import Enum

from sqlalchemy import JSON, Column, Date, DateTime, Index, Integer, String, Text, Time
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class AppointmentStatus(str, Enum):
    """Appointment lifecycle statuses."""

    SCHEDULED = "scheduled"  # Default on creation
    CONFIRMED = "confirmed"
    ARRIVED = "arrived"
    NO_SHOW = "no_show"
    CANCELLED = "cancelled"
    CONVERTED = "converted"  # Turned into a repair ticket

    @classmethod
    def active(cls) -> tuple["AppointmentStatus", ...]:
        """Statuses that still hold a slot."""
        return (cls.SCHEDULED, cls.CONFIRMED)


class AppointmentUrgency(str, Enum):
    WALK_IN = "walk-in"
    SCHEDULED = "scheduled"
    EMERGENCY = "emergency"


class AppointmentSource(str, Enum):
    WEBSITE = "website"
    PHONE = "phone"
    WALK_IN = "walk-in"
    EMAIL = "email"


class Appointment(Base):
    """A customer's booked visit to the shop."""

    __tablename__ = "appointments"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    appointment_number = Column(String(32), nullable=False, unique=True)

    # Customer contact snapshot
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)

    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=30)

    issues = Column(JSON, nullable=True)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    urgency = Column(String(20), nullable=False, default=AppointmentUrgency.SCHEDULED.value)
    source = Column(String(20), nullable=False, default=AppointmentSource.WEBSITE.value)

    status = Column(String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value)
    cancellation_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    slots = relationship("AppointmentSlot", back_populates="appointment")

    __table_args__ = (Index("idx_appointments_status_date", "status", "scheduled_date"),)

    @property
    def is_active(self) -> bool:
        return self.status in {s.value for s in AppointmentStatus.active()}

    def __repr__(self) -> str:
        return (
            f"<Appointment {self.appointment_number} {self.scheduled_date} "
            f"{self.scheduled_time} {self.status}>"
        )
