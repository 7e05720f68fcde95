# backend/repairdesk/models/appointment_slot.py
"""
Persisted bookable slots.

Slots are generated lazily per date from the effective operating window and
are unique per (slot_date, start_time), which makes repeated or concurrent
generation collapse into a no-op. Reservation flips is_available to False and
links the appointment; release reverses it. Rows are never deleted while
reserved.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class AppointmentSlot(Base):
    """A fixed-duration bookable interval on one date."""

    __tablename__ = "appointment_slots"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    slot_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    appointment_id = Column(
        String(26), ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    appointment = relationship("Appointment", back_populates="slots")

    __table_args__ = (
        UniqueConstraint("slot_date", "start_time", name="uq_appointment_slots_date_start"),
        Index("idx_appointment_slots_date_available", "slot_date", "is_available"),
        Index("idx_appointment_slots_appointment", "appointment_id"),
    )

    def __repr__(self) -> str:
        state = "free" if self.is_available else f"reserved:{self.appointment_id}"
        return f"<AppointmentSlot {self.slot_date} {self.start_time}-{self.end_time} {state}>"
