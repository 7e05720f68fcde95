# backend/repairdesk/models/special_date.py
"""
Date-specific overrides of the weekly business hours.

Precedence when resolving a date's operating window:
special_hours > holiday/closure > weekday default.
"""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, Date, DateTime, String, Text, Time
from sqlalchemy.sql import func
import ulid

from ..database import Base


class SpecialDateType(str, Enum):
    """Kinds of date override."""

    HOLIDAY = "holiday"  # Closed all day
    CLOSURE = "closure"  # Closed all day
    SPECIAL_HOURS = "special_hours"  # Custom open/close window

    @property
    def closes_shop(self) -> bool:
        return self in (SpecialDateType.HOLIDAY, SpecialDateType.CLOSURE)


class SpecialDate(Base):
    """Holiday, closure, or custom hours for one calendar date."""

    __tablename__ = "special_dates"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    date = Column(Date, nullable=False, unique=True, index=True)
    type = Column(String(20), nullable=False)
    name = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    # Only populated for special_hours
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "type IN ('holiday', 'closure', 'special_hours')",
            name="ck_special_dates_type",
        ),
    )

    @property
    def date_type(self) -> SpecialDateType:
        return SpecialDateType(self.type)

    def __repr__(self) -> str:
        return f"<SpecialDate {self.date} {self.type} {self.name or ''}>"
