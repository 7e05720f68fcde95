# backend/repairdesk/models/business_hours.py
"""
Weekly business hours for the shop.

One row per weekday (Sunday = 0 .. Saturday = 6). A row with is_active=False,
or a missing row, means the shop is closed that weekday unless a special_hours
override exists for the specific date.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Time
from sqlalchemy.sql import func
import ulid

from ..database import Base


class BusinessHours(Base):
    """Default open/close/break window for one weekday."""

    __tablename__ = "business_hours"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    day_of_week = Column(Integer, nullable=False, unique=True)
    open_time = Column(Time, nullable=False)
    close_time = Column(Time, nullable=False)
    break_start = Column(Time, nullable=True)
    break_end = Column(Time, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_business_hours_day_of_week"),
        CheckConstraint("open_time < close_time", name="ck_business_hours_window"),
    )

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"<BusinessHours day={self.day_of_week} {self.open_time}-{self.close_time} {state}>"
