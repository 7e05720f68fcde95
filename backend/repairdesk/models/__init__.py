"""
Database models for the RepairDesk scheduling backend.

The models are organized by functionality:
- Schedule configuration (weekly business hours, special dates)
- Generated appointment slots
- Appointments
"""

from .appointment import Appointment, AppointmentSource, AppointmentStatus, AppointmentUrgency
from .appointment_slot import AppointmentSlot
from .business_hours import BusinessHours
from .special_date import SpecialDate, SpecialDateType

__all__ = [
    "Appointment",
    "AppointmentSlot",
    "AppointmentSource",
    "AppointmentStatus",
    "AppointmentUrgency",
    "BusinessHours",
    "SpecialDate",
    "SpecialDateType",
]
