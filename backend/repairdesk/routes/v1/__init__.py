# backend/repairdesk/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
All new endpoints should be added here.
"""

from . import admin_schedule, admin_slots, appointments, availability, health, prometheus

__all__ = [
    "admin_schedule",
    "admin_slots",
    "appointments",
    "availability",
    "health",
    "prometheus",
]
