"""
Timezone utilities for the RepairDesk scheduling backend.

All calendar decisions ("today", "past") are made in the shop's time zone.
"""

from datetime import date, datetime
from typing import Optional

import pytz

from .config import settings


def get_business_timezone(name: Optional[str] = None) -> pytz.BaseTzInfo:
    """
    Get the shop's timezone.

    Args:
        name: Optional override; defaults to settings.business_timezone

    Returns:
        pytz timezone object
    """
    return pytz.timezone(name or settings.business_timezone)


def get_business_now(name: Optional[str] = None) -> datetime:
    """Get the current datetime in the shop's timezone."""
    return datetime.now(get_business_timezone(name))


def get_business_today(name: Optional[str] = None) -> date:
    """Get 'today' in the shop's timezone."""
    return get_business_now(name).date()
