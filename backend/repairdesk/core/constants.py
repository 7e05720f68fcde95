"""Application-wide constants for the RepairDesk scheduling backend."""

from __future__ import annotations

BRAND_NAME = "RepairDesk"
API_VERSION = "1.0.0"

# Slot sizing (minutes)
DEFAULT_SLOT_DURATION = 30
MIN_SLOT_DURATION = 5
MAX_SLOT_DURATION = 240

# Bulk generation bounds (admin endpoint)
MIN_GENERATION_SLOT_DURATION = 15
MAX_GENERATION_SLOT_DURATION = 120
DEFAULT_GENERATION_DAYS = 30
MAX_GENERATION_DAYS = 90

# Forward scan for "next available dates"
NEXT_AVAILABLE_SCAN_DAYS = 60
DEFAULT_NEXT_AVAILABLE_LIMIT = 7

# Suggested times policy
EMERGENCY_SLOTS_PER_DAY = 3
PREFERRED_DATE_SLOT_LIMIT = 5
SUGGESTION_DATES = 3
SUGGESTION_SLOTS_PER_DATE = 2
MAX_SUGGESTIONS = 6

# Text constraints
MAX_NAME_LENGTH = 255
MAX_REASON_LENGTH = 500

# Day of week mapping (Sunday = 0)
DAYS_OF_WEEK = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
