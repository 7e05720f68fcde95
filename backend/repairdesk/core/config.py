# backend/repairdesk/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

from .constants import (
    DEFAULT_NEXT_AVAILABLE_LIMIT,
    DEFAULT_SLOT_DURATION,
    MAX_GENERATION_DAYS,
    MAX_SLOT_DURATION,
    MIN_SLOT_DURATION,
    NEXT_AVAILABLE_SCAN_DAYS,
)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Deployment environment name",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    database_url: str = Field(
        default="sqlite:///./repairdesk.db",
        description="SQLAlchemy database URL",
    )
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=10, ge=0)

    # Scheduling
    business_timezone: str = Field(
        default="America/New_York",
        description="IANA time zone used to decide what 'today' means for the shop",
    )
    slot_duration_minutes: int = Field(
        default=DEFAULT_SLOT_DURATION,
        description="Length of a generated appointment slot",
    )
    next_available_scan_days: int = Field(
        default=NEXT_AVAILABLE_SCAN_DAYS,
        ge=1,
        le=NEXT_AVAILABLE_SCAN_DAYS,
        description="How far ahead next-available searches may look",
    )
    default_next_available_limit: int = Field(default=DEFAULT_NEXT_AVAILABLE_LIMIT, ge=1)
    max_generation_days: int = Field(default=MAX_GENERATION_DAYS, ge=1)

    # Admin API
    admin_api_token: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token for admin schedule endpoints (empty disables them)",
    )

    slow_operation_threshold_seconds: float = Field(default=1.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("business_timezone")
    @classmethod
    def validate_business_timezone(cls, value: str) -> str:
        """Reject zone names pytz does not know about."""
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown time zone '{value}'")
        return value

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_slot_duration(cls, value: int) -> int:
        if not MIN_SLOT_DURATION <= value <= MAX_SLOT_DURATION:
            raise ValueError(
                f"slot_duration_minutes must be between {MIN_SLOT_DURATION} and {MAX_SLOT_DURATION}"
            )
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
