"""
docket.settings
===============

Configuration settings for the Docket application.

Module-level constants cover the outer layers (database file, HTTP
server, logging) and are read straight from ``DOCKET_*`` environment
variables.  Engine policy (jurisdiction, holiday file, status thresholds)
lives on the pydantic :class:`Settings` model so it can also be loaded
from a ``.env`` file.  The engine itself never imports this module;
callers read it and pass the values in.
"""

from __future__ import annotations

import os
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import FrozenSet

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .holidays import DEFAULT_HOLIDAYS_FILE, load_holidays
from .models import StatusThresholds

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("DOCKET_DB_FILE", BASE_DIR / "docket.db")
DB_URL = os.environ.get("DOCKET_DB_URL", f"sqlite:///{DB_FILE}")
DB_ECHO = os.environ.get("DOCKET_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("DOCKET_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("DOCKET_API_PORT", "8000"))
API_DEBUG = os.environ.get("DOCKET_API_DEBUG", "False").lower() == "true"

# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("DOCKET_LOG_LEVEL", "INFO").upper()


# ---------------------------------------------------------------------------
# Pydantic settings model for engine policy
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Engine policy, loaded from ``DOCKET_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCKET_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    jurisdiction: str = Field("CL", description="Jurisdiction code of the holiday table")
    holidays_file: Path = Field(DEFAULT_HOLIDAYS_FILE, description="Versioned holiday JSON file")
    warning_threshold_days: int = Field(3, ge=0, description="Business days left that trigger 'warning'")
    critical_threshold_days: int = Field(1, ge=0, description="Business days left that trigger 'critical'")
    db_url: str = Field(DB_URL, description="SQLAlchemy URL of the snapshot store")

    @field_validator("critical_threshold_days")
    @classmethod
    def _critical_not_above_warning(cls, v: int, info):
        warning = info.data.get("warning_threshold_days")
        if warning is not None and v > warning:
            raise ValueError("critical_threshold_days cannot exceed warning_threshold_days")
        return v

    @property
    def thresholds(self) -> StatusThresholds:
        return StatusThresholds(
            warning_days=self.warning_threshold_days,
            critical_days=self.critical_threshold_days,
        )

    def holiday_set(self) -> FrozenSet[date]:
        return load_holidays(self.holidays_file)


@lru_cache
def get_holidays() -> FrozenSet[date]:
    """Holiday set of the configured jurisdiction, read once per process."""
    return settings.holiday_set()


# Initialize settings
settings = Settings()
