"""
api.deps
========

FastAPI dependency providers.

`get_store` returns a DB-backed :class:`~docket.case_store_db.DBCaseStore`
so every request talks to the persistent SQLite store.  The clock, holiday
set and status thresholds are dependencies too, which lets tests pin
"now" with ``app.dependency_overrides``.
"""

from datetime import date, datetime
from functools import lru_cache
from typing import FrozenSet

from fastapi import Depends

from docket.case_store_db import DBCaseStore
from docket.db import create_all
from docket.models import StatusThresholds
from docket.settings import get_holidays, settings


@lru_cache
def get_store() -> DBCaseStore:
    """Singleton DB-backed case store (persists across requests)."""
    create_all()
    return DBCaseStore()


@lru_cache
def get_settings():
    """Return application settings."""
    return settings


def get_holiday_set() -> FrozenSet[date]:
    """Holiday set of the configured jurisdiction."""
    return get_holidays()


def get_thresholds(settings=Depends(get_settings)) -> StatusThresholds:
    return settings.thresholds


def get_clock() -> datetime:
    """Current wall-clock time; the only place the API reads it."""
    return datetime.now()
