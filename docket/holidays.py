"""
docket.holidays
===============

Loader for the versioned, per-jurisdiction holiday table.

The table is plain JSON shipped as package data (``docket/data``) or
supplied by the deployment::

    {
      "jurisdiction": "CL",
      "version": "2026.1",
      "holidays": {"2025": [{"date": "2025-01-01", "name": "New Year's Day"}]}
    }

The engine never reads this file itself; callers load a holiday set once
at start-up and pass it into every calendar call.
"""

from __future__ import annotations

import json
import os
import datetime as dt
from datetime import date
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, Field

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_HOLIDAYS_FILE = DATA_DIR / "holidays_cl.json"


class HolidayEntry(BaseModel):
    date: dt.date
    name: str = ""


class HolidayTable(BaseModel):
    """Validated content of a holiday file."""
    jurisdiction: str
    version: str
    holidays: Dict[int, List[HolidayEntry]] = Field(default_factory=dict)

    @property
    def years(self) -> List[int]:
        return sorted(self.holidays)

    def holiday_set(self, years: Optional[Iterable[int]] = None) -> FrozenSet[date]:
        """Return the dates for *years* (all years when ``None``)."""
        wanted = self.years if years is None else list(years)
        return frozenset(
            entry.date
            for year in wanted
            for entry in self.holidays.get(year, [])
        )

    def name_of(self, day: date) -> Optional[str]:
        for entry in self.holidays.get(day.year, []):
            if entry.date == day:
                return entry.name
        return None


def load_holiday_table(path: str | os.PathLike = DEFAULT_HOLIDAYS_FILE) -> HolidayTable:
    """Read and validate a holiday JSON file."""
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    return HolidayTable.model_validate(raw)


def load_holidays(
    path: str | os.PathLike = DEFAULT_HOLIDAYS_FILE,
    years: Optional[Iterable[int]] = None,
) -> FrozenSet[date]:
    """Shortcut: file on disk -> immutable holiday set."""
    return load_holiday_table(path).holiday_set(years)


def holidays_from_strings(values: Iterable[str]) -> FrozenSet[date]:
    """Build a holiday set from ISO ``YYYY-MM-DD`` strings."""
    return frozenset(date.fromisoformat(v) for v in values)
