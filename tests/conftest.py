"""
Pytest configuration: make sure `import docket` works regardless of
where pytest is invoked.

It prepends the project root (one directory above *tests/*) to
``sys.path`` **before** any tests are collected, and provides the
shared clock / holiday fixtures.
"""

import sys
from datetime import date, datetime
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def holidays():
    """Monday 30 June 2025 treated as a holiday."""
    return frozenset({date(2025, 6, 30)})


@pytest.fixture
def friday():
    """Friday 27 June 2025, 09:00."""
    return datetime(2025, 6, 27, 9, 0)


@pytest.fixture
def monday():
    """Monday 3 March 2025, 09:00 (no holidays nearby)."""
    return datetime(2025, 3, 3, 9, 0)
