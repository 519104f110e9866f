"""
tests/test_seed.py
==================

The demo data in seed_database.py walks legal routes only.
"""

from datetime import datetime

from docket.models import DeadlineStatus, Stage
from seed_database import SAMPLE_ROUTES, build_demo_cases


def test_demo_cases_build():
    cases = build_demo_cases(datetime(2025, 6, 2, 9))
    assert [c.case_id for c in cases] == [r[0] for r in SAMPLE_ROUTES]
    assert cases[3].current_stage is Stage.CLOSED

    statuses = {d.status for c in cases for d in c.deadlines}
    assert DeadlineStatus.COMPLETED in statuses
    assert DeadlineStatus.EXPIRED in statuses
    assert cases[0].deadline("case-001:regulator_initial_notice").notifications_sent
