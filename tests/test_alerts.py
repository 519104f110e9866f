"""
tests/test_alerts.py
====================

Reminder schedule in docket.alerts
"""

from datetime import date, datetime

import pytest

from docket import deadlines as dl
from docket.alerts import AlertLevel, alert_schedule
from docket.models import DayCountPolicy, DeadlineTemplate, Stage

TWELVE_DAYS = DeadlineTemplate(
    key="report",
    name="Report",
    description="",
    days=12,
    day_count_policy=DayCountPolicy.BUSINESS,
    associated_stage=Stage.REPORT_DRAFTING,
)


@pytest.fixture
def deadline(monday):
    """Starts Mon 3 Mar 2025, due Wed 19 Mar."""
    d = dl.initialize(TWELVE_DAYS, monday, deadline_id="r")
    assert d.end_date == date(2025, 3, 19)
    return d


def test_full_schedule(deadline, monday):
    alerts = alert_schedule(deadline, monday)
    assert [a.level for a in alerts] == [AlertLevel.INFO, AlertLevel.WARNING, AlertLevel.URGENT, AlertLevel.CRITICAL]
    assert [a.trigger_date for a in alerts] == [
        date(2025, 3, 5), date(2025, 3, 12), date(2025, 3, 17), date(2025, 3, 19),
    ]
    assert all(a.deadline_id == "r" for a in alerts)


def test_passed_lead_times_are_dropped(deadline):
    alerts = alert_schedule(deadline, datetime(2025, 3, 13, 9))
    assert [a.level for a in alerts] == [AlertLevel.URGENT, AlertLevel.CRITICAL]


def test_holidays_shift_trigger_dates(deadline, monday):
    alerts = alert_schedule(deadline, monday, frozenset({date(2025, 3, 18)}))
    urgent = next(a for a in alerts if a.level is AlertLevel.URGENT)
    assert urgent.trigger_date == date(2025, 3, 14)


def test_completed_and_expired_get_nothing(deadline, monday):
    assert alert_schedule(dl.complete(deadline, "hr", monday), monday) == ()
    late = datetime(2025, 3, 20)
    assert alert_schedule(dl.recompute_status(deadline, late), late) == ()
