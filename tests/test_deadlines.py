"""
tests/test_deadlines.py
=======================

Single-deadline lifecycle in docket.deadlines
"""

from datetime import date, datetime

import pytest

from docket import deadlines as dl
from docket.errors import InvalidTransition, OutOfRangeInput
from docket.models import (
    DayCountPolicy,
    DeadlineStatus,
    DeadlineTemplate,
    NotificationChannel,
    Priority,
    Stage,
    StatusThresholds,
)

THREE_DAYS = DeadlineTemplate(
    key="notice",
    name="Notice",
    description="Send the notice",
    days=3,
    day_count_policy=DayCountPolicy.BUSINESS,
    associated_stage=Stage.RECEPTION,
    priority=Priority.HIGH,
    max_extension_days=10,
)


@pytest.fixture
def deadline(friday, holidays):
    """Starts Fri 27 Jun 2025, due Thu 3 Jul (Mon 30 Jun is a holiday)."""
    return dl.initialize(THREE_DAYS, friday, holidays, deadline_id="d-1")


# ---------------------------------------------------------------------------
# initialize / recompute
# ---------------------------------------------------------------------------
def test_initialize_copies_template(deadline, friday):
    assert deadline.id == "d-1"
    assert deadline.end_date == date(2025, 7, 3)
    assert deadline.start_date == friday
    assert deadline.days_remaining == 4
    assert deadline.status is DeadlineStatus.ON_TRACK
    assert deadline.template_key == "notice"
    assert deadline.priority is Priority.HIGH
    assert deadline.progress_percentage == 0
    assert deadline.notifications_sent == ()


def test_initialize_generates_id_when_missing(friday):
    a = dl.initialize(THREE_DAYS, friday)
    b = dl.initialize(THREE_DAYS, friday)
    assert a.id and a.id != b.id


@pytest.mark.parametrize("now, status, remaining", [
    (datetime(2025, 6, 27, 9), DeadlineStatus.ON_TRACK, 4),
    (datetime(2025, 7, 1, 9), DeadlineStatus.WARNING, 3),
    (datetime(2025, 7, 2, 9), DeadlineStatus.WARNING, 2),
    (datetime(2025, 7, 3, 9), DeadlineStatus.CRITICAL, 1),
    (datetime(2025, 7, 3, 23, 59), DeadlineStatus.CRITICAL, 1),
    (datetime(2025, 7, 4, 0, 1), DeadlineStatus.EXPIRED, -2),
])
def test_recompute_walks_the_time_states(deadline, holidays, now, status, remaining):
    d = dl.recompute_status(deadline, now, holidays)
    assert d.status is status
    assert d.days_remaining == remaining


def test_thresholds_are_configurable(deadline, friday, holidays):
    strict = StatusThresholds(warning_days=6, critical_days=4)
    assert dl.recompute_status(deadline, friday, holidays, strict).status is DeadlineStatus.CRITICAL


def test_recompute_is_idempotent(deadline, holidays):
    now = datetime(2025, 7, 1, 12)
    once = dl.recompute_status(deadline, now, holidays)
    assert dl.recompute_status(once, now, holidays) is once


def test_expired_stays_expired(deadline, holidays):
    late = dl.recompute_status(deadline, datetime(2025, 7, 10), holidays)
    assert late.status is DeadlineStatus.EXPIRED
    # even a clock that runs backwards does not revive it
    again = dl.recompute_status(late, datetime(2025, 6, 27), holidays)
    assert again.status is DeadlineStatus.EXPIRED


def test_recompute_does_not_mutate_input(deadline, holidays):
    dl.recompute_status(deadline, datetime(2025, 7, 10), holidays)
    assert deadline.status is DeadlineStatus.ON_TRACK


# ---------------------------------------------------------------------------
# complete
# ---------------------------------------------------------------------------
def test_complete_is_terminal(deadline, holidays):
    now = datetime(2025, 7, 1, 15)
    done = dl.complete(deadline, "hr", now)
    assert done.status is DeadlineStatus.COMPLETED
    assert done.progress_percentage == 100
    assert done.completed_by == "hr" and done.completed_date == now
    assert dl.recompute_status(done, datetime(2025, 8, 1), holidays) is done

    with pytest.raises(InvalidTransition):
        dl.complete(done, "hr", now)
    with pytest.raises(InvalidTransition):
        dl.extend(done, 2, "late", "boss", holidays)


def test_expired_deadline_can_still_be_completed(deadline, holidays):
    late = dl.recompute_status(deadline, datetime(2025, 7, 10), holidays)
    assert dl.complete(late, "hr", datetime(2025, 7, 10)).status is DeadlineStatus.COMPLETED


# ---------------------------------------------------------------------------
# extend
# ---------------------------------------------------------------------------
def test_extension_moves_end_and_keeps_first_original(deadline, holidays):
    first = dl.extend(deadline, 2, "witness unavailable", "legal", holidays)
    assert first.end_date == date(2025, 7, 7)
    assert first.original_end_date == date(2025, 7, 3)
    assert first.status is DeadlineStatus.EXTENDED
    assert first.extension_reason == "witness unavailable"
    assert first.extension_approved_by == "legal"
    assert first.is_extended

    second = dl.extend(first, 1, "more documents", "legal", holidays)
    assert second.end_date == date(2025, 7, 8)
    assert second.end_date > first.end_date
    assert second.original_end_date == date(2025, 7, 3)
    assert second.extension_days_total == 3


def test_extension_refreshes_days_remaining_when_given_now(deadline, friday, holidays):
    stale = dl.extend(deadline, 2, "reason", "legal", holidays)
    assert stale.days_remaining == deadline.days_remaining == 4
    fresh = dl.extend(deadline, 2, "reason", "legal", holidays, friday)
    # Fri 27 Jun, then Tue 1 Jul to Mon 7 Jul
    assert fresh.days_remaining == 6
    assert fresh.end_date == stale.end_date


def test_extended_deadline_is_reclassified_by_time(deadline, holidays):
    ext = dl.extend(deadline, 5, "reason", "legal", holidays)
    d = dl.recompute_status(ext, datetime(2025, 6, 27), holidays)
    assert d.status is DeadlineStatus.ON_TRACK


def test_extension_revives_expired_deadline(deadline, holidays):
    late = dl.recompute_status(deadline, datetime(2025, 7, 4), holidays)
    assert late.status is DeadlineStatus.EXPIRED
    ext = dl.extend(late, 5, "reason", "legal", holidays)
    assert dl.recompute_status(ext, datetime(2025, 7, 4), holidays).status is not DeadlineStatus.EXPIRED


@pytest.mark.parametrize("days", [0, -1])
def test_extension_needs_positive_days(deadline, holidays, days):
    with pytest.raises(OutOfRangeInput):
        dl.extend(deadline, days, "reason", "legal", holidays)


def test_extension_cap(deadline, holidays):
    ext = dl.extend(deadline, 8, "reason", "legal", holidays)
    with pytest.raises(OutOfRangeInput):
        dl.extend(ext, 3, "reason", "legal", holidays)
    assert dl.extend(ext, 2, "reason", "legal", holidays).extension_days_total == 10


def test_calendar_extension_counts_calendar_days(friday):
    tmpl = DeadlineTemplate(
        key="cal", name="Cal", description="", days=15,
        day_count_policy=DayCountPolicy.CALENDAR, associated_stage=Stage.MEASURES_ADOPTION,
    )
    d = dl.initialize(tmpl, friday)
    assert d.end_date == date(2025, 7, 12)
    assert dl.extend(d, 2, "r", "a").end_date == date(2025, 7, 14)


# ---------------------------------------------------------------------------
# progress, notifications, notes
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("value, expected", [(-5, 0), (0, 0), (42.4, 42), (100, 100), (250, 100)])
def test_progress_is_clamped(deadline, value, expected):
    assert dl.update_progress(deadline, value).progress_percentage == expected


def test_notifications_are_appended(deadline, friday):
    one = dl.record_notification(deadline, "a@x.example", NotificationChannel.EMAIL, friday)
    two = dl.record_notification(one, "+56 9 1234", "sms", friday)
    assert [n.recipient for n in two.notifications_sent] == ["a@x.example", "+56 9 1234"]
    assert two.notifications_sent[0] == one.notifications_sent[0]
    assert two.notifications_sent[1].channel is NotificationChannel.SMS
    assert deadline.notifications_sent == ()


def test_notes(deadline):
    assert dl.update_notes(deadline, "called regulator").notes == "called regulator"
    assert dl.update_notes(deadline, None).notes is None


def test_days_overdue(deadline, holidays):
    assert dl.days_overdue(deadline, datetime(2025, 7, 3)) == 0
    assert dl.days_overdue(deadline, datetime(2025, 7, 6)) == 3
    done = dl.complete(deadline, "hr", datetime(2025, 7, 6))
    assert dl.days_overdue(done, datetime(2025, 7, 6)) == 0


# ---------------------------------------------------------------------------
# filters
# ---------------------------------------------------------------------------
def test_next_critical_skips_terminal(friday, holidays):
    a = dl.initialize(THREE_DAYS, friday, holidays, deadline_id="a")
    b = dl.initialize(THREE_DAYS, friday, holidays, deadline_id="b")
    late = dl.recompute_status(a, datetime(2025, 7, 10), holidays)
    assert dl.next_critical([late, b]) is b
    assert dl.next_critical([late]) is None
    assert dl.expired([late, b]) == [late]


def test_upcoming_and_filter(deadline, holidays):
    warn = dl.recompute_status(deadline, datetime(2025, 7, 1), holidays)
    crit = dl.recompute_status(deadline, datetime(2025, 7, 3), holidays)
    assert dl.upcoming([deadline, warn, crit]) == [warn, crit]
    assert dl.filter_by_status([deadline, warn, crit], DeadlineStatus.CRITICAL) == [crit]
