"""
tests/test_extensions.py
========================

Request / decide lifecycle in docket.extensions
"""

from datetime import date, datetime

import pytest

from docket import deadlines as dl
from docket.errors import DeadlineNotFound, ExtensionRequestNotFound, InvalidTransition, OutOfRangeInput
from docket.extensions import (
    decide_case_extension,
    decide_extension,
    pending_requests,
    request_case_extension,
    request_extension,
)
from docket.models import DayCountPolicy, DeadlineStatus, DeadlineTemplate, ExtensionStatus, Stage
from docket.workflow import open_case, transition

INVESTIGATION = DeadlineTemplate(
    key="investigation",
    name="Investigation",
    description="",
    days=3,
    day_count_policy=DayCountPolicy.BUSINESS,
    associated_stage=Stage.INVESTIGATION,
    max_extension_days=10,
)
LATER = datetime(2025, 7, 1, 10)


@pytest.fixture
def deadline(friday, holidays):
    """Due Thu 3 Jul 2025 (Mon 30 Jun is a holiday)."""
    return dl.initialize(INVESTIGATION, friday, holidays, deadline_id="inv")


@pytest.fixture
def pending(deadline, friday):
    return request_extension(deadline, 2, "witness abroad", "hr", friday, request_id="x-1")


def test_request_is_pending_and_leaves_deadline_alone(deadline, pending, friday):
    assert pending.status is ExtensionStatus.PENDING
    assert pending.deadline_id == "inv"
    assert pending.requested_at == friday
    assert pending.decided_by is None and pending.new_end_date is None
    assert deadline.end_date == date(2025, 7, 3)
    assert not deadline.is_extended


@pytest.mark.parametrize("days", [0, -3, 11])
def test_request_outside_allowance_is_refused(deadline, friday, days):
    with pytest.raises(OutOfRangeInput):
        request_extension(deadline, days, "reason", "hr", friday)


def test_allowance_counts_earlier_extensions(deadline, friday, holidays):
    ext = dl.extend(deadline, 8, "first", "legal", holidays)
    with pytest.raises(OutOfRangeInput):
        request_extension(ext, 3, "second", "hr", friday)
    assert request_extension(ext, 2, "second", "hr", friday).requested_days == 2


def test_request_needs_justification(deadline, friday):
    with pytest.raises(OutOfRangeInput):
        request_extension(deadline, 2, "", "hr", friday)


def test_completed_deadline_cannot_be_requested(deadline, friday):
    done = dl.complete(deadline, "hr", friday)
    with pytest.raises(InvalidTransition):
        request_extension(done, 2, "reason", "hr", friday)


def test_approval_moves_due_date(deadline, pending, holidays):
    decided, ext = decide_extension(pending, deadline, True, "legal", LATER, holidays, comments="fine")
    assert decided.status is ExtensionStatus.APPROVED
    assert (decided.decided_by, decided.decided_at, decided.comments) == ("legal", LATER, "fine")
    assert ext.end_date == decided.new_end_date == date(2025, 7, 7)
    assert ext.original_end_date == date(2025, 7, 3)
    assert ext.status is DeadlineStatus.EXTENDED
    assert ext.extension_reason == "witness abroad"
    assert ext.extension_approved_by == "legal"
    # Tue 1 Jul to Mon 7 Jul
    assert ext.days_remaining == 5


def test_rejection_keeps_due_date(deadline, pending, holidays):
    decided, same = decide_extension(pending, deadline, False, "legal", LATER, holidays)
    assert decided.status is ExtensionStatus.REJECTED
    assert decided.new_end_date is None
    assert same is deadline


def test_decision_is_final(deadline, pending, holidays):
    decided, _ = decide_extension(pending, deadline, False, "legal", LATER, holidays)
    with pytest.raises(InvalidTransition):
        decide_extension(decided, deadline, True, "legal", LATER, holidays)


def test_decision_against_wrong_deadline(pending, friday, holidays):
    other = dl.initialize(INVESTIGATION, friday, holidays, deadline_id="other")
    with pytest.raises(DeadlineNotFound):
        decide_extension(pending, other, True, "legal", LATER, holidays)


# ---------------------------------------------------------------------------
# case-level bookkeeping
# ---------------------------------------------------------------------------
@pytest.fixture
def case(friday, holidays):
    state = open_case("c-1", "hr", friday, holidays)
    return transition(state, Stage.RECEPTION, "hr", friday, holidays)


def test_case_request_then_approval(case, friday, holidays):
    did = "c-1:precautionary_measures"
    state, request = request_case_extension(case, did, 2, "measures need a provider", "hr", friday)
    assert pending_requests(state) == (request,)
    assert state.deadline(did) == case.deadline(did)
    assert case.extension_requests == ()

    state = decide_case_extension(state, request.id, True, "legal", LATER, holidays)
    assert pending_requests(state) == ()
    assert state.extension_request(request.id).status is ExtensionStatus.APPROVED
    assert state.deadline(did).end_date == date(2025, 7, 7)
    assert state.deadline("c-1:regulator_initial_notice") == case.deadline("c-1:regulator_initial_notice")


def test_case_lookups_fail_loudly(case, friday, holidays):
    with pytest.raises(DeadlineNotFound):
        request_case_extension(case, "nope", 2, "reason", "hr", friday)
    with pytest.raises(ExtensionRequestNotFound) as exc:
        decide_case_extension(case, "nope", True, "legal", LATER, holidays)
    assert exc.value.request_id == "nope"
