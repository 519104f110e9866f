"""
tests/test_serialization.py
===========================

JSON round-trip of engine snapshots
"""

import json
from datetime import datetime

from docket import deadlines as dl
from docket.extensions import request_case_extension
from docket.models import DeadlineStatus, ExtensionStatus, NotificationChannel, Stage
from docket.serialization import (
    deadline_from_dict,
    deadline_to_dict,
    state_from_dict,
    state_from_json,
    state_to_dict,
    state_to_json,
    states_from_json,
)
from docket.templates import DEFAULT_TEMPLATES
from docket.workflow import apply_to_deadline, open_case, transition

TEMPLATES = {t.key: t for t in DEFAULT_TEMPLATES}


def _busy_case(friday, holidays):
    state = open_case("c-9", "hr", friday, holidays, notes="walk-in")
    state = transition(state, Stage.RECEPTION, "hr", friday, holidays)
    state = apply_to_deadline(state, "c-9:precautionary_measures", dl.extend, 2, "r", "legal", holidays)
    state = apply_to_deadline(state, "c-9:regulator_initial_notice", dl.record_notification,
                              "reg@example.org", NotificationChannel.EMAIL, friday)
    state, _ = request_case_extension(state, "c-9:regulator_initial_notice", 1, "office closed", "hr", friday)
    return state


def test_state_round_trip(friday, holidays):
    state = _busy_case(friday, holidays)
    assert state_from_json(state_to_json(state)) == state
    assert state_from_dict(state_to_dict(state)) == state


def test_dict_is_plain_json(friday, holidays):
    data = state_to_dict(_busy_case(friday, holidays))
    json.dumps(data)
    assert data["current_stage"] == "reception"
    ext = next(d for d in data["deadlines"] if d["id"] == "c-9:precautionary_measures")
    assert ext["status"] == "extended"
    assert ext["original_end_date"] == "2025-07-03"
    assert data["extension_requests"][0]["status"] == ExtensionStatus.PENDING.value
    assert data["extension_requests"][0]["requested_at"].startswith("2025-06-27T09:00")


def test_deadline_round_trip(friday, holidays):
    d = dl.initialize(TEMPLATES["internal_investigation"], friday, holidays, deadline_id="inv")
    restored = deadline_from_dict(deadline_to_dict(d))
    assert restored == d
    assert restored.status is DeadlineStatus.ON_TRACK
    assert isinstance(restored.start_date, datetime)


def test_list_of_states(friday, holidays):
    a = _busy_case(friday, holidays)
    b = open_case("c-10", "hr", friday)
    raw = "[" + state_to_json(a) + "," + state_to_json(b) + "]"
    assert states_from_json(raw) == [a, b]
