#!/usr/bin/env python
"""
Seed database with sample cases for testing.

This script walks a handful of demo cases through the workflow so the
dashboard has deadlines in every status to show.
"""

from datetime import datetime, timedelta

from docket import deadlines
from docket.case_store_db import DBCaseStore
from docket.models import NotificationChannel, Stage
from docket.workflow import apply_to_deadline, open_case, recompute_all, transition

COMPANY = "acme"

# (case id, route after filing, days ago the case was filed)
SAMPLE_ROUTES = [
    ("case-001", [Stage.RECEPTION], 1),
    ("case-002", [Stage.RECEPTION, Stage.COMPLAINT_AMENDMENT], 12),
    ("case-003", [Stage.RECEPTION, Stage.PRECAUTIONARY_MEASURES, Stage.REGULATOR_NOTIFICATION,
                  Stage.DECISION_TO_INVESTIGATE, Stage.INVESTIGATION], 20),
    ("case-004", [Stage.RECEPTION, Stage.DERIVED_TO_AUTHORITY, Stage.CLOSED], 40),
    ("case-005", [Stage.RECEPTION, Stage.THIRD_PARTY, Stage.PRECAUTIONARY_MEASURES], 6),
]


def build_demo_cases(now, holidays=frozenset()):
    """Return recomputed demo snapshots; all stage changes happen on the filing day."""
    cases = []
    for case_id, route, age in SAMPLE_ROUTES:
        filed = now - timedelta(days=age)
        state = open_case(case_id, "hr-officer", filed, holidays, notes="Demo case")
        for step, stage in enumerate(route, start=1):
            state = transition(state, stage, "hr-officer", filed + timedelta(minutes=step), holidays)
        cases.append(state)

    # Close out or extend a couple of deadlines so every status shows up.
    case_001 = apply_to_deadline(cases[0], "case-001:precautionary_measures", deadlines.complete, "hr-officer", now)
    cases[0] = apply_to_deadline(case_001, "case-001:regulator_initial_notice", deadlines.record_notification,
                                 "compliance@acme.example", NotificationChannel.EMAIL, now)
    cases[2] = apply_to_deadline(cases[2], "case-003:internal_investigation", deadlines.extend,
                                 10, "Additional witnesses", "legal-lead", holidays)
    return [recompute_all(s, now, holidays) for s in cases]


def seed_database():
    """Add sample cases to the database."""
    from docket.settings import get_holidays

    store = DBCaseStore()
    cases = build_demo_cases(datetime.now(), get_holidays())
    for state in cases:
        store.save(COMPANY, state)
        print(f"Added: {state.case_id} ({state.current_stage.value}, {len(state.deadlines)} deadlines)")

    print(f"\nAdded {len(cases)} cases to the database!")


if __name__ == "__main__":
    # Initialize DB if needed
    from docket.db import create_all
    print("Ensuring database tables exist...")
    create_all()

    print("Seeding database with sample cases...")
    seed_database()

    print("\nDone! You can now run the API server with:")
    print("uvicorn api.main:app --reload --port 8001")
