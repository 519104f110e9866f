"""
tests/test_case_store_db.py
===========================

Integration-style tests for the SQLite-backed case store.

These tests mirror `test_case_store.py` but use DBCaseStore (on a
throw-away database file) to ensure persistence and API parity with the
in-memory version.
"""

import pytest
from sqlmodel import Session, create_engine

from docket import deadlines as dl
from docket.case_store import CaseNotFound
from docket.case_store_db import DBCaseStore
from docket.db import create_all
from docket.models import Stage
from docket.workflow import apply_to_deadline, open_case, transition


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'docket-test.db'}")
    create_all(eng)
    return eng


def test_save_and_get(engine, friday, holidays):
    state = transition(open_case("c-1", "hr", friday, holidays), Stage.RECEPTION, "hr", friday, holidays)
    with DBCaseStore(Session(engine)) as store:
        store.save("acme", state)
        assert store.get("acme", "c-1") == state
        assert store.find("acme", "missing") is None
        with pytest.raises(CaseNotFound):
            store.get("acme", "missing")


def test_persistence_across_sessions(engine, friday, holidays):
    state = transition(open_case("c-1", "hr", friday, holidays), Stage.RECEPTION, "hr", friday, holidays)
    state = apply_to_deadline(state, "c-1:precautionary_measures", dl.complete, "hr", friday)

    # write in first session
    with DBCaseStore(Session(engine)) as store:
        store.save("acme", state)

    # read in a brand-new session
    with DBCaseStore(Session(engine)) as store2:
        fetched = store2.get("acme", "c-1")

    assert fetched == state
    assert fetched.deadline("c-1:precautionary_measures").completed_by == "hr"


def test_upsert_and_filters(engine, monday):
    with DBCaseStore(Session(engine)) as store:
        store.save("acme", open_case("c-1", "hr", monday))
        store.save("acme", transition(open_case("c-1", "hr", monday), Stage.RECEPTION, "hr", monday))
        store.save("globex", open_case("c-2", "hr", monday))

        assert len(store) == 2
        assert store.get("acme", "c-1").current_stage is Stage.RECEPTION
        assert [s.case_id for s in store.list("globex")] == ["c-2"]
        assert [s.case_id for s in store.find_by_stage(Stage.RECEPTION)] == ["c-1"]
        assert {s.case_id for s in store} == {"c-1", "c-2"}
