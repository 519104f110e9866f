"""
tests/test_case_store.py
========================

Unit tests for docket.case_store.CaseStore
"""

import pytest

from docket.case_store import CaseNotFound, CaseStore
from docket.models import Stage
from docket.workflow import open_case, transition


def test_save_get_and_overwrite(monday):
    store = CaseStore()
    state = open_case("c-1", "hr", monday)
    store.save("acme", state)
    assert store.get("acme", "c-1") is state

    moved = transition(state, Stage.RECEPTION, "hr", monday)
    store.save("acme", moved)
    assert store.get("acme", "c-1") is moved
    assert len(store) == 1


def test_missing_case():
    store = CaseStore()
    assert store.find("acme", "nope") is None
    with pytest.raises(CaseNotFound):
        store.get("acme", "nope")


def test_companies_are_separate(monday):
    store = CaseStore()
    store.save("acme", open_case("c-1", "hr", monday))
    store.save("globex", open_case("c-1", "hr", monday))
    store.save("globex", transition(open_case("c-2", "hr", monday), Stage.RECEPTION, "hr", monday))

    assert len(store) == 3
    assert [s.case_id for s in store.list("acme")] == ["c-1"]
    assert len(store.list("globex")) == 2
    assert [s.case_id for s in store.find_by_stage(Stage.RECEPTION)] == ["c-2"]
    assert store.find_by_stage(Stage.RECEPTION, "acme") == []
    assert len(list(store)) == 3
