"""
docket.case_store_db
====================

SQLite-backed implementation of the :class:`~docket.case_store.CaseStore`
public surface.

This adapter wraps the CRUD helpers in :pymod:`docket.db` so that any code
written against the in-memory store can switch to a persistent one
without changing its calls.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from sqlmodel import Session

from .case_store import CaseNotFound
from .db import SessionLocal, all_cases, get_case, upsert_case
from .models import CaseWorkflowState, Stage

logger = logging.getLogger(__name__)


class DBCaseStore:
    """
    Drop-in replacement backed by SQLite.

    Methods mirror the in-memory CaseStore:
    * save(company_id, state)
    * get(company_id, case_id) / find(...)
    * list(company_id=None) / find_by_stage(stage)
    * iteration / len()
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session = session or SessionLocal()

    # ------------------------------------------------------------------ CRUD
    def save(self, company_id: str, state: CaseWorkflowState) -> None:
        upsert_case(self._session, company_id, state)
        logger.debug(f"Persisted case {company_id}/{state.case_id}")

    def get(self, company_id: str, case_id: str) -> CaseWorkflowState:
        state = get_case(self._session, company_id, case_id)
        if state is None:
            raise CaseNotFound(f"{company_id}/{case_id}")
        return state

    def find(self, company_id: str, case_id: str) -> Optional[CaseWorkflowState]:
        return get_case(self._session, company_id, case_id)

    def list(self, company_id: Optional[str] = None) -> List[CaseWorkflowState]:
        return all_cases(self._session, company_id)

    def find_by_stage(self, stage: Stage, company_id: Optional[str] = None) -> List[CaseWorkflowState]:
        return [s for s in self.list(company_id) if s.current_stage is stage]

    # ------------------------------------------------------ dunder helpers
    def __iter__(self) -> Iterator[CaseWorkflowState]:
        yield from all_cases(self._session)

    def __len__(self) -> int:
        return len(all_cases(self._session))

    # ----------------------------------------------------- context manager
    def __enter__(self) -> "DBCaseStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._session.close()
