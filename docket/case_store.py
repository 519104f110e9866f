"""
docket.case_store
=================

An in-memory registry of case snapshots keyed by ``(company_id, case_id)``.

This is the simplest possible external collaborator for the engine: it
holds whatever snapshot it was last given (last write wins).  Only the
standard library is used so it can back unit tests without a database.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .models import CaseWorkflowState, Stage

logger = logging.getLogger(__name__)

Key = Tuple[str, str]


class CaseNotFound(KeyError):
    """No snapshot stored under the requested company / case id."""


class CaseStore:
    """
    Dictionary-backed registry of case snapshots.

    Example
    -------
    >>> from datetime import datetime
    >>> from docket.workflow import open_case
    >>> store = CaseStore()
    >>> store.save("acme", open_case("c-1", "hr", datetime(2025, 3, 3)))
    >>> store.get("acme", "c-1").current_stage
    <Stage.COMPLAINT_FILED: 'complaint_filed'>
    """

    def __init__(self) -> None:
        self._cases: Dict[Key, CaseWorkflowState] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def save(self, company_id: str, state: CaseWorkflowState) -> None:
        """Insert or overwrite the snapshot of a case."""
        self._cases[(company_id, state.case_id)] = state
        logger.debug(f"Stored case {company_id}/{state.case_id} at stage {state.current_stage.value}")

    def get(self, company_id: str, case_id: str) -> CaseWorkflowState:
        """Retrieve a snapshot (raise :class:`CaseNotFound` if missing)."""
        try:
            return self._cases[(company_id, case_id)]
        except KeyError:
            raise CaseNotFound(f"{company_id}/{case_id}") from None

    def find(self, company_id: str, case_id: str) -> Optional[CaseWorkflowState]:
        return self._cases.get((company_id, case_id))

    def list(self, company_id: Optional[str] = None) -> List[CaseWorkflowState]:
        """All snapshots, optionally restricted to one company."""
        return [
            state for (company, _), state in self._cases.items()
            if company_id is None or company == company_id
        ]

    def find_by_stage(self, stage: Stage, company_id: Optional[str] = None) -> List[CaseWorkflowState]:
        return [s for s in self.list(company_id) if s.current_stage is stage]

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[CaseWorkflowState]:
        return iter(self._cases.values())

    def __len__(self) -> int:
        return len(self._cases)
