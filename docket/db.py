"""
docket.db
=========

SQLite persistence layer for case snapshots.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at the configured URL
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` – helper to create tables at first run

The workflow engine never imports this module; it is one possible
external store for the snapshots the engine returns.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine, select

from .models import CaseWorkflowState
from .serialization import state_from_dict, state_to_dict
from .settings import DB_ECHO, settings

# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
# SQLite connections are handed between FastAPI worker threads.
_connect_args = {"check_same_thread": False} if settings.db_url.startswith("sqlite") else {}
engine = create_engine(settings.db_url, echo=DB_ECHO, connect_args=_connect_args)


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal(bind: Optional[Engine] = None) -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """Return a new Session bound to *bind* or the global engine."""
    return Session(bind or engine)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# ORM model that stores a CaseWorkflowState snapshot
# ---------------------------------------------------------------------------
class CaseSnapshotDB(SQLModel, table=True):
    """
    One row per case.  The full snapshot lives in the JSON ``state``
    column; ``current_stage`` is duplicated so it can be filtered in SQL.
    """

    __tablename__ = "case_snapshots"

    company_id: str = Field(primary_key=True, index=True)
    case_id: str = Field(primary_key=True)
    current_stage: str = Field(index=True)
    state: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    updated_at: datetime = Field(default_factory=_utcnow)

    # ---------------------------------------------------------------------
    # Converters
    # ---------------------------------------------------------------------
    @classmethod
    def from_state(cls, company_id: str, state: CaseWorkflowState) -> "CaseSnapshotDB":
        """Create a DB row from an engine snapshot."""
        return cls(
            company_id=company_id,
            case_id=state.case_id,
            current_stage=state.current_stage.value,
            state=state_to_dict(state),
        )

    def to_state(self) -> CaseWorkflowState:
        """Convert the DB row back into an engine snapshot."""
        return state_from_dict(self.state)


# ---------------------------------------------------------------------------
# Convenience CRUD helpers
# ---------------------------------------------------------------------------
def upsert_case(s: Session, company_id: str, state: CaseWorkflowState) -> None:
    """Insert or update a snapshot row (last write wins)."""
    s.merge(CaseSnapshotDB.from_state(company_id, state))
    s.commit()


def get_case(s: Session, company_id: str, case_id: str) -> CaseWorkflowState | None:
    """Return a snapshot or *None* if missing."""
    row = s.get(CaseSnapshotDB, (company_id, case_id))
    return row.to_state() if row else None


def all_cases(s: Session, company_id: Optional[str] = None) -> List[CaseWorkflowState]:
    """Return every snapshot, optionally for one company."""
    query = select(CaseSnapshotDB)
    if company_id is not None:
        query = query.where(CaseSnapshotDB.company_id == company_id)
    return [row.to_state() for row in s.exec(query).all()]


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Optional[Engine] = None) -> None:
    """Create all tables for imported SQLModel subclasses, including CaseSnapshotDB."""
    SQLModel.metadata.create_all(bind or engine)


if __name__ == "__main__":
    """
    Bootstrap helper.

    Examples
    --------
    $ python -m docket.db --create        # first-time table creation
    """
    import argparse

    parser = argparse.ArgumentParser(prog="python -m docket.db", description="Docket DB utilities")
    parser.add_argument("--create", action="store_true", help="create tables")
    args = parser.parse_args()

    if args.create:
        create_all()
        print(f"case_snapshots table ready at {settings.db_url}")
