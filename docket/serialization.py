"""
docket.serialization
====================

Lossless JSON round-trip for engine records, built on pydantic's
``TypeAdapter`` so the frozen dataclasses in :pymod:`docket.models` need
no hand-written converters.

>>> from datetime import datetime
>>> from docket.workflow import open_case
>>> s = open_case("c-1", "hr", datetime(2025, 3, 3, 9))
>>> state_from_json(state_to_json(s)) == s
True
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import TypeAdapter

from .models import CaseWorkflowState, Deadline

_STATE = TypeAdapter(CaseWorkflowState)
_DEADLINE = TypeAdapter(Deadline)
_STATES = TypeAdapter(List[CaseWorkflowState])


def state_to_dict(state: CaseWorkflowState) -> Dict[str, Any]:
    """JSON-compatible ``dict`` (dates as ISO strings, enums as values)."""
    return _STATE.dump_python(state, mode="json")


def state_from_dict(data: Dict[str, Any]) -> CaseWorkflowState:
    return _STATE.validate_python(data)


def state_to_json(state: CaseWorkflowState) -> str:
    return _STATE.dump_json(state).decode()


def state_from_json(raw: str | bytes) -> CaseWorkflowState:
    return _STATE.validate_json(raw)


def deadline_to_dict(deadline: Deadline) -> Dict[str, Any]:
    return _DEADLINE.dump_python(deadline, mode="json")


def deadline_from_dict(data: Dict[str, Any]) -> Deadline:
    return _DEADLINE.validate_python(data)


def states_from_json(raw: str | bytes) -> List[CaseWorkflowState]:
    """Parse a JSON array of case snapshots (used by the CLI)."""
    return _STATES.validate_json(raw)
