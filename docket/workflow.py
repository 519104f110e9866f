"""
docket.workflow
===============

Case-level state machine.

The functions here operate on a :class:`~docket.models.CaseWorkflowState`
snapshot and return a new one.  Stage changes are validated against
:data:`docket.stages.TRANSITIONS`; entering a stage starts the clock on the
deadlines bound to it.

Examples
--------
>>> from datetime import datetime
>>> state = open_case("case-1", "intake-officer", datetime(2025, 3, 3, 9))
>>> state = transition(state, Stage.RECEPTION, "intake-officer", datetime(2025, 3, 3, 10))
>>> sorted(d.template_key for d in state.deadlines)
['precautionary_measures', 'regulator_initial_notice']
>>> transition(state, Stage.CLOSED, "intake-officer", datetime(2025, 3, 4))
Traceback (most recent call last):
    ...
docket.errors.InvalidTransition: illegal transition reception → closed
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from . import deadlines as engine
from .errors import DeadlineNotFound, InvalidTransition
from .models import (
    DEFAULT_THRESHOLDS,
    CaseWorkflowState,
    Deadline,
    DeadlineStatus,
    DeadlineTemplate,
    Stage,
    StageTransition,
    StatusThresholds,
)
from .stages import INITIAL_STAGE, MAIN_PATH, TRANSITIONS, is_allowed
from .templates import DEFAULT_TEMPLATES, templates_for_stage
from .workdays import HolidaySet


def _deadline_id(case_id: str, template: DeadlineTemplate) -> str:
    return f"{case_id}:{template.key}"


def _start_deadlines(
    state: CaseWorkflowState,
    stage: Stage,
    now: datetime,
    holidays: HolidaySet,
    templates: Iterable[DeadlineTemplate],
) -> tuple:
    """
    Deadlines to add when *stage* is entered.  A template is instantiated
    at most once per case, so re-entering a stage keeps the running clock.
    """
    existing = {d.template_key for d in state.deadlines}
    return tuple(
        engine.initialize(t, now, holidays, deadline_id=_deadline_id(state.case_id, t))
        for t in templates_for_stage(stage, templates)
        if t.key not in existing
    )


def open_case(
    case_id: str,
    actor_id: str,
    now: datetime,
    holidays: HolidaySet = frozenset(),
    templates: Iterable[DeadlineTemplate] = DEFAULT_TEMPLATES,
    notes: Optional[str] = None,
) -> CaseWorkflowState:
    """Create the initial snapshot of a newly filed case."""
    templates = tuple(templates)
    state = CaseWorkflowState(
        case_id=case_id,
        current_stage=INITIAL_STAGE,
        stage_history=(StageTransition(INITIAL_STAGE, now, actor_id, notes),),
    )
    return replace(state, deadlines=_start_deadlines(state, INITIAL_STAGE, now, holidays, templates))


def transition(
    state: CaseWorkflowState,
    target: Stage,
    actor_id: str,
    now: datetime,
    holidays: HolidaySet = frozenset(),
    notes: Optional[str] = None,
    templates: Iterable[DeadlineTemplate] = DEFAULT_TEMPLATES,
    table=TRANSITIONS,
) -> CaseWorkflowState:
    """
    Move the case to *target* if the adjacency table allows it, otherwise
    raise :class:`InvalidTransition` (and leave *state* as it was).
    """
    target = Stage(target)
    current = state.current_stage
    if not is_allowed(current, target, table):
        raise InvalidTransition(f"illegal transition {current.value} → {target.value}")

    record = StageTransition(stage=target, timestamp=now, actor_id=actor_id, notes=notes)
    started = _start_deadlines(state, target, now, holidays, tuple(templates))
    return replace(
        state,
        current_stage=target,
        stage_history=state.stage_history + (record,),
        deadlines=state.deadlines + started,
    )


def recompute_all(
    state: CaseWorkflowState,
    now: datetime,
    holidays: HolidaySet = frozenset(),
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
) -> CaseWorkflowState:
    """Reclassify every running deadline against *now*.  Idempotent."""
    refreshed = tuple(
        d if d.is_terminal else engine.recompute_status(d, now, holidays, thresholds)
        for d in state.deadlines
    )
    if refreshed == state.deadlines:
        return state
    return replace(state, deadlines=refreshed)


def active_deadlines_for_stage(state: CaseWorkflowState, stage: Stage) -> List[Deadline]:
    """Deadlines bound to *stage* that have not been completed."""
    return [
        d for d in state.deadlines
        if d.associated_stage == stage and d.status is not DeadlineStatus.COMPLETED
    ]


def apply_to_deadline(
    state: CaseWorkflowState,
    deadline_id: str,
    operation: Callable[..., Deadline],
    *args,
    **kwargs,
) -> CaseWorkflowState:
    """
    Run a :pymod:`docket.deadlines` operation on one deadline of the case,
    e.g. ``apply_to_deadline(state, did, deadlines.complete, "hr", now)``.
    """
    if state.deadline(deadline_id) is None:
        raise DeadlineNotFound(deadline_id)
    return replace(
        state,
        deadlines=tuple(
            operation(d, *args, **kwargs) if d.id == deadline_id else d
            for d in state.deadlines
        ),
    )


def pending_legal_deadlines(state: CaseWorkflowState) -> List[Deadline]:
    """Statutory deadlines of the current stage still open."""
    return [d for d in active_deadlines_for_stage(state, state.current_stage) if d.is_legal_requirement]


def can_advance(state: CaseWorkflowState) -> bool:
    return not pending_legal_deadlines(state)


def process_progress(state: CaseWorkflowState) -> int:
    """
    Rough completion percentage: 70 % from the position of the current stage
    on the main path, 30 % from the share of completed deadlines.
    """
    if state.current_stage is Stage.CLOSED:
        return 100
    if state.current_stage in MAIN_PATH:
        position = MAIN_PATH.index(state.current_stage)
    else:
        # Side branches count as far as the furthest main-path stage visited.
        visited = [MAIN_PATH.index(t.stage) for t in state.stage_history if t.stage in MAIN_PATH]
        position = max(visited, default=0)

    stage_part = position / len(MAIN_PATH) * 70
    total = len(state.deadlines)
    done = sum(1 for d in state.deadlines if d.status is DeadlineStatus.COMPLETED)
    deadline_part = done / total * 30 if total else 0
    return round(stage_part + deadline_part)
