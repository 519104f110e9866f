"""
docket.extensions
=================

Two-step extension of a deadline: a justified request, then a decision.

:func:`request_extension` checks the request against the deadline's
extension allowance up front, so an impossible request is refused before
anyone reviews it.  :func:`decide_extension` closes a pending request;
only an approval moves the due date, through
:func:`docket.deadlines.extend`.

The ``*_case`` helpers do the same bookkeeping on a whole
:class:`~docket.models.CaseWorkflowState`, where requests are kept in the
append-only ``extension_requests`` log.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional, Tuple

from . import deadlines as engine
from .errors import DeadlineNotFound, ExtensionRequestNotFound, InvalidTransition, OutOfRangeInput
from .models import (
    CaseWorkflowState,
    Deadline,
    DeadlineStatus,
    ExtensionRequest,
    ExtensionStatus,
)
from .workdays import HolidaySet


def request_extension(
    deadline: Deadline,
    requested_days: int,
    justification: str,
    requested_by: str,
    now: datetime,
    request_id: Optional[str] = None,
) -> ExtensionRequest:
    """Open a pending request to extend *deadline* by *requested_days*."""
    if deadline.status is DeadlineStatus.COMPLETED:
        raise InvalidTransition(f"deadline {deadline.id!r} is completed and cannot be extended")
    if requested_days < 1:
        raise OutOfRangeInput(f"extension must be at least one day, got {requested_days}")
    if not justification:
        raise OutOfRangeInput("an extension request needs a justification")

    total = deadline.extension_days_total + requested_days
    if deadline.max_extension_days is not None and total > deadline.max_extension_days:
        raise OutOfRangeInput(
            f"requested extension of {requested_days} days exceeds the maximum of "
            f"{deadline.max_extension_days} days for {deadline.name!r}"
        )

    return ExtensionRequest(
        id=request_id or uuid.uuid4().hex,
        deadline_id=deadline.id,
        requested_days=requested_days,
        justification=justification,
        requested_by=requested_by,
        requested_at=now,
    )


def decide_extension(
    request: ExtensionRequest,
    deadline: Deadline,
    approved: bool,
    decided_by: str,
    now: datetime,
    holidays: HolidaySet = frozenset(),
    comments: Optional[str] = None,
) -> Tuple[ExtensionRequest, Deadline]:
    """
    Approve or reject a pending *request*.

    Returns the closed request and the deadline, which is extended on
    approval and returned unchanged on rejection.  A request that was
    already decided raises :class:`~docket.errors.InvalidTransition`.
    """
    if request.status is not ExtensionStatus.PENDING:
        raise InvalidTransition(f"extension request {request.id!r} is already {request.status.value}")
    if request.deadline_id != deadline.id:
        raise DeadlineNotFound(request.deadline_id)

    if approved:
        deadline = engine.extend(
            deadline, request.requested_days, request.justification, decided_by, holidays, now,
        )
    decided = replace(
        request,
        status=ExtensionStatus.APPROVED if approved else ExtensionStatus.REJECTED,
        decided_by=decided_by,
        decided_at=now,
        comments=comments,
        new_end_date=deadline.end_date if approved else None,
    )
    return decided, deadline


# ---------------------------------------------------------------------
# Case-level bookkeeping
# ---------------------------------------------------------------------
def request_case_extension(
    state: CaseWorkflowState,
    deadline_id: str,
    requested_days: int,
    justification: str,
    requested_by: str,
    now: datetime,
) -> Tuple[CaseWorkflowState, ExtensionRequest]:
    deadline = state.deadline(deadline_id)
    if deadline is None:
        raise DeadlineNotFound(deadline_id)
    request = request_extension(deadline, requested_days, justification, requested_by, now)
    return replace(state, extension_requests=state.extension_requests + (request,)), request


def decide_case_extension(
    state: CaseWorkflowState,
    request_id: str,
    approved: bool,
    decided_by: str,
    now: datetime,
    holidays: HolidaySet = frozenset(),
    comments: Optional[str] = None,
) -> CaseWorkflowState:
    request = state.extension_request(request_id)
    if request is None:
        raise ExtensionRequestNotFound(request_id)
    deadline = state.deadline(request.deadline_id)
    if deadline is None:
        raise DeadlineNotFound(request.deadline_id)

    decided, deadline = decide_extension(request, deadline, approved, decided_by, now, holidays, comments)
    return replace(
        state,
        deadlines=tuple(deadline if d.id == deadline.id else d for d in state.deadlines),
        extension_requests=tuple(decided if r.id == request_id else r for r in state.extension_requests),
    )


def pending_requests(state: CaseWorkflowState) -> Tuple[ExtensionRequest, ...]:
    return tuple(r for r in state.extension_requests if r.status is ExtensionStatus.PENDING)
