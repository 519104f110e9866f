"""
api.cases
=========

Case and deadline endpoints.

Every handler follows the same pattern: load the stored snapshot,
recompute it against the request clock, apply one engine operation,
store the result and return it.  Engine errors propagate to the handlers
registered in :pymod:`api.main`.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from docket import deadlines, extensions, reporting, workflow
from docket.alerts import alert_schedule
from docket.case_store import CaseStore
from docket.models import CaseWorkflowState, NotificationChannel, Stage, StatusThresholds
from docket.serialization import deadline_to_dict, state_to_dict

from .deps import get_clock, get_holiday_set, get_store, get_thresholds

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies/{company_id}", tags=["cases"])


# ---------- request bodies ----------
class OpenCaseRequest(BaseModel):
    case_id: str = Field(..., min_length=1)
    actor_id: str = Field(..., min_length=1)
    notes: Optional[str] = None


class TransitionRequest(BaseModel):
    target_stage: Stage
    actor_id: str = Field(..., min_length=1)
    notes: Optional[str] = None


class CompleteRequest(BaseModel):
    completed_by: str = Field(..., min_length=1)


class ExtendRequest(BaseModel):
    additional_days: int
    reason: str = Field(..., min_length=1)
    approved_by: str = Field(..., min_length=1)


class ProgressRequest(BaseModel):
    percentage: float


class NotificationRequest(BaseModel):
    recipient: str = Field(..., min_length=1)
    channel: NotificationChannel


class NotesRequest(BaseModel):
    notes: Optional[str] = None


class ExtensionRequestBody(BaseModel):
    requested_days: int
    justification: str = Field(..., min_length=1)
    requested_by: str = Field(..., min_length=1)


class ExtensionDecision(BaseModel):
    approved: bool
    decided_by: str = Field(..., min_length=1)
    comments: Optional[str] = None


# ---------- helpers ----------
def _load(
    store: CaseStore,
    company_id: str,
    case_id: str,
    now: datetime,
    holidays: FrozenSet[date],
    thresholds: StatusThresholds,
) -> CaseWorkflowState:
    return workflow.recompute_all(store.get(company_id, case_id), now, holidays, thresholds)


def _mutate_deadline(store, company_id, case_id, deadline_id, now, holidays, thresholds, operation, *args):
    state = _load(store, company_id, case_id, now, holidays, thresholds)
    state = workflow.apply_to_deadline(state, deadline_id, operation, *args)
    store.save(company_id, state)
    return state_to_dict(state)


# ---------- POST /companies/{company_id}/cases ----------
@router.post("/cases", status_code=201)
def open_case(
    company_id: str,
    body: OpenCaseRequest,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
) -> Dict[str, Any]:
    if store.find(company_id, body.case_id) is not None:
        raise HTTPException(status_code=409, detail="Case already exists")
    state = workflow.open_case(body.case_id, body.actor_id, now, holidays, notes=body.notes)
    store.save(company_id, state)
    logger.info(f"Opened case {company_id}/{body.case_id}")
    return state_to_dict(state)


# ---------- GET /companies/{company_id}/cases ----------
@router.get("/cases")
def list_cases(
    company_id: str,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> List[Dict[str, Any]]:
    """Executive summary of every case of a company."""
    return [
        _summary_dict(reporting.case_summary(workflow.recompute_all(s, now, holidays, thresholds)))
        for s in store.list(company_id)
    ]


def _summary_dict(summary: reporting.CaseSummary) -> Dict[str, Any]:
    return {
        "case_id": summary.case_id,
        "current_stage": summary.current_stage.value,
        "progress": summary.progress,
        "pending_legal": summary.pending_legal,
        "critical_alerts": summary.critical_alerts,
        "compliance_status": summary.compliance_status.value,
        "next_deadline_id": summary.next_deadline.id if summary.next_deadline else None,
    }


# ---------- GET /companies/{company_id}/cases/{case_id} ----------
@router.get("/cases/{case_id}")
def get_case(
    company_id: str,
    case_id: str,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    """Stored snapshot, recomputed against the current time."""
    return state_to_dict(_load(store, company_id, case_id, now, holidays, thresholds))


# ---------- POST /companies/{company_id}/cases/{case_id}/transitions ----------
@router.post("/cases/{case_id}/transitions")
def transition_case(
    company_id: str,
    case_id: str,
    body: TransitionRequest,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    state = _load(store, company_id, case_id, now, holidays, thresholds)
    state = workflow.transition(state, body.target_stage, body.actor_id, now, holidays, notes=body.notes)
    store.save(company_id, state)
    logger.info(f"Case {company_id}/{case_id} moved to {body.target_stage.value} by {body.actor_id}")
    return state_to_dict(state)


# ---------- deadline operations ----------
@router.post("/cases/{case_id}/deadlines/{deadline_id}/complete")
def complete_deadline(
    company_id: str,
    case_id: str,
    deadline_id: str,
    body: CompleteRequest,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    return _mutate_deadline(store, company_id, case_id, deadline_id, now, holidays, thresholds,
                            deadlines.complete, body.completed_by, now)


@router.post("/cases/{case_id}/deadlines/{deadline_id}/extend")
def extend_deadline(
    company_id: str,
    case_id: str,
    deadline_id: str,
    body: ExtendRequest,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    logger.info(f"Extending {deadline_id} by {body.additional_days} days, approved by {body.approved_by}")
    return _mutate_deadline(store, company_id, case_id, deadline_id, now, holidays, thresholds,
                            deadlines.extend, body.additional_days, body.reason, body.approved_by, holidays, now)


@router.post("/cases/{case_id}/deadlines/{deadline_id}/progress")
def update_progress(
    company_id: str,
    case_id: str,
    deadline_id: str,
    body: ProgressRequest,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    return _mutate_deadline(store, company_id, case_id, deadline_id, now, holidays, thresholds,
                            deadlines.update_progress, body.percentage)


@router.post("/cases/{case_id}/deadlines/{deadline_id}/notifications")
def record_notification(
    company_id: str,
    case_id: str,
    deadline_id: str,
    body: NotificationRequest,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    return _mutate_deadline(store, company_id, case_id, deadline_id, now, holidays, thresholds,
                            deadlines.record_notification, body.recipient, body.channel, now)


@router.put("/cases/{case_id}/deadlines/{deadline_id}/notes")
def update_notes(
    company_id: str,
    case_id: str,
    deadline_id: str,
    body: NotesRequest,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    return _mutate_deadline(store, company_id, case_id, deadline_id, now, holidays, thresholds,
                            deadlines.update_notes, body.notes)


# ---------- extension requests ----------
@router.post("/cases/{case_id}/deadlines/{deadline_id}/extension-requests", status_code=201)
def request_extension(
    company_id: str,
    case_id: str,
    deadline_id: str,
    body: ExtensionRequestBody,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    """File a pending extension request; the due date is not moved yet."""
    state = _load(store, company_id, case_id, now, holidays, thresholds)
    state, request = extensions.request_case_extension(
        state, deadline_id, body.requested_days, body.justification, body.requested_by, now,
    )
    store.save(company_id, state)
    logger.info(f"Extension request {request.id} filed for {deadline_id} by {body.requested_by}")
    return state_to_dict(state)


@router.post("/cases/{case_id}/extension-requests/{request_id}/decision")
def decide_extension(
    company_id: str,
    case_id: str,
    request_id: str,
    body: ExtensionDecision,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    state = _load(store, company_id, case_id, now, holidays, thresholds)
    state = extensions.decide_case_extension(
        state, request_id, body.approved, body.decided_by, now, holidays, body.comments,
    )
    store.save(company_id, state)
    outcome = "approved" if body.approved else "rejected"
    logger.info(f"Extension request {request_id} {outcome} by {body.decided_by}")
    return state_to_dict(state)


# ---------- GET /companies/{company_id}/cases/{case_id}/alerts ----------
@router.get("/cases/{case_id}/alerts")
def case_alerts(
    company_id: str,
    case_id: str,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> List[Dict[str, Any]]:
    """Reminder schedule for the open deadlines of the current stage."""
    state = _load(store, company_id, case_id, now, holidays, thresholds)
    return [
        {
            "deadline_id": a.deadline_id,
            "level": a.level.value,
            "trigger_date": a.trigger_date.isoformat(),
            "title": a.title,
            "message": a.message,
        }
        for d in workflow.active_deadlines_for_stage(state, state.current_stage)
        for a in alert_schedule(d, now, holidays)
    ]


# ---------- GET /companies/{company_id}/summary ----------
@router.get("/summary")
def portfolio_summary(
    company_id: str,
    store: CaseStore = Depends(get_store),
    now: datetime = Depends(get_clock),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
    thresholds: StatusThresholds = Depends(get_thresholds),
) -> Dict[str, Any]:
    cases = [workflow.recompute_all(s, now, holidays, thresholds) for s in store.list(company_id)]
    summary = reporting.summarize(cases)
    nxt = summary.next_critical_deadline
    return {
        "total": summary.total,
        "completed": summary.completed,
        "expired": summary.expired,
        "critical": summary.critical,
        "warning": summary.warning,
        "extended": summary.extended,
        "on_track": summary.on_track,
        "completion_rate": summary.completion_rate,
        "compliance_rate": summary.compliance_rate,
        "next_critical_deadline": deadline_to_dict(nxt) if nxt else None,
        "cases_by_stage": reporting.counts_by_stage(cases),
    }

