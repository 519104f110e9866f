"""
docket.models
=============

Dataclasses and enums describing a legal deadline, a case's stage history
and the case workflow snapshot that ties them together.

All records are frozen: the engine never edits a snapshot in place, it
returns a new one built with :func:`dataclasses.replace`.  Logs such as
``notifications_sent`` and ``stage_history`` are tuples so that entries
can only ever be appended.  The module carries **no** external-library
dependencies so importing `docket` stays cheap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


class Stage(str, Enum):
    """Steps of the harassment-investigation procedure."""
    COMPLAINT_FILED = "complaint_filed"
    RECEPTION = "reception"
    COMPLAINT_AMENDMENT = "complaint_amendment"
    PRECAUTIONARY_MEASURES = "precautionary_measures"
    REGULATOR_NOTIFICATION = "regulator_notification"
    INSURER_NOTIFICATION = "insurer_notification"
    DECISION_TO_INVESTIGATE = "decision_to_investigate"
    INVESTIGATION = "investigation"
    REPORT_DRAFTING = "report_drafting"
    REPORT_REVIEW = "report_review"
    INVESTIGATION_COMPLETE = "investigation_complete"
    FINAL_REPORT = "final_report"
    REGULATOR_SUBMISSION = "regulator_submission"
    REGULATOR_RESOLUTION = "regulator_resolution"
    MEASURES_ADOPTION = "measures_adoption"
    SANCTIONS = "sanctions"
    CLOSED = "closed"

    # special-case variants
    THIRD_PARTY = "third_party"
    SUBCONTRACTING = "subcontracting"
    FALSE_CLAIM = "false_claim"
    RETALIATION_REVIEW = "retaliation_review"

    # documented short-circuits
    DERIVED_TO_AUTHORITY = "derived_to_authority"
    ABANDONED = "abandoned"

    def __str__(self) -> str:        # nicer REPL display
        return self.value


class DeadlineStatus(str, Enum):
    """Live classification of a deadline."""
    ON_TRACK = "on_track"
    WARNING = "warning"
    CRITICAL = "critical"
    EXPIRED = "expired"
    COMPLETED = "completed"
    EXTENDED = "extended"

    def __str__(self) -> str:
        return self.value


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Numeric weight, higher is more urgent."""
        return {"low": 0, "medium": 1, "high": 2}[self.value]


class DayCountPolicy(str, Enum):
    """How ``business_days_allotted`` is turned into a due date."""
    BUSINESS = "business"
    CALENDAR = "calendar"


class NotificationChannel(str, Enum):
    EMAIL = "email"
    SYSTEM = "system"
    SMS = "sms"


@dataclass(frozen=True)
class StatusThresholds:
    """
    Business-day limits used to classify a running deadline.

    A deadline with ``days_remaining <= critical_days`` is *critical*,
    ``<= warning_days`` is *warning*, anything above is *on track*.
    """
    warning_days: int = 3
    critical_days: int = 1


DEFAULT_THRESHOLDS = StatusThresholds()


@dataclass(frozen=True)
class DeadlineTemplate:
    """
    Static description of a legally bound time window.

    Parameters
    ----------
    key : str
        Stable identifier of the template (e.g. ``"internal_investigation"``).
    name, description : str
        Human labels copied onto every deadline built from the template.
    days : int
        Length of the window, counted according to ``day_count_policy``.
    day_count_policy : DayCountPolicy
        ``business`` skips weekends and holidays, ``calendar`` does not.
    associated_stage : Stage
        Entering this stage starts the clock.
    is_legal_requirement : bool, default=True
        Statutory (``True``) or internal / operational deadline.
    legal_reference : str | None
        Citation shown next to the deadline.
    priority : Priority, default=MEDIUM
    max_extension_days : int | None
        Cap on the cumulative extension; ``None`` means uncapped.
    """
    key: str
    name: str
    description: str
    days: int
    day_count_policy: DayCountPolicy
    associated_stage: Stage
    is_legal_requirement: bool = True
    legal_reference: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    max_extension_days: Optional[int] = None


@dataclass(frozen=True)
class NotificationRecord:
    """One entry of a deadline's append-only notification log."""
    date: datetime
    recipient: str
    channel: NotificationChannel


@dataclass(frozen=True)
class Deadline:
    """One legally bound window tracked for a case."""
    id: str
    name: str
    description: str
    start_date: datetime
    end_date: date
    business_days_allotted: int
    day_count_policy: DayCountPolicy
    associated_stage: Stage
    status: DeadlineStatus = DeadlineStatus.ON_TRACK
    days_remaining: int = 0
    is_legal_requirement: bool = True
    legal_reference: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    progress_percentage: int = 0
    notifications_sent: Tuple[NotificationRecord, ...] = ()
    notes: Optional[str] = None
    template_key: Optional[str] = None

    original_end_date: Optional[date] = None
    extension_reason: Optional[str] = None
    extension_approved_by: Optional[str] = None
    extension_days_total: int = 0
    max_extension_days: Optional[int] = None

    completed_by: Optional[str] = None
    completed_date: Optional[datetime] = None

    # Convenience helpers -------------------------------------------------
    @property
    def is_extended(self) -> bool:
        return self.original_end_date is not None

    @property
    def is_terminal(self) -> bool:
        """Completed or expired: time alone no longer changes the status."""
        return self.status in (DeadlineStatus.COMPLETED, DeadlineStatus.EXPIRED)


class ExtensionStatus(str, Enum):
    """Outcome of an extension request."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExtensionRequest:
    """
    A justified request to push a deadline out, kept for the audit trail.

    The due date only moves once the request is approved; a rejected
    request stays on record with the decision and its comments.
    """
    id: str
    deadline_id: str
    requested_days: int
    justification: str
    requested_by: str
    requested_at: datetime
    status: ExtensionStatus = ExtensionStatus.PENDING
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
    comments: Optional[str] = None
    new_end_date: Optional[date] = None


@dataclass(frozen=True)
class StageTransition:
    """Immutable record appended each time a case enters a stage."""
    stage: Stage
    timestamp: datetime
    actor_id: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class CaseWorkflowState:
    """
    Snapshot of one case as seen by the engine.

    The engine receives a snapshot and returns a new one; storing it is the
    caller's business.
    """
    case_id: str
    current_stage: Stage
    stage_history: Tuple[StageTransition, ...] = ()
    deadlines: Tuple[Deadline, ...] = field(default_factory=tuple)
    extension_requests: Tuple[ExtensionRequest, ...] = ()

    def deadline(self, deadline_id: str) -> Optional[Deadline]:
        """Return the deadline with *deadline_id* or ``None``."""
        for d in self.deadlines:
            if d.id == deadline_id:
                return d
        return None

    def extension_request(self, request_id: str) -> Optional[ExtensionRequest]:
        for r in self.extension_requests:
            if r.id == request_id:
                return r
        return None
