"""
docket.reporting
================

Read-only aggregation over many case snapshots.

Callers are expected to run :func:`docket.workflow.recompute_all` first;
nothing here looks at the clock.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from . import deadlines as engine
from .models import CaseWorkflowState, Deadline, DeadlineStatus, Priority, Stage
from .workflow import pending_legal_deadlines, process_progress


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    AT_RISK = "at_risk"
    NON_COMPLIANT = "non_compliant"


@dataclass(frozen=True)
class PortfolioSummary:
    total: int
    completed: int
    expired: int
    critical: int
    warning: int
    extended: int
    on_track: int
    completion_rate: float
    compliance_rate: float
    next_critical_deadline: Optional[Deadline]


@dataclass(frozen=True)
class CaseSummary:
    case_id: str
    current_stage: Stage
    progress: int
    pending_legal: int
    critical_alerts: int
    compliance_status: ComplianceStatus
    next_deadline: Optional[Deadline]


def _rate(part: int, total: int) -> float:
    return part / total if total else 0.0


def summarize_deadlines(deadlines: Iterable[Deadline]) -> PortfolioSummary:
    """Counts, rates and the next critical deadline for a flat list."""
    deadlines = list(deadlines)
    counts = Counter(d.status for d in deadlines)
    total = len(deadlines)
    completed = counts[DeadlineStatus.COMPLETED]
    on_track = counts[DeadlineStatus.ON_TRACK]
    return PortfolioSummary(
        total=total,
        completed=completed,
        expired=counts[DeadlineStatus.EXPIRED],
        critical=counts[DeadlineStatus.CRITICAL],
        warning=counts[DeadlineStatus.WARNING],
        extended=counts[DeadlineStatus.EXTENDED],
        on_track=on_track,
        completion_rate=_rate(completed, total),
        compliance_rate=_rate(completed + on_track, total),
        next_critical_deadline=engine.next_critical(deadlines),
    )


def summarize(cases: Iterable[CaseWorkflowState]) -> PortfolioSummary:
    """Portfolio-wide statistics over every deadline of every case."""
    return summarize_deadlines(d for case in cases for d in case.deadlines)


def critical_alerts(deadlines: Iterable[Deadline]) -> List[Deadline]:
    """
    Deadlines that need attention: expired statutory ones, critical ones,
    and high-priority warnings.  Most severe first.
    """
    severity = {DeadlineStatus.EXPIRED: 0, DeadlineStatus.CRITICAL: 1, DeadlineStatus.WARNING: 2}
    flagged = [
        d for d in deadlines
        if (d.status is DeadlineStatus.EXPIRED and d.is_legal_requirement)
        or d.status is DeadlineStatus.CRITICAL
        or (d.status is DeadlineStatus.WARNING and d.priority is Priority.HIGH)
    ]
    return sorted(flagged, key=lambda d: (severity[d.status],) + engine.urgency_key(d))


def compliance_status(deadlines: Iterable[Deadline]) -> ComplianceStatus:
    alerts = critical_alerts(deadlines)
    if any(d.status is DeadlineStatus.EXPIRED for d in alerts):
        return ComplianceStatus.NON_COMPLIANT
    if alerts:
        return ComplianceStatus.AT_RISK
    return ComplianceStatus.COMPLIANT


def case_summary(state: CaseWorkflowState) -> CaseSummary:
    """Executive summary of one case."""
    return CaseSummary(
        case_id=state.case_id,
        current_stage=state.current_stage,
        progress=process_progress(state),
        pending_legal=len(pending_legal_deadlines(state)),
        critical_alerts=len(critical_alerts(state.deadlines)),
        compliance_status=compliance_status(state.deadlines),
        next_deadline=engine.next_critical(state.deadlines),
    )


def counts_by_stage(cases: Iterable[CaseWorkflowState]) -> Dict[str, int]:
    """Number of cases currently at each stage (zeroes included)."""
    counts = {s.value: 0 for s in Stage}
    for case in cases:
        counts[case.current_stage.value] += 1
    return counts
