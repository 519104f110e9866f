"""
docket.deadlines
================

Lifecycle of a single legal deadline.

Every function takes a :class:`~docket.models.Deadline` and returns a new
one; the input is never modified.  "Now" and the holiday set are explicit
parameters so status can be replayed deterministically.

State machine
-------------
::

    on_track -> warning -> critical -> expired
        \\___________ any non-completed ___________/
                  |                     |
              completed              extended -> (reclassified by time)

``completed`` is terminal.  ``expired`` is terminal for time-based
reclassification but may still be completed or extended.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

from .errors import InvalidTransition, OutOfRangeInput
from .models import (
    DEFAULT_THRESHOLDS,
    Deadline,
    DeadlineStatus,
    DeadlineTemplate,
    NotificationChannel,
    NotificationRecord,
    StatusThresholds,
)
from .templates import validate_template
from .workdays import HolidaySet, add_days, as_date, count_business_days


def initialize(
    template: DeadlineTemplate,
    start: datetime,
    holidays: HolidaySet = frozenset(),
    now: Optional[datetime] = None,
    deadline_id: Optional[str] = None,
) -> Deadline:
    """
    Build a fresh deadline from *template* whose clock starts at *start*.

    ``days_remaining`` is measured from *now* (defaults to *start*).
    """
    validate_template(template)
    end = add_days(start, template.days, holidays, template.day_count_policy)
    return Deadline(
        id=deadline_id or uuid.uuid4().hex,
        name=template.name,
        description=template.description,
        start_date=start,
        end_date=end,
        business_days_allotted=template.days,
        day_count_policy=template.day_count_policy,
        associated_stage=template.associated_stage,
        status=DeadlineStatus.ON_TRACK,
        days_remaining=count_business_days(now or start, end, holidays),
        is_legal_requirement=template.is_legal_requirement,
        legal_reference=template.legal_reference,
        priority=template.priority,
        progress_percentage=0,
        template_key=template.key,
        max_extension_days=template.max_extension_days,
    )


def classify(days_remaining: int, thresholds: StatusThresholds = DEFAULT_THRESHOLDS) -> DeadlineStatus:
    """Map a non-negative remaining business-day count to a status."""
    if days_remaining <= thresholds.critical_days:
        return DeadlineStatus.CRITICAL
    if days_remaining <= thresholds.warning_days:
        return DeadlineStatus.WARNING
    return DeadlineStatus.ON_TRACK


def recompute_status(
    deadline: Deadline,
    now: datetime,
    holidays: HolidaySet = frozenset(),
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
) -> Deadline:
    """
    Reclassify *deadline* against *now*.

    Completed deadlines are returned untouched.  Expired ones stay expired
    and only refresh their (negative) ``days_remaining``.
    """
    if deadline.status is DeadlineStatus.COMPLETED:
        return deadline

    remaining = count_business_days(now, deadline.end_date, holidays)
    if deadline.status is DeadlineStatus.EXPIRED or as_date(now) > deadline.end_date:
        status = DeadlineStatus.EXPIRED
    else:
        status = classify(remaining, thresholds)

    if status is deadline.status and remaining == deadline.days_remaining:
        return deadline
    return replace(deadline, status=status, days_remaining=remaining)


def complete(deadline: Deadline, completed_by: str, now: datetime) -> Deadline:
    if deadline.status is DeadlineStatus.COMPLETED:
        raise InvalidTransition(f"deadline {deadline.id!r} is already completed")
    return replace(
        deadline,
        status=DeadlineStatus.COMPLETED,
        progress_percentage=100,
        completed_by=completed_by,
        completed_date=now,
    )


def extend(
    deadline: Deadline,
    additional_days: int,
    reason: str,
    approved_by: str,
    holidays: HolidaySet = frozenset(),
    now: Optional[datetime] = None,
) -> Deadline:
    """
    Push the due date out by *additional_days* counted with the deadline's
    own day-count policy.

    The first extension stores the pre-extension due date in
    ``original_end_date``; later ones leave it alone.  When *now* is given
    ``days_remaining`` is measured against the new due date, otherwise it
    keeps its old value until the next :func:`recompute_status`.
    """
    if deadline.status is DeadlineStatus.COMPLETED:
        raise InvalidTransition(f"deadline {deadline.id!r} is completed and cannot be extended")
    if additional_days < 1:
        raise OutOfRangeInput(f"extension must be at least one day, got {additional_days}")

    total = deadline.extension_days_total + additional_days
    if deadline.max_extension_days is not None and total > deadline.max_extension_days:
        raise OutOfRangeInput(
            f"extension of {additional_days} days exceeds the maximum of "
            f"{deadline.max_extension_days} days for {deadline.name!r}"
        )

    new_end = add_days(deadline.end_date, additional_days, holidays, deadline.day_count_policy)
    remaining = deadline.days_remaining if now is None else count_business_days(now, new_end, holidays)
    return replace(
        deadline,
        end_date=new_end,
        days_remaining=remaining,
        original_end_date=deadline.original_end_date or deadline.end_date,
        extension_reason=reason,
        extension_approved_by=approved_by,
        extension_days_total=total,
        status=DeadlineStatus.EXTENDED,
    )


def update_progress(deadline: Deadline, percentage: float) -> Deadline:
    """Set progress, clamped to ``[0, 100]``."""
    clamped = int(round(min(100, max(0, percentage))))
    return replace(deadline, progress_percentage=clamped)


def record_notification(
    deadline: Deadline,
    recipient: str,
    channel: NotificationChannel,
    now: datetime,
) -> Deadline:
    """Append one entry to the notification log."""
    entry = NotificationRecord(date=now, recipient=recipient, channel=NotificationChannel(channel))
    return replace(deadline, notifications_sent=deadline.notifications_sent + (entry,))


def update_notes(deadline: Deadline, notes: Optional[str]) -> Deadline:
    return replace(deadline, notes=notes)


def days_overdue(deadline: Deadline, now: datetime) -> int:
    """Calendar days elapsed since the due date; 0 when not overdue."""
    if deadline.status is DeadlineStatus.COMPLETED:
        return 0
    return max(0, (as_date(now) - deadline.end_date).days)


# ---------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------
def filter_by_status(deadlines: Iterable[Deadline], status: DeadlineStatus) -> List[Deadline]:
    return [d for d in deadlines if d.status is status]


def upcoming(deadlines: Iterable[Deadline]) -> List[Deadline]:
    """Deadlines close to their due date (warning or critical)."""
    return [d for d in deadlines if d.status in (DeadlineStatus.WARNING, DeadlineStatus.CRITICAL)]


def expired(deadlines: Iterable[Deadline]) -> List[Deadline]:
    return filter_by_status(deadlines, DeadlineStatus.EXPIRED)


def urgency_key(deadline: Deadline):
    """Sort key: fewest days left, then highest priority, then id."""
    return (deadline.days_remaining, -deadline.priority.rank, deadline.id)


def next_critical(deadlines: Iterable[Deadline]) -> Optional[Deadline]:
    """
    The running deadline closest to its due date.  Completed and expired
    deadlines are skipped; an overdue deadline is not *upcoming*.
    """
    running = [d for d in deadlines if not d.is_terminal]
    if not running:
        return None
    return min(running, key=urgency_key)
