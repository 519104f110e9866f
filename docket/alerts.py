"""
docket.alerts
=============

Escalating reminder schedule for a deadline.

Reminders are planned 10, 5 and 2 business days before the due date and
on the due date itself.  The engine only computes *when* a reminder is
due; sending it is the notifier's job, which afterwards logs the fact via
:func:`docket.deadlines.record_notification`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Tuple

from .models import Deadline, DeadlineStatus
from .workdays import HolidaySet, as_date, count_business_days, subtract_business_days


class AlertLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    URGENT = "urgent"
    CRITICAL = "critical"


# (business days before the due date, level)
LEAD_TIMES: Tuple[Tuple[int, AlertLevel], ...] = (
    (10, AlertLevel.INFO),
    (5, AlertLevel.WARNING),
    (2, AlertLevel.URGENT),
)


@dataclass(frozen=True)
class ScheduledAlert:
    deadline_id: str
    level: AlertLevel
    trigger_date: date
    title: str
    message: str


def alert_schedule(deadline: Deadline, now: datetime, holidays: HolidaySet = frozenset()) -> Tuple[ScheduledAlert, ...]:
    """
    Reminders still ahead for *deadline* as of *now*, earliest first.

    An early reminder is only planned while more than its lead time
    remains; the due-day reminder is planned as long as the deadline is
    not overdue.  Completed deadlines get none.
    """
    if deadline.status is DeadlineStatus.COMPLETED:
        return ()

    remaining = count_business_days(now, deadline.end_date, holidays)
    alerts = []
    for lead, level in LEAD_TIMES:
        if remaining > lead:
            alerts.append(ScheduledAlert(
                deadline_id=deadline.id,
                level=level,
                trigger_date=subtract_business_days(deadline.end_date, lead, holidays),
                title=f"{deadline.name}: {lead} business days left",
                message=f"{lead} business days remain to complete {deadline.name!r}.",
            ))

    if as_date(now) <= deadline.end_date and deadline.status is not DeadlineStatus.EXPIRED:
        alerts.append(ScheduledAlert(
            deadline_id=deadline.id,
            level=AlertLevel.CRITICAL,
            trigger_date=deadline.end_date,
            title=f"{deadline.name}: due today",
            message=f"Today is the last day to complete {deadline.name!r}.",
        ))
    return tuple(alerts)
