"""
docket.templates
================

Default statutory deadline table for the harassment-investigation
procedure, plus a helper to build templates from configuration data.

Each template declares its own :class:`~docket.models.DayCountPolicy`.
Only *measures adoption* runs on calendar days; everything else counts
business days.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Tuple

from .errors import InvalidTemplate, OutOfRangeInput
from .models import DayCountPolicy, DeadlineTemplate, Priority, Stage

B = DayCountPolicy.BUSINESS
C = DayCountPolicy.CALENDAR

DEFAULT_TEMPLATES: Tuple[DeadlineTemplate, ...] = (
    DeadlineTemplate(
        key="regulator_initial_notice",
        name="Initial notice to labour regulator",
        description="Notify the labour regulator that a complaint was received",
        days=3,
        day_count_policy=B,
        associated_stage=Stage.RECEPTION,
        legal_reference="Labour Code, art. 211-B",
        priority=Priority.HIGH,
    ),
    DeadlineTemplate(
        key="precautionary_measures",
        name="Precautionary measures",
        description="Put protective or precautionary measures in place",
        days=3,
        day_count_policy=B,
        associated_stage=Stage.RECEPTION,
        legal_reference="Labour Code, art. 211-B",
        priority=Priority.HIGH,
    ),
    DeadlineTemplate(
        key="complaint_amendment",
        name="Complaint amendment",
        description="Complainant supplies missing or incomplete information",
        days=5,
        day_count_policy=B,
        associated_stage=Stage.COMPLAINT_AMENDMENT,
        legal_reference="Labour Code, art. 211-A",
        priority=Priority.HIGH,
    ),
    DeadlineTemplate(
        key="insurer_notification",
        name="Notice to occupational insurer",
        description="Notify the occupational-safety insurer of the complaint",
        days=5,
        day_count_policy=B,
        associated_stage=Stage.REGULATOR_NOTIFICATION,
        legal_reference="Labour Code, art. 211-B",
        priority=Priority.MEDIUM,
    ),
    DeadlineTemplate(
        key="internal_investigation",
        name="Internal investigation",
        description="Complete the internal investigation",
        days=30,
        day_count_policy=B,
        associated_stage=Stage.INVESTIGATION,
        legal_reference="Labour Code, art. 211-C",
        priority=Priority.HIGH,
        max_extension_days=30,
    ),
    DeadlineTemplate(
        key="regulator_submission",
        name="Case file sent to regulator",
        description="Send the final report and case file to the labour regulator",
        days=2,
        day_count_policy=B,
        associated_stage=Stage.INVESTIGATION_COMPLETE,
        legal_reference="Labour Code, art. 211-D",
        priority=Priority.HIGH,
    ),
    DeadlineTemplate(
        key="regulator_response",
        name="Regulator response",
        description="Labour regulator reviews the case file and responds",
        days=30,
        day_count_policy=B,
        associated_stage=Stage.REGULATOR_SUBMISSION,
        legal_reference="Labour Code, art. 211-E",
        priority=Priority.MEDIUM,
    ),
    DeadlineTemplate(
        key="measures_adoption",
        name="Measures adoption",
        description="Implement the measures and sanctions ordered (calendar days)",
        days=15,
        day_count_policy=C,
        associated_stage=Stage.MEASURES_ADOPTION,
        legal_reference="Labour Code, art. 211-F",
        priority=Priority.HIGH,
    ),
    DeadlineTemplate(
        key="fine_appeal",
        name="Fine appeal",
        description="Window to challenge the fines applied",
        days=15,
        day_count_policy=B,
        associated_stage=Stage.SANCTIONS,
        legal_reference="Labour Code, art. 211-G",
        priority=Priority.MEDIUM,
    ),
)


def templates_for_stage(
    stage: Stage,
    templates: Iterable[DeadlineTemplate] = DEFAULT_TEMPLATES,
) -> Tuple[DeadlineTemplate, ...]:
    """Templates whose clock starts when a case enters *stage*."""
    return tuple(t for t in templates if t.associated_stage == stage)


def validate_template(template: DeadlineTemplate) -> DeadlineTemplate:
    """
    Raise :class:`InvalidTemplate` when a required field is missing and
    :class:`OutOfRangeInput` when the day count is negative.
    """
    missing = [
        label
        for label, value in (
            ("name", template.name),
            ("day_count_policy", template.day_count_policy),
            ("associated_stage", template.associated_stage),
        )
        if not value
    ]
    if missing:
        raise InvalidTemplate(
            f"template {template.key or '<unnamed>'!r} is missing {', '.join(missing)}"
        )
    if not isinstance(template.day_count_policy, DayCountPolicy):
        raise InvalidTemplate(f"unknown day-count policy {template.day_count_policy!r}")
    if not isinstance(template.associated_stage, Stage):
        raise InvalidTemplate(f"unknown stage {template.associated_stage!r}")
    if template.days is None or template.days < 0:
        raise OutOfRangeInput(f"template {template.key!r} has a negative day count")
    return template


def template_from_dict(data: Mapping[str, Any]) -> DeadlineTemplate:
    """
    Build and validate a template from a configuration mapping.

    Example
    -------
    >>> template_from_dict({"key": "x", "name": "X", "days": 2,
    ...                     "day_count_policy": "business",
    ...                     "associated_stage": "reception"}).days
    2
    """
    for required in ("name", "day_count_policy", "associated_stage"):
        if not data.get(required):
            raise InvalidTemplate(f"template is missing {required}")
    try:
        policy = DayCountPolicy(data["day_count_policy"])
        stage = Stage(data["associated_stage"])
        priority = Priority(data.get("priority", Priority.MEDIUM))
    except ValueError as exc:
        raise InvalidTemplate(str(exc)) from exc

    return validate_template(
        DeadlineTemplate(
            key=str(data.get("key") or data["name"]),
            name=data["name"],
            description=data.get("description", ""),
            days=int(data.get("days", 0)),
            day_count_policy=policy,
            associated_stage=stage,
            is_legal_requirement=bool(data.get("is_legal_requirement", True)),
            legal_reference=data.get("legal_reference"),
            priority=priority,
            max_extension_days=data.get("max_extension_days"),
        )
    )
