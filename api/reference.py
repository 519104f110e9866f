"""
Reference endpoints: the stage table, the deadline templates and a
business-day calculator for the front-end date pickers.
"""

from datetime import date
from typing import FrozenSet

from fastapi import APIRouter, Depends, Query

from docket.stages import TRANSITIONS, display_name, suggested_next
from docket.templates import DEFAULT_TEMPLATES
from docket.workdays import add_business_days, count_business_days

from .deps import get_holiday_set

router = APIRouter(tags=["reference"])


@router.get("/stages")
def list_stages():
    """Every stage with its label, permitted successors and suggested next step."""
    return [
        {
            "stage": stage.value,
            "label": display_name(stage),
            "successors": sorted(t.value for t in targets),
            "suggested_next": getattr(suggested_next(stage), "value", None),
        }
        for stage, targets in TRANSITIONS.items()
    ]


@router.get("/templates")
def list_templates():
    return [
        {
            "key": t.key,
            "name": t.name,
            "days": t.days,
            "day_count_policy": t.day_count_policy.value,
            "associated_stage": t.associated_stage.value,
            "is_legal_requirement": t.is_legal_requirement,
            "legal_reference": t.legal_reference,
            "priority": t.priority.value,
            "max_extension_days": t.max_extension_days,
        }
        for t in DEFAULT_TEMPLATES
    ]


@router.get("/calendar/add-business-days")
def calendar_add_business_days(
    start: date,
    days: int = Query(..., ge=0, description="Business days to add"),
    holidays: FrozenSet[date] = Depends(get_holiday_set),
):
    end = add_business_days(start, days, holidays)
    return {
        "start": start.isoformat(),
        "days": days,
        "end": end.isoformat(),
        "business_days_in_range": count_business_days(start, end, holidays),
    }
