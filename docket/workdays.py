"""
docket.workdays
===============

Business-day calendar arithmetic.

A *business day* is any day that is not a Saturday, not a Sunday and not
in the supplied holiday set.  Every function here is pure: the holiday set
is always passed in explicitly and nothing is read from module globals.

Examples
--------
>>> from datetime import date
>>> fri = date(2025, 6, 27)
>>> add_business_days(fri, 3, frozenset({date(2025, 6, 30)}))
datetime.date(2025, 7, 3)
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import AbstractSet, Union

from .errors import OutOfRangeInput
from .models import DayCountPolicy

HolidaySet = AbstractSet[date]
DateLike = Union[date, datetime]

_ONE_DAY = timedelta(days=1)
_SATURDAY = 5


def as_date(value: DateLike) -> date:
    """Drop the time component of a ``datetime``; pass dates through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def is_business_day(day: DateLike, holidays: HolidaySet = frozenset()) -> bool:
    """Return ``True`` unless *day* is a weekend day or a holiday."""
    day = as_date(day)
    return day.weekday() < _SATURDAY and day not in holidays


def _check_count(n: int) -> None:
    if n < 0:
        raise OutOfRangeInput(f"day count must be non-negative, got {n}")


def add_business_days(day: DateLike, n: int, holidays: HolidaySet = frozenset()) -> date:
    """
    Step forward one calendar day at a time until *n* business days have
    been passed.  The starting day itself is never counted, so ``n == 0``
    returns *day* unchanged.
    """
    _check_count(n)
    current = as_date(day)
    added = 0
    while added < n:
        current += _ONE_DAY
        if is_business_day(current, holidays):
            added += 1
    return current


def subtract_business_days(day: DateLike, n: int, holidays: HolidaySet = frozenset()) -> date:
    """Mirror of :func:`add_business_days` walking backwards."""
    _check_count(n)
    current = as_date(day)
    removed = 0
    while removed < n:
        current -= _ONE_DAY
        if is_business_day(current, holidays):
            removed += 1
    return current


def add_calendar_days(day: DateLike, n: int) -> date:
    _check_count(n)
    return as_date(day) + timedelta(days=n)


def add_days(
    day: DateLike,
    n: int,
    holidays: HolidaySet = frozenset(),
    policy: DayCountPolicy = DayCountPolicy.BUSINESS,
) -> date:
    """Advance *day* by *n* days counted according to *policy*."""
    if DayCountPolicy(policy) is DayCountPolicy.CALENDAR:
        return add_calendar_days(day, n)
    return add_business_days(day, n, holidays)


def count_business_days(start: DateLike, end: DateLike, holidays: HolidaySet = frozenset()) -> int:
    """
    Inclusive number of business days in ``[start, end]``.

    When *end* falls before *start* the count is taken over ``[end, start]``
    and returned negated.  A due date in the past therefore yields a
    negative figure whose magnitude is the number of overdue business days,
    due day included.
    """
    start, end = as_date(start), as_date(end)
    if end < start:
        return -count_business_days(end, start, holidays)

    count = 0
    current = start
    while current <= end:
        if is_business_day(current, holidays):
            count += 1
        current += _ONE_DAY
    return count
