"""Working-day and leave-day arithmetic.

Sunday is the only fixed non-working weekday. Public holidays are looked up
through a caller supplied predicate so this module stays storage agnostic.
"""
from __future__ import annotations

import calendar
from collections import Counter
from datetime import date
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import iter_days
from ..core.constants import NON_WORKING_WEEKDAY
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceSummary

PAID_STATUSES = frozenset(
    {
        AttendanceStatus.PRESENT,
        AttendanceStatus.WFH,
        AttendanceStatus.ON_LEAVE,
        AttendanceStatus.PERSONAL_HOLIDAY,
        AttendanceStatus.HOLIDAY,
    }
)


def is_working_weekday(day: date) -> bool:
    return day.weekday() != NON_WORKING_WEEKDAY


def working_days_in_month(year: int, month: int, override: Optional[int] = None) -> int:
    if override:
        return int(override)
    days_in_month = calendar.monthrange(year, month)[1]
    return sum(1 for d in range(1, days_in_month + 1) if is_working_weekday(date(year, month, d)))


def leave_days_between(
    from_date: date,
    to_date: date,
    is_half_day: bool = False,
    is_holiday: Optional[Callable[[date], bool]] = None,
) -> float:
    if is_half_day:
        return 0.5

    days = 0
    for day in iter_days(from_date, to_date):
        if not is_working_weekday(day):
            continue
        if is_holiday is not None and is_holiday(day):
            continue
        days += 1
    return days


def summarize_month(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    counts = Counter(r.status for r in records)
    return AttendanceSummary(
        present_days=sum(counts[s] for s in PAID_STATUSES),
        lop_days=counts[AttendanceStatus.ABSENT],
        half_day_count=counts[AttendanceStatus.HALF_DAY],
        by_status={s.value: counts[s] for s in AttendanceStatus},
    )
