from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class MonthRange:
    start: date
    end: date

    @property
    def year(self) -> int:
        return self.start.year

    @property
    def month(self) -> int:
        return self.start.month

    @property
    def label(self) -> str:
        return self.start.strftime("%Y-%m")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def month_range(value: str) -> MonthRange:
    """Parse YYYY-MM into the first and last day of that month."""
    try:
        start = datetime.strptime(value, "%Y-%m").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid month (YYYY-MM): {value!r}")
    last_day = calendar.monthrange(start.year, start.month)[1]
    return MonthRange(start=start, end=start.replace(day=last_day))


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end inclusive. Empty when start > end."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch it easily.
    """
    return datetime.now()
