from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Holiday:
    """Company-wide public holiday."""

    holiday_id: int
    name: str
    holiday_date: date
    type: str = "NATIONAL"
