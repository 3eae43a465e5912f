from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def is_public_holiday(self, day: date) -> bool:
        raise NotImplementedError

    def list_for_year(self, year: int) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, name: str, holiday_date: date, type: str) -> int:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
