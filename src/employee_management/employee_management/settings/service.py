from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..holidays.model import Holiday
from ..holidays.repository import HolidayRepository
from .model import CompanySettings
from .repository import SettingsRepository


class SettingsService:
    def __init__(self, settings: SettingsRepository, holidays: HolidayRepository):
        self._settings = settings
        self._holidays = holidays

    def current(self) -> CompanySettings:
        return self._settings.get_company_settings()

    def update(
        self,
        *,
        name: Optional[str] = None,
        working_days_per_month=None,
        geo_fence_enabled: Optional[bool] = None,
    ) -> CompanySettings:
        days = None
        if working_days_per_month not in (None, ""):
            try:
                days = int(working_days_per_month)
            except (TypeError, ValueError):
                raise ValidationError("Working days must be an integer")
            if not 1 <= days <= 31:
                raise ValidationError("Working days must be between 1 and 31")
        return self._settings.save_company_settings(
            name=(name or "").strip() or None,
            working_days_per_month=days,
            geo_fence_enabled=None if geo_fence_enabled is None else bool(geo_fence_enabled),
        )

    def list_holidays(self, year: int) -> Sequence[Holiday]:
        return self._holidays.list_for_year(int(year))

    def add_holiday(self, *, name: str, holiday_date: date, type: str = "NATIONAL") -> int:
        name = require_non_empty(name, "Holiday name")
        if self._holidays.is_public_holiday(holiday_date):
            raise ConflictError("A holiday already exists on this date")
        return self._holidays.create(name=name, holiday_date=holiday_date, type=(type or "NATIONAL").upper())

    def delete_holiday(self, holiday_id: int) -> None:
        if not self._holidays.delete(int(holiday_id)):
            raise NotFoundError("Holiday not found")
