from __future__ import annotations

from typing import Optional, Protocol

from .model import CompanySettings


class SettingsRepository(Protocol):
    def get_company_settings(self) -> CompanySettings:
        """Return stored settings, or defaults when none were saved yet."""

        raise NotImplementedError

    def save_company_settings(
        self,
        *,
        name: Optional[str] = None,
        working_days_per_month: Optional[int] = None,
        geo_fence_enabled: Optional[bool] = None,
    ) -> CompanySettings:
        raise NotImplementedError
