from __future__ import annotations

from typing import Optional

from ..database.mysql_base import MySQLRepository, fetchone
from .model import CompanySettings
from .repository import SettingsRepository

_SETTINGS_ID = 1


class MySQLSettingsRepository(MySQLRepository, SettingsRepository):
    @staticmethod
    def _to_model(row: Optional[dict]) -> CompanySettings:
        if not row:
            return CompanySettings()
        wd = row.get("working_days_per_month")
        return CompanySettings(
            name=row.get("name") or "",
            working_days_per_month=int(wd) if wd else None,
            geo_fence_enabled=bool(row.get("geo_fence_enabled", True)),
        )

    def get_company_settings(self) -> CompanySettings:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT name, working_days_per_month, geo_fence_enabled
                FROM company_settings
                WHERE settings_id=%s
                """,
                (_SETTINGS_ID,),
            )
            return self._to_model(fetchone(cur))

    def save_company_settings(
        self,
        *,
        name: Optional[str] = None,
        working_days_per_month: Optional[int] = None,
        geo_fence_enabled: Optional[bool] = None,
    ) -> CompanySettings:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO company_settings(settings_id, name, working_days_per_month, geo_fence_enabled)
                VALUES(%s, COALESCE(%s, ''), %s, COALESCE(%s, 1))
                ON DUPLICATE KEY UPDATE
                    name=COALESCE(%s, name),
                    working_days_per_month=COALESCE(%s, working_days_per_month),
                    geo_fence_enabled=COALESCE(%s, geo_fence_enabled)
                """,
                (
                    _SETTINGS_ID,
                    name,
                    working_days_per_month,
                    geo_fence_enabled,
                    name,
                    working_days_per_month,
                    geo_fence_enabled,
                ),
            )
            cur.execute(
                "SELECT name, working_days_per_month, geo_fence_enabled FROM company_settings WHERE settings_id=%s",
                (_SETTINGS_ID,),
            )
            return self._to_model(fetchone(cur))
