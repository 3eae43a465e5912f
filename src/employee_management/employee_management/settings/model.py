from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CompanySettings:
    """Company-wide knobs resolved once per request and passed to services."""

    name: str = ""
    working_days_per_month: Optional[int] = None
    geo_fence_enabled: bool = True
