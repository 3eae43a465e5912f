from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GeoLocation:
    """Office coordinate with an allowed check-in radius (meters)."""

    location_id: int
    name: str
    latitude: float
    longitude: float
    radius: Optional[int] = None
    address: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class GeoCheckResult:
    valid: bool
    distance: int
    location: Optional[GeoLocation] = None
