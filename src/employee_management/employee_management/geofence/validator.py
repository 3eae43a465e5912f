from __future__ import annotations

import math
from typing import Iterable, Optional

from ..core.constants import DEFAULT_GEO_RADIUS_METERS, EARTH_RADIUS_METERS
from .model import GeoCheckResult, GeoLocation


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def validate_geo_location(latitude: float, longitude: float, locations: Iterable[GeoLocation]) -> GeoCheckResult:
    """Classify a check-in against the nearest office location.

    With no locations configured every position is accepted.
    """
    nearest: Optional[GeoLocation] = None
    min_distance = math.inf

    for loc in locations:
        dist = haversine_distance(latitude, longitude, loc.latitude, loc.longitude)
        if dist < min_distance:
            min_distance = dist
            nearest = loc

    if nearest is None:
        return GeoCheckResult(valid=True, distance=0, location=None)

    radius = nearest.radius or DEFAULT_GEO_RADIUS_METERS
    return GeoCheckResult(
        valid=min_distance <= radius,
        distance=int(round(min_distance)),
        location=nearest,
    )
