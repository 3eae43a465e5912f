from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_decimal, require_non_empty
from ..core.constants import DEFAULT_GEO_RADIUS_METERS
from ..core.exceptions import NotFoundError, ValidationError
from .model import GeoCheckResult, GeoLocation
from .repository import GeoLocationRepository
from .validator import validate_geo_location


class GeoFenceService:
    def __init__(self, locations: GeoLocationRepository):
        self._locations = locations

    def check(self, latitude: float, longitude: float) -> GeoCheckResult:
        return validate_geo_location(latitude, longitude, self._locations.list_active())

    def list_locations(self) -> Sequence[GeoLocation]:
        return self._locations.list_active()

    def add_location(
        self,
        *,
        name: str,
        latitude,
        longitude,
        radius=None,
        address: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Name")
        lat = float(require_decimal(latitude, "Latitude"))
        lng = float(require_decimal(longitude, "Longitude"))
        if not -90 <= lat <= 90 or not -180 <= lng <= 180:
            raise ValidationError("Coordinates out of range")
        if radius in (None, ""):
            radius_m = DEFAULT_GEO_RADIUS_METERS
        else:
            radius_m = int(require_decimal(radius, "Radius"))
        if radius_m <= 0:
            raise ValidationError("Radius must be > 0")
        return self._locations.create(name=name, latitude=lat, longitude=lng, radius=radius_m, address=address)

    def remove_location(self, location_id: int) -> None:
        if not self._locations.deactivate(int(location_id)):
            raise NotFoundError("Location not found")
