from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GeoLocation


class GeoLocationRepository(Protocol):
    def list_active(self) -> Sequence[GeoLocation]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius: int,
        address: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def deactivate(self, location_id: int) -> bool:
        raise NotImplementedError
