from __future__ import annotations

from typing import Optional, Sequence

from ..database.mysql_base import MySQLRepository, fetchall
from .model import GeoLocation
from .repository import GeoLocationRepository


class MySQLGeoLocationRepository(MySQLRepository, GeoLocationRepository):
    def list_active(self) -> Sequence[GeoLocation]:
        with self._cursor() as cur:
            cur.execute(
                """
                SELECT location_id, name, latitude, longitude, radius, address, is_active
                FROM geo_locations
                WHERE is_active=1
                ORDER BY created_at ASC, location_id ASC
                """
            )
            return [
                GeoLocation(
                    location_id=int(r["location_id"]),
                    name=r["name"],
                    latitude=float(r["latitude"]),
                    longitude=float(r["longitude"]),
                    radius=int(r["radius"]) if r.get("radius") is not None else None,
                    address=r.get("address"),
                    is_active=bool(r["is_active"]),
                )
                for r in fetchall(cur)
            ]

    def create(
        self,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius: int,
        address: Optional[str] = None,
    ) -> int:
        with self._cursor() as cur:
            cur.execute(
                """
                INSERT INTO geo_locations(name, address, latitude, longitude, radius)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, address, float(latitude), float(longitude), int(radius)),
            )
            return int(cur.lastrowid)

    def deactivate(self, location_id: int) -> bool:
        with self._cursor() as cur:
            cur.execute("UPDATE geo_locations SET is_active=0 WHERE location_id=%s", (int(location_id),))
            return cur.rowcount > 0
