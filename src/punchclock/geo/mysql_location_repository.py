from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CompanyLocation
from .repository import LocationRepository

_COLUMNS = "location_id, name, latitude, longitude, radius_meters, is_active, description"


def _to_location(r: dict) -> CompanyLocation:
    return CompanyLocation(
        location_id=int(r["location_id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_meters=int(r["radius_meters"]),
        is_active=bool(r["is_active"]),
        description=r.get("description"),
    )


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[CompanyLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM company_locations WHERE is_active=1 ORDER BY name")
            return [_to_location(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[CompanyLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM company_locations ORDER BY name")
            return [_to_location(r) for r in fetchall(cur)]

    def get_by_id(self, location_id: int) -> Optional[CompanyLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM company_locations WHERE location_id=%s", (int(location_id),))
            r = fetchone(cur)
            return _to_location(r) if r else None

    def create(
        self,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        is_active: bool = True,
        description: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO company_locations(name, latitude, longitude, radius_meters, is_active, description)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, latitude, longitude, int(radius_meters), int(bool(is_active)), description),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        location_id: int,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        description: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE company_locations
                SET name=%s, latitude=%s, longitude=%s, radius_meters=%s, description=%s
                WHERE location_id=%s
                """,
                (name, latitude, longitude, int(radius_meters), description, int(location_id)),
            )
            return cur.rowcount > 0

    def set_active(self, location_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE company_locations SET is_active=%s WHERE location_id=%s",
                (int(bool(is_active)), int(location_id)),
            )
            return cur.rowcount > 0

    def delete(self, location_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM company_locations WHERE location_id=%s", (int(location_id),))
            return cur.rowcount > 0
