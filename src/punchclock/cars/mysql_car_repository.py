from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.enums import CarStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, use_cursor
from .model import Car
from .repository import CarRepository

_COLUMNS = "car_id, plate_number, model, status, is_active, last_mileage"


def _to_car(r: dict) -> Car:
    return Car(
        car_id=int(r["car_id"]),
        plate_number=r["plate_number"],
        model=r["model"],
        status=CarStatus(r["status"]),
        is_active=bool(r["is_active"]),
        last_mileage=int(r["last_mileage"]) if r.get("last_mileage") is not None else None,
    )


class MySQLCarRepository(CarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_cars(self, *, only_active: bool = True) -> Sequence[Car]:
        where = "WHERE is_active=1" if only_active else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM cars {where} ORDER BY plate_number")
            return [_to_car(r) for r in fetchall(cur)]

    def get_by_id(self, car_id: int) -> Optional[Car]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM cars WHERE car_id=%s", (int(car_id),))
            r = fetchone(cur)
            return _to_car(r) if r else None

    def get_by_plate(self, plate_number: str) -> Optional[Car]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM cars WHERE plate_number=%s", (plate_number,))
            r = fetchone(cur)
            return _to_car(r) if r else None

    def upsert(
        self,
        *,
        car_id: Optional[int],
        plate_number: str,
        model: str,
        status: CarStatus,
        is_active: bool = True,
        last_mileage: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if car_id is None:
                cur.execute(
                    """
                    INSERT INTO cars(plate_number, model, status, is_active, last_mileage)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (plate_number, model, status.value, int(bool(is_active)), last_mileage),
                )
                return int(cur.lastrowid)

            cur.execute(
                """
                UPDATE cars
                SET plate_number=%s, model=%s, status=%s, is_active=%s, last_mileage=%s
                WHERE car_id=%s
                """,
                (plate_number, model, status.value, int(bool(is_active)), last_mileage, int(car_id)),
            )
            return int(car_id) if cur.rowcount > 0 else 0

    def set_status(self, car_id: int, status: CarStatus, *, cur: Any = None) -> bool:
        with use_cursor(self._conn_factory, cur) as c:
            c.execute("UPDATE cars SET status=%s WHERE car_id=%s", (status.value, int(car_id)))
            return c.rowcount > 0
