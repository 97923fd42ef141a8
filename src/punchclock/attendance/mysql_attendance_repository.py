from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import CheckType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, use_cursor
from .model import Punch
from .repository import AttendanceRepository

_COLUMNS = (
    "punch_id, employee_id, check_type, timestamp, latitude, longitude, accuracy, "
    "distance_meters, within_range, is_makeup"
)


def _opt_float(v) -> Optional[float]:
    return float(v) if v is not None else None


def _to_punch(r: dict) -> Punch:
    return Punch(
        punch_id=int(r["punch_id"]),
        employee_id=int(r["employee_id"]),
        check_type=CheckType(r["check_type"]),
        timestamp=r["timestamp"],
        latitude=_opt_float(r.get("latitude")),
        longitude=_opt_float(r.get("longitude")),
        accuracy=_opt_float(r.get("accuracy")),
        distance_meters=int(r["distance_meters"]) if r.get("distance_meters") is not None else None,
        within_range=bool(r["within_range"]) if r.get("within_range") is not None else None,
        is_makeup=bool(r.get("is_makeup")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_punch(
        self,
        *,
        employee_id: int,
        check_type: CheckType,
        timestamp: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        accuracy: Optional[float] = None,
        distance_meters: Optional[int] = None,
        within_range: Optional[bool] = None,
        is_makeup: bool = False,
        debounce_since: Optional[datetime] = None,
        cur: Any = None,
    ) -> Optional[int]:
        values = (
            int(employee_id),
            check_type.value,
            timestamp,
            latitude,
            longitude,
            accuracy,
            distance_meters,
            None if within_range is None else int(within_range),
            int(bool(is_makeup)),
        )
        with use_cursor(self._conn_factory, cur) as c:
            if debounce_since is None:
                c.execute(
                    """
                    INSERT INTO attendance_logs(
                        employee_id, check_type, timestamp, latitude, longitude, accuracy,
                        distance_meters, within_range, is_makeup
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    values,
                )
            else:
                # Debounce check and insert run as one statement.
                c.execute(
                    """
                    INSERT INTO attendance_logs(
                        employee_id, check_type, timestamp, latitude, longitude, accuracy,
                        distance_meters, within_range, is_makeup
                    )
                    SELECT %s,%s,%s,%s,%s,%s,%s,%s,%s FROM DUAL
                    WHERE NOT EXISTS (
                        SELECT 1 FROM attendance_logs
                        WHERE employee_id=%s AND check_type=%s AND timestamp BETWEEN %s AND %s
                    )
                    """,
                    values + (int(employee_id), check_type.value, debounce_since, timestamp),
                )
                if c.rowcount == 0:
                    return None
            return int(c.lastrowid)

    def get_by_id(self, punch_id: int) -> Optional[Punch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_logs WHERE punch_id=%s", (int(punch_id),))
            r = fetchone(cur)
            return _to_punch(r) if r else None

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[Punch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE employee_id=%s
                ORDER BY timestamp DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[Punch]:
        clauses = ["timestamp >= %s", "timestamp < %s"]
        params: list[object] = [start, end]

        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({', '.join(['%s'] * len(employee_ids))})")
            params.extend(int(i) for i in employee_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs
                WHERE {' AND '.join(clauses)}
                ORDER BY timestamp ASC, punch_id ASC
                """,
                tuple(params),
            )
            return [_to_punch(r) for r in fetchall(cur)]

    def delete(self, punch_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_logs WHERE punch_id=%s", (int(punch_id),))
            return cur.rowcount > 0
