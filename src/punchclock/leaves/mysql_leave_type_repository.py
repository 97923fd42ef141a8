from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveType
from .repository import LeaveTypeRepository

_COLUMNS = "leave_type_id, name, code, color, is_active, sort_order"


def _to_leave_type(r: dict) -> LeaveType:
    return LeaveType(
        leave_type_id=int(r["leave_type_id"]),
        name=r["name"],
        code=r["code"],
        color=r.get("color"),
        is_active=bool(r["is_active"]),
        sort_order=int(r.get("sort_order") or 0),
    )


class MySQLLeaveTypeRepository(LeaveTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self, *, only_active: bool = False) -> Sequence[LeaveType]:
        where = "WHERE is_active=1" if only_active else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_types {where} ORDER BY sort_order ASC, leave_type_id ASC")
            return [_to_leave_type(r) for r in fetchall(cur)]

    def get_by_id(self, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_types WHERE leave_type_id=%s", (int(leave_type_id),))
            r = fetchone(cur)
            return _to_leave_type(r) if r else None

    def get_by_code(self, code: str) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_types WHERE code=%s", (code,))
            r = fetchone(cur)
            return _to_leave_type(r) if r else None

    def create(self, *, name: str, code: str, color: Optional[str], sort_order: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO leave_types(name, code, color, sort_order) VALUES(%s,%s,%s,%s)",
                (name, code, color, int(sort_order)),
            )
            return int(cur.lastrowid)

    def update(self, *, leave_type_id: int, name: str, color: Optional[str], sort_order: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_types SET name=%s, color=%s, sort_order=%s WHERE leave_type_id=%s",
                (name, color, int(sort_order), int(leave_type_id)),
            )
            return cur.rowcount > 0

    def set_active(self, leave_type_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_types SET is_active=%s WHERE leave_type_id=%s",
                (int(bool(is_active)), int(leave_type_id)),
            )
            return cur.rowcount > 0
