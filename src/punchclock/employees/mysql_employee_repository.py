from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import SCHEDULE_FIELDS, Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, name, pin, department, manager_id, role, is_active, " + ", ".join(SCHEDULE_FIELDS)


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        name=r["name"],
        pin=str(r["pin"]),
        department=r.get("department"),
        manager_id=int(r["manager_id"]) if r.get("manager_id") is not None else None,
        is_active=bool(r["is_active"]),
        role=Role(r["role"]) if r.get("role") else Role.EMPLOYEE,
        **{f: normalize_mysql_time(r.get(f)) for f in SCHEDULE_FIELDS},
    )


def _schedule_values(schedule: Optional[dict[str, Optional[time]]]) -> list:
    schedule = schedule or {}
    return [schedule.get(f) for f in SCHEDULE_FIELDS]


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_active_by_pin(self, pin: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE pin=%s AND is_active=1", (pin,))
            rows = fetchall(cur)
            # More than one active match means the uniqueness invariant was broken; refuse.
            if len(rows) != 1:
                return None
            return _to_employee(rows[0])

    def list_active(self, *, department: Optional[str] = None) -> Sequence[Employee]:
        clauses = ["is_active=1"]
        params: list[object] = []
        if department is not None:
            clauses.append("department=%s")
            params.append(department)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {' AND '.join(clauses)} ORDER BY name",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def list_direct_reports(self, manager_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE manager_id=%s AND is_active=1 ORDER BY name",
                (int(manager_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        pin: str,
        department: Optional[str],
        manager_id: Optional[int] = None,
        role: Role = Role.EMPLOYEE,
        schedule: Optional[dict[str, Optional[time]]] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO employees(name, pin, department, manager_id, role, {", ".join(SCHEDULE_FIELDS)})
                VALUES(%s,%s,%s,%s,%s,{", ".join(["%s"] * len(SCHEDULE_FIELDS))})
                """,
                tuple([name, pin, department, manager_id, role.value] + _schedule_values(schedule)),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        pin: str,
        department: Optional[str],
        manager_id: Optional[int] = None,
        role: Role = Role.EMPLOYEE,
        schedule: Optional[dict[str, Optional[time]]] = None,
    ) -> bool:
        assignments = ", ".join(f"{f}=%s" for f in SCHEDULE_FIELDS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE employees
                SET name=%s, pin=%s, department=%s, manager_id=%s, role=%s, {assignments}
                WHERE employee_id=%s
                """,
                tuple([name, pin, department, manager_id, role.value] + _schedule_values(schedule) + [int(employee_id)]),
            )
            return cur.rowcount > 0

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET is_active=%s WHERE employee_id=%s",
                (int(bool(is_active)), int(employee_id)),
            )
            return cur.rowcount > 0
