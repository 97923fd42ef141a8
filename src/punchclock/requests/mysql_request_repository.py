from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional, Sequence

from ..core.enums import CheckType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, use_cursor
from .model import CarUsageRequest, LeaveRequest, MakeupAttendanceRequest, Requester
from .repository import RequestRepository

_REQUESTER_COLUMNS = "e.name AS employee_name, e.department, e.manager_id"


def _requester(r: dict) -> Requester:
    return Requester(
        employee_id=int(r["employee_id"]),
        name=r["employee_name"],
        department=r.get("department"),
        manager_id=int(r["manager_id"]) if r.get("manager_id") is not None else None,
    )


def _opt_int(v) -> Optional[int]:
    return int(v) if v is not None else None


def _filters(
    *,
    status: Optional[RequestStatus],
    employee_id: Optional[int],
    manager_id: Optional[int],
) -> tuple[list[str], list[object]]:
    clauses = ["1=1"]
    params: list[object] = []

    if status is not None:
        clauses.append("r.status=%s")
        params.append(status.value)
    if employee_id is not None:
        clauses.append("r.employee_id=%s")
        params.append(int(employee_id))
    if manager_id is not None:
        clauses.append("e.manager_id=%s")
        params.append(int(manager_id))
    return clauses, params


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_at=r["start_at"],
        end_at=r["end_at"],
        reason=r["reason"],
        hours=float(r["hours"]),
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        car_id=_opt_int(r.get("car_id")),
        approver_id=_opt_int(r.get("approver_id")),
        approved_at=r.get("approved_at"),
        review_comment=r.get("review_comment"),
        leave_type_name=r.get("leave_type_name"),
        leave_type_code=r.get("leave_type_code"),
        requester=_requester(r),
    )


def _to_makeup(r: dict) -> MakeupAttendanceRequest:
    return MakeupAttendanceRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        request_date=r["request_date"],
        request_time=normalize_mysql_time(r["request_time"]),
        check_type=CheckType(r["check_type"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        reviewer_id=_opt_int(r.get("reviewer_id")),
        reviewed_at=r.get("reviewed_at"),
        review_comment=r.get("review_comment"),
        requester=_requester(r),
    )


def _to_car_request(r: dict) -> CarUsageRequest:
    return CarUsageRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        car_id=int(r["car_id"]),
        start_at=r["start_at"],
        end_at=r["end_at"],
        purpose=r["purpose"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        approver_id=_opt_int(r.get("approver_id")),
        approved_at=r.get("approved_at"),
        review_comment=r.get("review_comment"),
        plate_number=r.get("plate_number"),
        requester=_requester(r),
    )


_LEAVE_SELECT = f"""
    SELECT r.request_id, r.employee_id, r.leave_type_id, r.start_at, r.end_at, r.reason,
           r.hours, r.status, r.created_at, r.car_id, r.approver_id, r.approved_at,
           r.review_comment, lt.name AS leave_type_name, lt.code AS leave_type_code,
           {_REQUESTER_COLUMNS}
    FROM leave_requests r
    JOIN employees e ON e.employee_id = r.employee_id
    LEFT JOIN leave_types lt ON lt.leave_type_id = r.leave_type_id
"""

_MAKEUP_SELECT = f"""
    SELECT r.request_id, r.employee_id, r.request_date, r.request_time, r.check_type,
           r.reason, r.status, r.created_at, r.reviewer_id, r.reviewed_at, r.review_comment,
           {_REQUESTER_COLUMNS}
    FROM makeup_attendance_requests r
    JOIN employees e ON e.employee_id = r.employee_id
"""

_CAR_SELECT = f"""
    SELECT r.request_id, r.employee_id, r.car_id, r.start_at, r.end_at, r.purpose,
           r.status, r.created_at, r.approver_id, r.approved_at, r.review_comment,
           c.plate_number, {_REQUESTER_COLUMNS}
    FROM car_usage_requests r
    JOIN employees e ON e.employee_id = r.employee_id
    LEFT JOIN cars c ON c.car_id = r.car_id
"""


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Leave requests --------
    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_at: datetime,
        end_at: datetime,
        reason: str,
        hours: float,
        car_id: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type_id, start_at, end_at, reason, hours, car_id, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(leave_type_id),
                    start_at,
                    end_at,
                    reason,
                    hours,
                    car_id,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_leave(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_LEAVE_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_leaves(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        overlapping: Optional[tuple[datetime, datetime]] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[LeaveRequest]:
        clauses, params = _filters(status=status, employee_id=employee_id, manager_id=manager_id)
        if overlapping is not None:
            clauses.append("r.start_at < %s AND r.end_at >= %s")
            params.extend([overlapping[1], overlapping[0]])

        sql = _LEAVE_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY r.created_at DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_leave(r) for r in fetchall(cur)]

    def decide_leave(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approver_id: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        cur: Any = None,
    ) -> bool:
        with use_cursor(self._conn_factory, cur) as c:
            c.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=%s, approved_at=%s, review_comment=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(approver_id), decided_at, comment, int(request_id), RequestStatus.PENDING.value),
            )
            return c.rowcount > 0

    # -------- Makeup attendance requests --------
    def create_makeup(
        self,
        *,
        employee_id: int,
        request_date: date,
        request_time: time,
        check_type: CheckType,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO makeup_attendance_requests(
                    employee_id, request_date, request_time, check_type, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), request_date, request_time, check_type.value, reason, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_makeup(self, request_id: int) -> Optional[MakeupAttendanceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_MAKEUP_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_makeup(r) if r else None

    def list_makeups(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[MakeupAttendanceRequest]:
        clauses, params = _filters(status=status, employee_id=employee_id, manager_id=manager_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _MAKEUP_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY r.created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_makeup(r) for r in fetchall(cur)]

    def decide_makeup(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewer_id: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        cur: Any = None,
    ) -> bool:
        with use_cursor(self._conn_factory, cur) as c:
            c.execute(
                """
                UPDATE makeup_attendance_requests
                SET status=%s, reviewer_id=%s, reviewed_at=%s, review_comment=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(reviewer_id), decided_at, comment, int(request_id), RequestStatus.PENDING.value),
            )
            return c.rowcount > 0

    # -------- Car usage requests --------
    def create_car_request(
        self,
        *,
        employee_id: int,
        car_id: int,
        start_at: datetime,
        end_at: datetime,
        purpose: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO car_usage_requests(employee_id, car_id, start_at, end_at, purpose, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), int(car_id), start_at, end_at, purpose, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_car_request(self, request_id: int) -> Optional[CarUsageRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_CAR_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_car_request(r) if r else None

    def list_car_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[CarUsageRequest]:
        clauses, params = _filters(status=status, employee_id=employee_id, manager_id=manager_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _CAR_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY r.created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_car_request(r) for r in fetchall(cur)]

    def decide_car_request(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approver_id: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        cur: Any = None,
    ) -> bool:
        with use_cursor(self._conn_factory, cur) as c:
            c.execute(
                """
                UPDATE car_usage_requests
                SET status=%s, approver_id=%s, approved_at=%s, review_comment=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(approver_id), decided_at, comment, int(request_id), RequestStatus.PENDING.value),
            )
            return c.rowcount > 0
