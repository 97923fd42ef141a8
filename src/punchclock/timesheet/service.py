from __future__ import annotations

from collections import defaultdict
from datetime import date, time, timedelta
from typing import Optional, Sequence

from ..attendance.model import Punch
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import anchor, iter_days, month_bounds
from ..core.constants import FULL_DAY_CREDIT_HOURS, FULL_DAY_CREDIT_LEAVE_CODES
from ..core.enums import CheckType, RequestStatus
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.schedule import resolve_schedule
from ..requests.model import LeaveRequest
from ..requests.repository import RequestRepository
from .calculator.base import WorkHoursCalculator
from .holidays import holiday_name
from .model import DayEntry, MonthTimesheet, TableRow, TimesheetTable


def _group_by_day(punches: Sequence[Punch]) -> dict[date, list[Punch]]:
    grouped: dict[date, list[Punch]] = defaultdict(list)
    for p in punches:
        grouped[p.timestamp.date()].append(p)
    for day_punches in grouped.values():
        day_punches.sort(key=lambda p: p.timestamp)
    return grouped


def _covers(leave: LeaveRequest, day: date) -> bool:
    return leave.start_at.date() <= day <= leave.end_at.date()


class TimesheetService:
    """Read-only reporting: monthly calendars and the attendance table."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        requests: RequestRepository,
        calculator: WorkHoursCalculator,
    ):
        self._attendance = attendance
        self._employees = employees
        self._requests = requests
        self._calculator = calculator

    def _approved_leaves(self, employee_id: Optional[int], start: date, end: date) -> Sequence[LeaveRequest]:
        return self._requests.list_leaves(
            status=RequestStatus.APPROVED,
            employee_id=employee_id,
            overlapping=(anchor(start, time.min), anchor(end + timedelta(days=1), time.min)),
            limit=None,
        )

    def _day_entry(self, employee: Employee, day: date, punches: list[Punch], leaves: Sequence[LeaveRequest]) -> DayEntry:
        day_leaves = tuple(l for l in leaves if _covers(l, day))
        hours = self._calculator.worked_hours(resolve_schedule(employee), punches)
        credited = False
        if not punches and any(l.leave_type_code in FULL_DAY_CREDIT_LEAVE_CODES for l in day_leaves):
            hours = FULL_DAY_CREDIT_HOURS
            credited = True
        return DayEntry(
            day=day,
            punches=tuple(punches),
            leaves=day_leaves,
            worked_hours=hours,
            holiday=holiday_name(day),
            credited=credited,
        )

    def build_month(self, employee_id: int, year: int, month: int) -> MonthTimesheet:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")

        start, end = month_bounds(year, month)
        punches = self._attendance.list_between(
            start=anchor(start, time.min),
            end=anchor(end + timedelta(days=1), time.min),
            employee_ids=[employee.employee_id],
        )
        by_day = _group_by_day(punches)
        leaves = self._approved_leaves(employee.employee_id, start, end)

        days = tuple(self._day_entry(employee, d, by_day.get(d, []), leaves) for d in iter_days(start, end))
        return MonthTimesheet(
            employee=employee,
            year=int(year),
            month=int(month),
            days=days,
            total_hours=round(sum(d.worked_hours for d in days), 2),
        )

    def build_table(
        self,
        start: date,
        end: date,
        *,
        department: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> TimesheetTable:
        if end < start:
            raise ValidationError("End date must not be before start date")

        if employee_id is not None:
            employee = self._employees.get_by_id(int(employee_id))
            employees = [employee] if employee else []
        else:
            employees = list(self._employees.list_active(department=department or None))
        if department and employee_id is not None:
            employees = [e for e in employees if e.department == department]
        if not employees:
            return TimesheetTable(start=start, end=end, rows=())

        ids = [e.employee_id for e in employees]
        punches = self._attendance.list_between(
            start=anchor(start, time.min),
            end=anchor(end + timedelta(days=1), time.min),
            employee_ids=ids,
        )
        punches_by_employee: dict[int, list[Punch]] = defaultdict(list)
        for p in punches:
            punches_by_employee[p.employee_id].append(p)

        leaves_by_employee: dict[int, list[LeaveRequest]] = defaultdict(list)
        for leave in self._approved_leaves(employee_id, start, end):
            leaves_by_employee[leave.employee_id].append(leave)

        rows: list[TableRow] = []
        totals: dict[int, float] = {}
        for employee in employees:
            by_day = _group_by_day(punches_by_employee.get(employee.employee_id, []))
            leaves = leaves_by_employee.get(employee.employee_id, [])
            total = 0.0
            for day in iter_days(start, end):
                entry = self._day_entry(employee, day, by_day.get(day, []), leaves)
                first_in = next((p.timestamp for p in entry.punches if p.check_type == CheckType.IN), None)
                last_out = next((p.timestamp for p in reversed(entry.punches) if p.check_type == CheckType.OUT), None)
                rows.append(
                    TableRow(
                        employee_id=employee.employee_id,
                        name=employee.name,
                        department=employee.department,
                        masked_pin=employee.masked_pin,
                        day=day,
                        first_in=first_in,
                        last_out=last_out,
                        worked_hours=entry.worked_hours,
                        holiday=entry.holiday,
                        leave_names=tuple(l.leave_type_name or "" for l in entry.leaves),
                    )
                )
                total += entry.worked_hours
            totals[employee.employee_id] = round(total, 2)

        return TimesheetTable(start=start, end=end, rows=tuple(rows), totals=totals)
