from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..attendance.model import Punch
from ..employees.model import Employee
from ..requests.model import LeaveRequest


@dataclass(frozen=True)
class DayEntry:
    day: date
    punches: tuple[Punch, ...] = ()
    leaves: tuple[LeaveRequest, ...] = ()
    worked_hours: float = 0.0
    holiday: Optional[str] = None
    credited: bool = False


@dataclass(frozen=True)
class MonthTimesheet:
    employee: Employee
    year: int
    month: int
    days: tuple[DayEntry, ...]
    total_hours: float


@dataclass(frozen=True)
class TableRow:
    """One employee-day line of the attendance table report."""

    employee_id: int
    name: str
    department: Optional[str]
    masked_pin: str
    day: date
    first_in: Optional[datetime]
    last_out: Optional[datetime]
    worked_hours: float
    holiday: Optional[str] = None
    leave_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class TimesheetTable:
    start: date
    end: date
    rows: tuple[TableRow, ...]
    totals: dict[int, float] = field(default_factory=dict)
