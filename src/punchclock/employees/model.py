from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.enums import Role

SCHEDULE_FIELDS = (
    "work_start",
    "work_end",
    "break1_start",
    "break1_end",
    "break2_start",
    "break2_end",
    "break3_start",
    "break3_end",
)


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee and the raw (possibly partial) schedule fields.

    Schedule fields left as None fall back to the company defaults; see
    ``employees.schedule.resolve_schedule``.
    """

    employee_id: int
    name: str
    pin: str
    department: Optional[str]
    manager_id: Optional[int] = None
    work_start: Optional[time] = None
    work_end: Optional[time] = None
    break1_start: Optional[time] = None
    break1_end: Optional[time] = None
    break2_start: Optional[time] = None
    break2_end: Optional[time] = None
    break3_start: Optional[time] = None
    break3_end: Optional[time] = None
    is_active: bool = True
    role: Role = Role.EMPLOYEE

    @property
    def masked_pin(self) -> str:
        return f"*****{self.pin[-1:]}"
