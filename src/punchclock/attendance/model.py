from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CheckType
from ..employees.model import Employee
from ..geo.model import RangeCheck


@dataclass(frozen=True)
class Punch:
    """Domain entity: one clock-in or clock-out event (attendance log row)."""

    punch_id: int
    employee_id: int
    check_type: CheckType
    timestamp: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    distance_meters: Optional[int] = None
    within_range: Optional[bool] = None
    is_makeup: bool = False


@dataclass(frozen=True)
class PunchOutcome:
    """What the kiosk shows after a successful punch."""

    employee: Employee
    punch: Punch
    range_check: Optional[RangeCheck]
    recent: tuple[Punch, ...]
