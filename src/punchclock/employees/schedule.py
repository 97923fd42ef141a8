from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional, Tuple

from ..core.constants import DEFAULT_BREAK_END, DEFAULT_BREAK_START, DEFAULT_WORK_END, DEFAULT_WORK_START
from .model import Employee


@dataclass(frozen=True)
class BreakWindow:
    start: time
    end: time


@dataclass(frozen=True)
class ResolvedSchedule:
    """Schedule with every default already applied; consumed by the hours calculator."""

    work_start: time
    work_end: time
    breaks: Tuple[BreakWindow, ...]


DEFAULT_SCHEDULE = ResolvedSchedule(
    work_start=DEFAULT_WORK_START,
    work_end=DEFAULT_WORK_END,
    breaks=(BreakWindow(DEFAULT_BREAK_START, DEFAULT_BREAK_END),),
)


def _pair(start: Optional[time], end: Optional[time]) -> Optional[BreakWindow]:
    # A break needs both ends; half-configured breaks are ignored.
    if start is None or end is None:
        return None
    return BreakWindow(start, end)


def resolve_schedule(employee: Optional[Employee]) -> ResolvedSchedule:
    """Merge per-field defaults into the employee's schedule, once.

    Work start, work end and both ends of break 1 fall back independently to
    08:00, 17:00 and 12:00-13:00. Breaks 2 and 3 have no default and count
    only when both of their ends are set.
    """
    if employee is None:
        return DEFAULT_SCHEDULE

    breaks = [
        BreakWindow(
            employee.break1_start if employee.break1_start is not None else DEFAULT_BREAK_START,
            employee.break1_end if employee.break1_end is not None else DEFAULT_BREAK_END,
        )
    ]
    for start, end in (
        (employee.break2_start, employee.break2_end),
        (employee.break3_start, employee.break3_end),
    ):
        window = _pair(start, end)
        if window:
            breaks.append(window)

    return ResolvedSchedule(
        work_start=employee.work_start if employee.work_start is not None else DEFAULT_WORK_START,
        work_end=employee.work_end if employee.work_end is not None else DEFAULT_WORK_END,
        breaks=tuple(breaks),
    )
