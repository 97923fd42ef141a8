from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Optional, Sequence

from ...attendance.model import Punch
from ...common.datetime_utils import anchor, overlap
from ...core.constants import DEFAULT_GRACE_MINUTES
from ...core.enums import CheckType
from ...employees.schedule import ResolvedSchedule
from .base import WorkHoursCalculator


class StandardWorkHoursCalculator(WorkHoursCalculator):
    """Standard rule: first IN to last OUT, snapped to the schedule, minus breaks.

    A punch within the grace window of the scheduled start/end (either side,
    inclusive) counts as the scheduled time. Every configured break window that
    overlaps the effective span is deducted. Unpaired days earn nothing.
    """

    def __init__(self, *, grace_minutes: int = DEFAULT_GRACE_MINUTES):
        self._grace = timedelta(minutes=int(grace_minutes))

    def _snap(self, actual: datetime, scheduled: time) -> datetime:
        target = anchor(actual.date(), scheduled)
        if abs(actual - target) <= self._grace:
            return target
        return actual

    @staticmethod
    def _first(punches: Sequence[Punch], check_type: CheckType) -> Optional[Punch]:
        return next((p for p in punches if p.check_type == check_type), None)

    @staticmethod
    def _last(punches: Sequence[Punch], check_type: CheckType) -> Optional[Punch]:
        return next((p for p in reversed(punches) if p.check_type == check_type), None)

    def worked_hours(self, schedule: ResolvedSchedule, punches: Sequence[Punch]) -> float:
        if len(punches) < 2:
            return 0.0

        ordered = sorted(punches, key=lambda p: p.timestamp)
        check_in = self._first(ordered, CheckType.IN)
        check_out = self._last(ordered, CheckType.OUT)
        if not check_in or not check_out:
            return 0.0

        effective_in = self._snap(check_in.timestamp, schedule.work_start)
        effective_out = self._snap(check_out.timestamp, schedule.work_end)

        gross = max(effective_out - effective_in, timedelta(0))
        if not gross:
            return 0.0

        day = effective_in.date()
        breaks = sum(
            (overlap(effective_in, effective_out, anchor(day, b.start), anchor(day, b.end)) for b in schedule.breaks),
            timedelta(0),
        )

        worked = max(gross - breaks, timedelta(0))
        return round(worked.total_seconds() / 3600, 2)
