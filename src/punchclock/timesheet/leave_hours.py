"""Requested-leave duration estimate.

Used when a leave request is submitted. It is intentionally simpler than the
daily calculator: no punches, no grace window, one fixed lunch window per day.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from ..common.datetime_utils import anchor, iter_days, overlap
from ..core.constants import LEAVE_LUNCH_END, LEAVE_LUNCH_START


def estimate_leave_hours(start: datetime, end: datetime) -> float:
    if end <= start:
        return 0.0

    lunch = timedelta(0)
    for day in iter_days(start.date(), end.date()):
        lunch += overlap(start, end, anchor(day, LEAVE_LUNCH_START), anchor(day, LEAVE_LUNCH_END))

    total_minutes = (end - start).total_seconds() / 60
    lunch_minutes = lunch.total_seconds() / 60
    return round(max(total_minutes - lunch_minutes, 0) / 60, 2)
