from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...attendance.model import Punch
from ...employees.schedule import ResolvedSchedule


class WorkHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for daily worked hours)."""

    @abstractmethod
    def worked_hours(self, schedule: ResolvedSchedule, punches: Sequence[Punch]) -> float:
        """Worked hours for one employee-day, given that day's punches."""
        raise NotImplementedError
