from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import CheckType
from .model import Punch


class AttendanceRepository(Protocol):
    def insert_punch(
        self,
        *,
        employee_id: int,
        check_type: CheckType,
        timestamp: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        accuracy: Optional[float] = None,
        distance_meters: Optional[int] = None,
        within_range: Optional[bool] = None,
        is_makeup: bool = False,
        debounce_since: Optional[datetime] = None,
        cur: Any = None,
    ) -> Optional[int]:
        """Append a punch and return its id.

        When ``debounce_since`` is given the insert is skipped (returns None) if the
        employee already has a punch of the same type between that instant and
        ``timestamp`` (both inclusive). Later punches do not count.
        """

        raise NotImplementedError

    def get_by_id(self, punch_id: int) -> Optional[Punch]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[Punch]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[Punch]:
        """Punches with start <= timestamp < end, ascending by timestamp."""

        raise NotImplementedError

    def delete(self, punch_id: int) -> bool:
        raise NotImplementedError
