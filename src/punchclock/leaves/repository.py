from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveType


class LeaveTypeRepository(Protocol):
    def list_all(self, *, only_active: bool = False) -> Sequence[LeaveType]:
        """Ordered by sort_order."""

        raise NotImplementedError

    def get_by_id(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[LeaveType]:
        raise NotImplementedError

    def create(self, *, name: str, code: str, color: Optional[str], sort_order: int) -> int:
        raise NotImplementedError

    def update(self, *, leave_type_id: int, name: str, color: Optional[str], sort_order: int) -> bool:
        raise NotImplementedError

    def set_active(self, leave_type_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
