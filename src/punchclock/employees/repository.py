from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_active_by_pin(self, pin: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self, *, department: Optional[str] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def list_direct_reports(self, manager_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        pin: str,
        department: Optional[str],
        manager_id: Optional[int] = None,
        role: Role = Role.EMPLOYEE,
        schedule: Optional[dict[str, Optional[time]]] = None,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        employee_id: int,
        name: str,
        pin: str,
        department: Optional[str],
        manager_id: Optional[int] = None,
        role: Role = Role.EMPLOYEE,
        schedule: Optional[dict[str, Optional[time]]] = None,
    ) -> bool:
        raise NotImplementedError

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
