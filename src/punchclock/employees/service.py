from __future__ import annotations

from datetime import time
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_non_empty, require_pin
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.session import Principal
from .model import SCHEDULE_FIELDS, Employee
from .repository import EmployeeRepository


class EmployeeService:
    """Use case: manage employees (admin) and look up reporting lines."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def _parse_schedule(raw: Optional[Mapping[str, Optional[str]]]) -> dict[str, Optional[time]]:
        raw = raw or {}
        unknown = set(raw) - set(SCHEDULE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown schedule fields: {', '.join(sorted(unknown))}")

        parsed: dict[str, Optional[time]] = {}
        for field in SCHEDULE_FIELDS:
            value = (raw.get(field) or "").strip()
            parsed[field] = parse_hhmm(value) if value else None

        start, end = parsed["work_start"], parsed["work_end"]
        if start is not None and end is not None and end <= start:
            raise ValidationError("Work end must be after work start")
        for n in (1, 2, 3):
            b_start, b_end = parsed[f"break{n}_start"], parsed[f"break{n}_end"]
            if b_start is not None and b_end is not None and b_end <= b_start:
                raise ValidationError(f"Break {n} end must be after its start")
        return parsed

    @staticmethod
    def _parse_role(value: str) -> Role:
        try:
            return Role(value)
        except ValueError:
            raise ValidationError("Invalid role")

    def _ensure_pin_free(self, pin: str, *, employee_id: Optional[int] = None) -> None:
        holder = self._employees.get_active_by_pin(pin)
        if holder and holder.employee_id != employee_id:
            raise ValidationError("PIN is already used by another active employee")

    def _ensure_manager(self, manager_id: Optional[int], *, employee_id: Optional[int] = None) -> Optional[int]:
        if manager_id is None:
            return None
        if employee_id is not None and int(manager_id) == int(employee_id):
            raise ValidationError("An employee cannot be their own supervisor")
        manager = self._employees.get_by_id(int(manager_id))
        if not manager or not manager.is_active:
            raise ValidationError("Supervisor not found")
        return manager.employee_id

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")
        return employee

    def create(
        self,
        principal: Principal,
        *,
        name: str,
        pin: str,
        department: Optional[str] = None,
        manager_id: Optional[int] = None,
        role: str = Role.EMPLOYEE.value,
        schedule: Optional[Mapping[str, Optional[str]]] = None,
    ) -> int:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")

        name = require_non_empty(name, "Name")
        pin = require_pin(pin)
        self._ensure_pin_free(pin)
        return self._employees.create(
            name=name,
            pin=pin,
            department=(department or "").strip() or None,
            manager_id=self._ensure_manager(manager_id),
            role=self._parse_role(role),
            schedule=self._parse_schedule(schedule),
        )

    def update(
        self,
        principal: Principal,
        *,
        employee_id: int,
        name: str,
        pin: str,
        department: Optional[str] = None,
        manager_id: Optional[int] = None,
        role: str = Role.EMPLOYEE.value,
        schedule: Optional[Mapping[str, Optional[str]]] = None,
    ) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")

        current = self.get(employee_id)
        name = require_non_empty(name, "Name")
        pin = require_pin(pin)
        if current.is_active:
            self._ensure_pin_free(pin, employee_id=current.employee_id)

        ok = self._employees.update(
            employee_id=current.employee_id,
            name=name,
            pin=pin,
            department=(department or "").strip() or None,
            manager_id=self._ensure_manager(manager_id, employee_id=current.employee_id),
            role=self._parse_role(role),
            schedule=self._parse_schedule(schedule),
        )
        if not ok:
            raise ValidationError("Updating employee failed")

    def deactivate(self, principal: Principal, *, employee_id: int) -> None:
        """Soft delete: history rows keep pointing at the employee."""
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")
        current = self.get(employee_id)
        if not self._employees.set_active(current.employee_id, is_active=False):
            raise ValidationError("Deactivating employee failed")

    def reactivate(self, principal: Principal, *, employee_id: int) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")
        current = self.get(employee_id)
        self._ensure_pin_free(current.pin, employee_id=current.employee_id)
        if not self._employees.set_active(current.employee_id, is_active=True):
            raise ValidationError("Reactivating employee failed")

    def list_active(self, *, department: Optional[str] = None) -> Sequence[Employee]:
        return self._employees.list_active(department=department)

    def list_direct_reports(self, principal: Principal) -> Sequence[Employee]:
        return self._employees.list_direct_reports(principal.employee_id)
