from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.session import Principal
from .model import LeaveType
from .repository import LeaveTypeRepository


class LeaveTypeService:
    def __init__(self, leave_types: LeaveTypeRepository):
        self._leave_types = leave_types

    def list_active(self) -> Sequence[LeaveType]:
        return self._leave_types.list_all(only_active=True)

    def list_all(self) -> Sequence[LeaveType]:
        return self._leave_types.list_all()

    def create(
        self,
        principal: Principal,
        *,
        name: str,
        code: str,
        color: Optional[str] = None,
        sort_order: int = 0,
    ) -> int:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")

        name = require_non_empty(name, "Name")
        code = require_non_empty(code, "Code").upper()
        if self._leave_types.get_by_code(code):
            raise ValidationError("Leave type code already exists")
        return self._leave_types.create(name=name, code=code, color=(color or "").strip() or None, sort_order=int(sort_order))

    def update(
        self,
        principal: Principal,
        *,
        leave_type_id: int,
        name: str,
        color: Optional[str] = None,
        sort_order: int = 0,
        code: Optional[str] = None,
    ) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")

        current = self._leave_types.get_by_id(int(leave_type_id))
        if not current:
            raise ValidationError("Leave type not found")
        if code is not None and code.strip().upper() != current.code:
            raise ValidationError("Leave type code cannot be changed")

        ok = self._leave_types.update(
            leave_type_id=current.leave_type_id,
            name=require_non_empty(name, "Name"),
            color=(color or "").strip() or None,
            sort_order=int(sort_order),
        )
        if not ok:
            raise ValidationError("Updating leave type failed")

    def set_active(self, principal: Principal, *, leave_type_id: int, is_active: bool) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")
        if not self._leave_types.set_active(int(leave_type_id), is_active=is_active):
            raise ValidationError("Leave type not found")
