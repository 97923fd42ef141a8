from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LeaveType:
    """Leave/business-trip category; ``code`` never changes after creation."""

    leave_type_id: int
    name: str
    code: str
    color: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0
