from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import PIN_LENGTH
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_pin(value: Optional[str]) -> str:
    pin = (value or "").strip()
    if len(pin) != PIN_LENGTH or not pin.isdigit():
        raise ValidationError(f"PIN must be exactly {PIN_LENGTH} digits")
    return pin


def require_time_range(start: datetime, end: datetime) -> None:
    if end <= start:
        raise ValidationError("End time must be after start time")


def require_between(value: float, field_name: str, low: float, high: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not (low <= number <= high):
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def require_int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is required")


def optional_int(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_int(value, field_name)
