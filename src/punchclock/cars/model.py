from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import CarStatus


@dataclass(frozen=True)
class Car:
    car_id: int
    plate_number: str
    model: str
    status: CarStatus = CarStatus.AVAILABLE
    is_active: bool = True
    last_mileage: Optional[int] = None
