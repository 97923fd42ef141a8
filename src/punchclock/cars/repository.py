from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import CarStatus
from .model import Car


class CarRepository(Protocol):
    def list_cars(self, *, only_active: bool = True) -> Sequence[Car]:
        """Ordered by plate number."""

        raise NotImplementedError

    def get_by_id(self, car_id: int) -> Optional[Car]:
        raise NotImplementedError

    def get_by_plate(self, plate_number: str) -> Optional[Car]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        car_id: Optional[int],
        plate_number: str,
        model: str,
        status: CarStatus,
        is_active: bool = True,
        last_mileage: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def set_status(self, car_id: int, status: CarStatus, *, cur: Any = None) -> bool:
        raise NotImplementedError
