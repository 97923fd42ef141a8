from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import CarStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.session import Principal
from .model import Car
from .repository import CarRepository


class CarService:
    """Use case: company car inventory (admin)."""

    def __init__(self, cars: CarRepository):
        self._cars = cars

    def list_cars(self, *, only_active: bool = True) -> Sequence[Car]:
        return self._cars.list_cars(only_active=only_active)

    def save(
        self,
        principal: Principal,
        *,
        plate_number: str,
        model: str,
        status: str = CarStatus.AVAILABLE.value,
        car_id: Optional[int] = None,
        is_active: bool = True,
        last_mileage: Optional[int] = None,
    ) -> int:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")

        plate_number = require_non_empty(plate_number, "Plate number").upper()
        model = require_non_empty(model, "Model")
        try:
            car_status = CarStatus(status)
        except ValueError:
            raise ValidationError("Invalid car status")
        if last_mileage is not None and int(last_mileage) < 0:
            raise ValidationError("Mileage cannot be negative")

        same_plate = self._cars.get_by_plate(plate_number)
        if same_plate and same_plate.car_id != car_id:
            raise ValidationError("Plate number already exists")

        saved_id = self._cars.upsert(
            car_id=int(car_id) if car_id is not None else None,
            plate_number=plate_number,
            model=model,
            status=car_status,
            is_active=is_active,
            last_mileage=int(last_mileage) if last_mileage is not None else None,
        )
        if saved_id <= 0:
            raise ValidationError("Car not found")
        return saved_id
