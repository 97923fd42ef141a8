from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import require_between, require_non_empty
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.session import Principal
from .engine import is_within_any_location
from .model import CompanyLocation, GeoPoint, RangeCheck
from .repository import LocationRepository


class CompanyLocationService:
    """Use case: manage office geofences and check kiosk positions against them."""

    def __init__(self, locations: LocationRepository):
        self._locations = locations

    def list_active(self) -> Sequence[CompanyLocation]:
        return self._locations.list_active()

    def list_all(self) -> Sequence[CompanyLocation]:
        return self._locations.list_all()

    def check_position(self, point: GeoPoint) -> RangeCheck:
        return is_within_any_location(point, self._locations.list_active())

    @staticmethod
    def _validated(name: str, latitude: float, longitude: float, radius_meters: int) -> tuple:
        name = require_non_empty(name, "Location name")
        latitude = require_between(latitude, "Latitude", -90, 90)
        longitude = require_between(longitude, "Longitude", -180, 180)
        try:
            radius_meters = int(radius_meters)
        except (TypeError, ValueError):
            radius_meters = 0
        if radius_meters <= 0:
            raise ValidationError("Radius must be a positive number of meters")
        return name, latitude, longitude, radius_meters

    def create(
        self,
        principal: Principal,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        description: Optional[str] = None,
    ) -> int:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")

        name, latitude, longitude, radius_meters = self._validated(name, latitude, longitude, radius_meters)
        return self._locations.create(
            name=name,
            latitude=latitude,
            longitude=longitude,
            radius_meters=radius_meters,
            is_active=True,
            description=(description or "").strip() or None,
        )

    def update(
        self,
        principal: Principal,
        *,
        location_id: int,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        description: Optional[str] = None,
    ) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")

        name, latitude, longitude, radius_meters = self._validated(name, latitude, longitude, radius_meters)
        ok = self._locations.update(
            location_id=int(location_id),
            name=name,
            latitude=latitude,
            longitude=longitude,
            radius_meters=radius_meters,
            description=(description or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Location not found")

    def set_active(self, principal: Principal, *, location_id: int, is_active: bool) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")
        if not self._locations.set_active(int(location_id), is_active=is_active):
            raise ValidationError("Location not found")

    def delete(self, principal: Principal, *, location_id: int) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")
        if not self._locations.delete(int(location_id)):
            raise ValidationError("Location not found")
