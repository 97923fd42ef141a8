from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CompanyLocation


class LocationRepository(Protocol):
    def list_active(self) -> Sequence[CompanyLocation]:
        raise NotImplementedError

    def list_all(self) -> Sequence[CompanyLocation]:
        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[CompanyLocation]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        is_active: bool = True,
        description: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        location_id: int,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        description: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def set_active(self, location_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def delete(self, location_id: int) -> bool:
        raise NotImplementedError
