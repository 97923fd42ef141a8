from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence, Union

from ..common.datetime_utils import now_local
from ..common.validators import require_pin
from ..core.constants import DEFAULT_DEBOUNCE_MINUTES, DEFAULT_RECENT_PUNCHES
from ..core.enums import CheckType
from ..core.exceptions import AuthenticationError, AuthorizationError, DuplicatePunchError, ValidationError
from ..core.session import Principal
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..geo.engine import is_within_any_location
from ..geo.model import GeoPoint, RangeCheck
from ..geo.repository import LocationRepository
from .model import Punch, PunchOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _coerce_check_type(check_type: Union[str, CheckType]) -> CheckType:
    try:
        return CheckType(check_type)
    except ValueError:
        raise ValidationError("Check type must be IN or OUT")


class AttendanceService:
    """Append-only punch ledger and the kiosk clock-in/out flow."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        locations: LocationRepository,
        *,
        debounce_minutes: int = DEFAULT_DEBOUNCE_MINUTES,
    ):
        self._attendance = attendance
        self._employees = employees
        self._locations = locations
        self._debounce = timedelta(minutes=int(debounce_minutes))

    def identify(self, pin: str) -> Employee:
        pin = require_pin(pin)
        employee = self._employees.get_active_by_pin(pin)
        if not employee:
            raise AuthenticationError("PIN not recognised")
        return employee

    def record_punch(
        self,
        employee_id: int,
        check_type: CheckType,
        location: Optional[GeoPoint] = None,
        *,
        range_check: Optional[RangeCheck] = None,
        now: Optional[datetime] = None,
    ) -> Punch:
        now = now or now_local()
        check_type = _coerce_check_type(check_type)

        punch_id = self._attendance.insert_punch(
            employee_id=int(employee_id),
            check_type=check_type,
            timestamp=now,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            accuracy=location.accuracy if location else None,
            distance_meters=range_check.distance_meters if range_check else None,
            within_range=range_check.within_range if range_check else None,
            debounce_since=now - self._debounce,
        )
        if punch_id is None:
            raise DuplicatePunchError(
                f"Already clocked {check_type.value} in the last {int(self._debounce.total_seconds() // 60)} minutes, please wait"
            )

        return Punch(
            punch_id=punch_id,
            employee_id=int(employee_id),
            check_type=check_type,
            timestamp=now,
            latitude=location.latitude if location else None,
            longitude=location.longitude if location else None,
            accuracy=location.accuracy if location else None,
            distance_meters=range_check.distance_meters if range_check else None,
            within_range=range_check.within_range if range_check else None,
        )

    def recent_punches(self, employee_id: int, *, limit: int = DEFAULT_RECENT_PUNCHES) -> Sequence[Punch]:
        return self._attendance.get_recent_for_employee(int(employee_id), int(limit))

    def _check_geofence(self, employee: Employee, position: Optional[GeoPoint]) -> Optional[RangeCheck]:
        if position is None:
            logger.warning("Punch without geolocation for employee %s", employee.employee_id)
            return None

        result = is_within_any_location(position, self._locations.list_active())
        if not result.within_range:
            logger.warning(
                "Punch out of range for employee %s: %sm from %s",
                employee.employee_id,
                result.distance_meters,
                result.location.name if result.location else "unknown",
            )
        return result

    def kiosk_punch(
        self,
        pin: str,
        check_type: CheckType,
        position: Optional[GeoPoint] = None,
        *,
        now: Optional[datetime] = None,
    ) -> PunchOutcome:
        """Identify by PIN and record the punch; the geofence is advisory only."""
        check_type = _coerce_check_type(check_type)
        employee = self.identify(pin)
        range_check = self._check_geofence(employee, position)
        punch = self.record_punch(
            employee.employee_id,
            check_type,
            position,
            range_check=range_check,
            now=now,
        )
        logger.info("Employee %s clocked %s", employee.employee_id, punch.check_type.value)
        return PunchOutcome(
            employee=employee,
            punch=punch,
            range_check=range_check,
            recent=tuple(self.recent_punches(employee.employee_id)),
        )

    def delete_punch(self, principal: Principal, *, punch_id: int) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Permission denied")
        if not self._attendance.delete(int(punch_id)):
            raise ValidationError("Attendance record not found")
        logger.info("Admin %s deleted punch %s", principal.employee_id, punch_id)
