from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import CheckType, RequestStatus
from .model import CarUsageRequest, LeaveRequest, MakeupAttendanceRequest


class RequestRepository(Protocol):
    """Storage for the three request kinds.

    ``decide_*`` methods are conditional: they only touch a row that is still
    PENDING and return False otherwise. They accept ``cur`` to join a
    transaction opened by the caller.
    """

    # Leave requests
    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_at: datetime,
        end_at: datetime,
        reason: str,
        hours: float,
        car_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def get_leave(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        overlapping: Optional[tuple[datetime, datetime]] = None,
        limit: Optional[int] = 200,
    ) -> Sequence[LeaveRequest]:
        """Newest first. ``overlapping`` keeps leaves with start < to and end >= from.

        ``limit=None`` returns every match.
        """

        raise NotImplementedError

    def decide_leave(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approver_id: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        cur: Any = None,
    ) -> bool:
        raise NotImplementedError

    # Makeup attendance requests
    def create_makeup(
        self,
        *,
        employee_id: int,
        request_date: date,
        request_time: time,
        check_type: CheckType,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_makeup(self, request_id: int) -> Optional[MakeupAttendanceRequest]:
        raise NotImplementedError

    def list_makeups(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[MakeupAttendanceRequest]:
        raise NotImplementedError

    def decide_makeup(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewer_id: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        cur: Any = None,
    ) -> bool:
        raise NotImplementedError

    # Car usage requests
    def create_car_request(
        self,
        *,
        employee_id: int,
        car_id: int,
        start_at: datetime,
        end_at: datetime,
        purpose: str,
    ) -> int:
        raise NotImplementedError

    def get_car_request(self, request_id: int) -> Optional[CarUsageRequest]:
        raise NotImplementedError

    def list_car_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[CarUsageRequest]:
        raise NotImplementedError

    def decide_car_request(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approver_id: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        cur: Any = None,
    ) -> bool:
        raise NotImplementedError
