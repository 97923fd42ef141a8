from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import ClassVar, Optional, Union

from ..core.enums import CheckType, RequestKind, RequestStatus


@dataclass(frozen=True)
class Requester:
    """Employee columns joined onto request rows for listings and scoping."""

    employee_id: int
    name: str
    department: Optional[str]
    manager_id: Optional[int]


@dataclass(frozen=True)
class LeaveRequest:
    kind: ClassVar[RequestKind] = RequestKind.LEAVE

    request_id: int
    employee_id: int
    leave_type_id: int
    start_at: datetime
    end_at: datetime
    reason: str
    hours: float
    status: RequestStatus
    created_at: datetime
    car_id: Optional[int] = None
    approver_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    review_comment: Optional[str] = None
    leave_type_name: Optional[str] = None
    leave_type_code: Optional[str] = None
    requester: Optional[Requester] = None


@dataclass(frozen=True)
class MakeupAttendanceRequest:
    """Backdated punch request; approval inserts exactly one makeup punch."""

    kind: ClassVar[RequestKind] = RequestKind.MAKEUP

    request_id: int
    employee_id: int
    request_date: date
    request_time: time
    check_type: CheckType
    reason: str
    status: RequestStatus
    created_at: datetime
    reviewer_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_comment: Optional[str] = None
    requester: Optional[Requester] = None

    @property
    def punch_at(self) -> datetime:
        return datetime.combine(self.request_date, self.request_time)


@dataclass(frozen=True)
class CarUsageRequest:
    kind: ClassVar[RequestKind] = RequestKind.CAR

    request_id: int
    employee_id: int
    car_id: int
    start_at: datetime
    end_at: datetime
    purpose: str
    status: RequestStatus
    created_at: datetime
    approver_id: Optional[int] = None
    approved_at: Optional[datetime] = None
    review_comment: Optional[str] = None
    plate_number: Optional[str] = None
    requester: Optional[Requester] = None


ReviewableRequest = Union[LeaveRequest, MakeupAttendanceRequest, CarUsageRequest]
