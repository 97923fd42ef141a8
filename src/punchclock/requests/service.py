from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence, Union

from ..attendance.repository import AttendanceRepository
from ..cars.repository import CarRepository
from ..common.datetime_utils import now_local, parse_hhmm
from ..common.validators import require_non_empty, require_time_range
from ..core.constants import DEFAULT_LIST_LIMIT, UNASSIGNED_DEPARTMENT
from ..core.enums import CarStatus, CheckType, RequestKind, RequestStatus, ReviewMode
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.session import Principal
from ..database.transaction import TransactionManager
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveTypeRepository
from ..timesheet.leave_hours import estimate_leave_hours
from .model import CarUsageRequest, LeaveRequest, MakeupAttendanceRequest, ReviewableRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingSummary:
    total: int
    by_department: dict[str, int] = field(default_factory=dict)


def _coerce_kind(kind: Union[str, RequestKind]) -> RequestKind:
    try:
        return RequestKind(kind)
    except ValueError:
        raise ValidationError("Unknown request kind")


def _coerce_mode(mode: Union[str, ReviewMode]) -> ReviewMode:
    try:
        return ReviewMode(mode)
    except ValueError:
        raise ValidationError("Unknown review mode")


def _coerce_status_filter(status: Optional[str]) -> Optional[RequestStatus]:
    v = (status or "ALL").strip().upper()
    if v == "ALL":
        return None
    try:
        return RequestStatus(v)
    except ValueError:
        raise ValidationError("Unknown status filter")


class RequestService:
    """Submission and review of leave, makeup punch and car usage requests.

    Every request starts PENDING and moves once to APPROVED or REJECTED. The
    move is a conditional write in the store, so of two concurrent reviewers
    only one wins; the other gets a ValidationError.
    """

    def __init__(
        self,
        requests: RequestRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        leave_types: LeaveTypeRepository,
        cars: CarRepository,
        tx: TransactionManager,
        *,
        list_limit: int = DEFAULT_LIST_LIMIT,
    ):
        self._requests = requests
        self._attendance = attendance
        self._employees = employees
        self._leave_types = leave_types
        self._cars = cars
        self._tx = tx
        self._limit = int(list_limit)

    # -------- Submission --------
    def submit_leave(
        self,
        principal: Principal,
        *,
        leave_type_id: int,
        start_at: datetime,
        end_at: datetime,
        reason: str,
        car_id: Optional[int] = None,
    ) -> int:
        leave_type = self._leave_types.get_by_id(int(leave_type_id))
        if not leave_type or not leave_type.is_active:
            raise ValidationError("Leave type not found")
        reason = require_non_empty(reason, "Reason")
        require_time_range(start_at, end_at)
        if car_id is not None and not self._cars.get_by_id(int(car_id)):
            raise ValidationError("Car not found")

        request_id = self._requests.create_leave(
            employee_id=principal.employee_id,
            leave_type_id=leave_type.leave_type_id,
            start_at=start_at,
            end_at=end_at,
            reason=reason,
            hours=estimate_leave_hours(start_at, end_at),
            car_id=int(car_id) if car_id is not None else None,
        )
        logger.info("Employee %s submitted leave request %s", principal.employee_id, request_id)
        return request_id

    def submit_makeup(
        self,
        principal: Principal,
        *,
        request_date: Optional[date],
        request_time: str,
        check_type: Union[str, CheckType],
        reason: str,
        now: Optional[datetime] = None,
    ) -> int:
        if request_date is None:
            raise ValidationError("Date is required")
        punch_time = parse_hhmm(request_time)
        try:
            check_type = CheckType(check_type)
        except ValueError:
            raise ValidationError("Check type must be IN or OUT")
        reason = require_non_empty(reason, "Reason")
        if datetime.combine(request_date, punch_time) > (now or now_local()):
            raise ValidationError("A makeup punch cannot be in the future")

        request_id = self._requests.create_makeup(
            employee_id=principal.employee_id,
            request_date=request_date,
            request_time=punch_time,
            check_type=check_type,
            reason=reason,
        )
        logger.info("Employee %s submitted makeup request %s", principal.employee_id, request_id)
        return request_id

    def submit_car_request(
        self,
        principal: Principal,
        *,
        car_id: int,
        start_at: datetime,
        end_at: datetime,
        purpose: str,
    ) -> int:
        car = self._cars.get_by_id(int(car_id))
        if not car or not car.is_active:
            raise ValidationError("Car not found")
        purpose = require_non_empty(purpose, "Purpose")
        require_time_range(start_at, end_at)

        request_id = self._requests.create_car_request(
            employee_id=principal.employee_id,
            car_id=car.car_id,
            start_at=start_at,
            end_at=end_at,
            purpose=purpose,
        )
        logger.info("Employee %s submitted car request %s", principal.employee_id, request_id)
        return request_id

    # -------- Review --------
    def _get(self, kind: RequestKind, request_id: int) -> ReviewableRequest:
        if kind == RequestKind.LEAVE:
            req = self._requests.get_leave(int(request_id))
        elif kind == RequestKind.MAKEUP:
            req = self._requests.get_makeup(int(request_id))
        elif kind == RequestKind.CAR:
            req = self._requests.get_car_request(int(request_id))
        else:
            raise TypeError(f"Unhandled request kind: {kind!r}")
        if not req:
            raise ValidationError("Request not found")
        return req

    def _manager_of(self, req: ReviewableRequest) -> Optional[int]:
        if req.requester is not None:
            return req.requester.manager_id
        employee = self._employees.get_by_id(req.employee_id)
        return employee.manager_id if employee else None

    def _ensure_can_review(self, principal: Principal, req: ReviewableRequest, mode: ReviewMode) -> None:
        if mode == ReviewMode.ADMIN:
            if not principal.is_admin:
                raise AuthorizationError("Permission denied")
            return
        if self._manager_of(req) != principal.employee_id:
            raise AuthorizationError("Request is not from one of your direct reports")

    def _load_for_review(
        self,
        principal: Principal,
        kind: Union[str, RequestKind],
        request_id: int,
        mode: Union[str, ReviewMode],
    ) -> ReviewableRequest:
        req = self._get(_coerce_kind(kind), request_id)
        self._ensure_can_review(principal, req, _coerce_mode(mode))
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been reviewed")
        return req

    def _mark_car_in_use(self, car_id: int, req: ReviewableRequest) -> None:
        try:
            if not self._cars.set_status(int(car_id), CarStatus.IN_USE):
                logger.warning("Car %s not found while approving %s request %s", car_id, req.kind.value, req.request_id)
        except Exception:
            logger.warning(
                "Could not mark car %s in use after approving %s request %s",
                car_id,
                req.kind.value,
                req.request_id,
                exc_info=True,
            )

    def approve(
        self,
        principal: Principal,
        *,
        kind: Union[str, RequestKind],
        request_id: int,
        mode: Union[str, ReviewMode],
        comment: str = "",
        now: Optional[datetime] = None,
    ) -> None:
        req = self._load_for_review(principal, kind, request_id, mode)
        now = now or now_local()
        comment = (comment or "").strip() or None

        if isinstance(req, MakeupAttendanceRequest):
            with self._tx.begin() as cur:
                decided = self._requests.decide_makeup(
                    request_id=req.request_id,
                    status=RequestStatus.APPROVED,
                    reviewer_id=principal.employee_id,
                    decided_at=now,
                    comment=comment,
                    cur=cur,
                )
                if not decided:
                    raise ValidationError("Request has already been reviewed")
                self._attendance.insert_punch(
                    employee_id=req.employee_id,
                    check_type=req.check_type,
                    timestamp=req.punch_at,
                    is_makeup=True,
                    cur=cur,
                )
        elif isinstance(req, LeaveRequest):
            decided = self._requests.decide_leave(
                request_id=req.request_id,
                status=RequestStatus.APPROVED,
                approver_id=principal.employee_id,
                decided_at=now,
                comment=comment,
            )
            if not decided:
                raise ValidationError("Request has already been reviewed")
            if req.car_id is not None:
                self._mark_car_in_use(req.car_id, req)
        elif isinstance(req, CarUsageRequest):
            decided = self._requests.decide_car_request(
                request_id=req.request_id,
                status=RequestStatus.APPROVED,
                approver_id=principal.employee_id,
                decided_at=now,
                comment=comment,
            )
            if not decided:
                raise ValidationError("Request has already been reviewed")
            self._mark_car_in_use(req.car_id, req)
        else:
            raise TypeError(f"Unhandled request type: {type(req).__name__}")

        logger.info("Employee %s approved %s request %s", principal.employee_id, req.kind.value, req.request_id)

    def reject(
        self,
        principal: Principal,
        *,
        kind: Union[str, RequestKind],
        request_id: int,
        mode: Union[str, ReviewMode],
        comment: str = "",
        now: Optional[datetime] = None,
    ) -> None:
        req = self._load_for_review(principal, kind, request_id, mode)
        now = now or now_local()
        comment = (comment or "").strip() or None

        if isinstance(req, MakeupAttendanceRequest):
            if not comment:
                raise ValidationError("A comment is required to reject a makeup request")
            decided = self._requests.decide_makeup(
                request_id=req.request_id,
                status=RequestStatus.REJECTED,
                reviewer_id=principal.employee_id,
                decided_at=now,
                comment=comment,
            )
        elif isinstance(req, LeaveRequest):
            decided = self._requests.decide_leave(
                request_id=req.request_id,
                status=RequestStatus.REJECTED,
                approver_id=principal.employee_id,
                decided_at=now,
                comment=comment,
            )
        elif isinstance(req, CarUsageRequest):
            decided = self._requests.decide_car_request(
                request_id=req.request_id,
                status=RequestStatus.REJECTED,
                approver_id=principal.employee_id,
                decided_at=now,
                comment=comment,
            )
        else:
            raise TypeError(f"Unhandled request type: {type(req).__name__}")

        if not decided:
            raise ValidationError("Request has already been reviewed")
        logger.info("Employee %s rejected %s request %s", principal.employee_id, req.kind.value, req.request_id)

    # -------- Listings --------
    def _list(
        self,
        kind: RequestKind,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        manager_id: Optional[int] = None,
    ) -> Sequence[ReviewableRequest]:
        filters = dict(status=status, employee_id=employee_id, manager_id=manager_id, limit=self._limit)
        if kind == RequestKind.LEAVE:
            return self._requests.list_leaves(**filters)
        if kind == RequestKind.MAKEUP:
            return self._requests.list_makeups(**filters)
        if kind == RequestKind.CAR:
            return self._requests.list_car_requests(**filters)
        raise TypeError(f"Unhandled request kind: {kind!r}")

    def list_for_review(
        self,
        principal: Principal,
        *,
        kind: Union[str, RequestKind],
        mode: Union[str, ReviewMode],
        status: Optional[str] = "ALL",
    ) -> Sequence[ReviewableRequest]:
        """Requests a reviewer may act on.

        Supervisor mode is always restricted to direct reports; the status
        filter only narrows within that scope.
        """
        kind = _coerce_kind(kind)
        mode = _coerce_mode(mode)
        status_filter = _coerce_status_filter(status)

        if mode == ReviewMode.ADMIN:
            if not principal.is_admin:
                raise AuthorizationError("Permission denied")
            return self._list(kind, status=status_filter)

        rows = self._list(kind, status=status_filter, manager_id=principal.employee_id)
        return [r for r in rows if self._manager_of(r) == principal.employee_id]

    def list_my_requests(self, principal: Principal) -> dict[str, Sequence[ReviewableRequest]]:
        return {
            kind.value: self._list(kind, employee_id=principal.employee_id)
            for kind in (RequestKind.LEAVE, RequestKind.MAKEUP, RequestKind.CAR)
        }

    def pending_summary(self, principal: Principal) -> PendingSummary:
        """Pending requests of the principal's direct reports, counted by department."""
        by_department: Counter[str] = Counter()
        for kind in (RequestKind.LEAVE, RequestKind.MAKEUP, RequestKind.CAR):
            for req in self.list_for_review(principal, kind=kind, mode=ReviewMode.SUPERVISOR, status="PENDING"):
                department = req.requester.department if req.requester else None
                by_department[department or UNASSIGNED_DEPARTMENT] += 1
        return PendingSummary(total=sum(by_department.values()), by_department=dict(by_department))
