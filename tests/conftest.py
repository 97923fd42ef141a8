from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, time
from types import SimpleNamespace
from typing import Optional

import pytest

from punchclock.attendance.model import Punch
from punchclock.cars.model import Car
from punchclock.container import wire
from punchclock.core.enums import CarStatus, CheckType, RequestStatus, Role
from punchclock.employees.model import Employee
from punchclock.geo.model import CompanyLocation
from punchclock.leaves.model import LeaveType
from punchclock.requests.model import CarUsageRequest, LeaveRequest, MakeupAttendanceRequest, Requester

TABLES = ("employees", "punches", "locations", "leave_types", "cars", "leaves", "makeups", "car_requests")


class Store:
    """Rows for every in-memory repository; snapshot/restore backs the fake transactions."""

    def __init__(self):
        self.tables: dict[str, dict[int, object]] = {t: {} for t in TABLES}
        self.ids: dict[str, int] = {t: 0 for t in TABLES}
        self.now = datetime(2025, 1, 1, 8, 0)

    def insert(self, table: str, build) -> int:
        self.ids[table] += 1
        new_id = self.ids[table]
        self.tables[table][new_id] = build(new_id)
        return new_id

    def rows(self, table: str) -> list:
        return list(self.tables[table].values())

    def snapshot(self):
        return copy.deepcopy((self.tables, self.ids))

    def restore(self, snap) -> None:
        self.tables, self.ids = snap


class InMemoryEmployees:
    def __init__(self, store: Store):
        self._s = store

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._s.tables["employees"].get(employee_id)

    def get_active_by_pin(self, pin: str) -> Optional[Employee]:
        matches = [e for e in self._s.rows("employees") if e.pin == pin and e.is_active]
        return matches[0] if len(matches) == 1 else None

    def list_active(self, *, department: Optional[str] = None):
        rows = [e for e in self._s.rows("employees") if e.is_active]
        if department is not None:
            rows = [e for e in rows if e.department == department]
        return sorted(rows, key=lambda e: e.name)

    def list_direct_reports(self, manager_id: int):
        return [e for e in self.list_active() if e.manager_id == manager_id]

    def create(self, *, name, pin, department, manager_id=None, role=Role.EMPLOYEE, schedule=None) -> int:
        return self._s.insert(
            "employees",
            lambda i: Employee(
                employee_id=i,
                name=name,
                pin=pin,
                department=department,
                manager_id=manager_id,
                role=role,
                **(schedule or {}),
            ),
        )

    def update(self, *, employee_id, name, pin, department, manager_id=None, role=Role.EMPLOYEE, schedule=None) -> bool:
        current = self.get_by_id(employee_id)
        if not current:
            return False
        self._s.tables["employees"][employee_id] = replace(
            current, name=name, pin=pin, department=department, manager_id=manager_id, role=role, **(schedule or {})
        )
        return True

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        current = self.get_by_id(employee_id)
        if not current:
            return False
        self._s.tables["employees"][employee_id] = replace(current, is_active=is_active)
        return True


class InMemoryAttendance:
    def __init__(self, store: Store):
        self._s = store
        self.fail_inserts = False

    def insert_punch(
        self,
        *,
        employee_id,
        check_type,
        timestamp,
        latitude=None,
        longitude=None,
        accuracy=None,
        distance_meters=None,
        within_range=None,
        is_makeup=False,
        debounce_since=None,
        cur=None,
    ) -> Optional[int]:
        if self.fail_inserts:
            raise RuntimeError("attendance store unavailable")
        if debounce_since is not None and any(
            p.employee_id == employee_id and p.check_type == check_type and debounce_since <= p.timestamp <= timestamp
            for p in self._s.rows("punches")
        ):
            return None
        return self._s.insert(
            "punches",
            lambda i: Punch(
                punch_id=i,
                employee_id=employee_id,
                check_type=check_type,
                timestamp=timestamp,
                latitude=latitude,
                longitude=longitude,
                accuracy=accuracy,
                distance_meters=distance_meters,
                within_range=within_range,
                is_makeup=is_makeup,
            ),
        )

    def get_by_id(self, punch_id: int) -> Optional[Punch]:
        return self._s.tables["punches"].get(punch_id)

    def get_recent_for_employee(self, employee_id: int, limit: int):
        rows = [p for p in self._s.rows("punches") if p.employee_id == employee_id]
        rows.sort(key=lambda p: (p.timestamp, p.punch_id), reverse=True)
        return rows[:limit]

    def list_between(self, *, start, end, employee_ids=None):
        rows = [
            p
            for p in self._s.rows("punches")
            if start <= p.timestamp < end and (employee_ids is None or p.employee_id in employee_ids)
        ]
        return sorted(rows, key=lambda p: (p.timestamp, p.punch_id))

    def delete(self, punch_id: int) -> bool:
        return self._s.tables["punches"].pop(punch_id, None) is not None


class InMemoryLocations:
    def __init__(self, store: Store):
        self._s = store

    def list_active(self):
        return [l for l in self.list_all() if l.is_active]

    def list_all(self):
        return sorted(self._s.rows("locations"), key=lambda l: l.name)

    def get_by_id(self, location_id: int):
        return self._s.tables["locations"].get(location_id)

    def create(self, *, name, latitude, longitude, radius_meters, is_active=True, description=None) -> int:
        return self._s.insert(
            "locations",
            lambda i: CompanyLocation(
                location_id=i,
                name=name,
                latitude=latitude,
                longitude=longitude,
                radius_meters=radius_meters,
                is_active=is_active,
                description=description,
            ),
        )

    def update(self, *, location_id, name, latitude, longitude, radius_meters, description=None) -> bool:
        current = self.get_by_id(location_id)
        if not current:
            return False
        self._s.tables["locations"][location_id] = replace(
            current,
            name=name,
            latitude=latitude,
            longitude=longitude,
            radius_meters=radius_meters,
            description=description,
        )
        return True

    def set_active(self, location_id: int, *, is_active: bool) -> bool:
        current = self.get_by_id(location_id)
        if not current:
            return False
        self._s.tables["locations"][location_id] = replace(current, is_active=is_active)
        return True

    def delete(self, location_id: int) -> bool:
        return self._s.tables["locations"].pop(location_id, None) is not None


class InMemoryLeaveTypes:
    def __init__(self, store: Store):
        self._s = store

    def list_all(self, *, only_active: bool = False):
        rows = [t for t in self._s.rows("leave_types") if t.is_active or not only_active]
        return sorted(rows, key=lambda t: (t.sort_order, t.leave_type_id))

    def get_by_id(self, leave_type_id: int):
        return self._s.tables["leave_types"].get(leave_type_id)

    def get_by_code(self, code: str):
        return next((t for t in self._s.rows("leave_types") if t.code == code), None)

    def create(self, *, name, code, color, sort_order) -> int:
        return self._s.insert(
            "leave_types",
            lambda i: LeaveType(leave_type_id=i, name=name, code=code, color=color, sort_order=sort_order),
        )

    def update(self, *, leave_type_id, name, color, sort_order) -> bool:
        current = self.get_by_id(leave_type_id)
        if not current:
            return False
        self._s.tables["leave_types"][leave_type_id] = replace(current, name=name, color=color, sort_order=sort_order)
        return True

    def set_active(self, leave_type_id: int, *, is_active: bool) -> bool:
        current = self.get_by_id(leave_type_id)
        if not current:
            return False
        self._s.tables["leave_types"][leave_type_id] = replace(current, is_active=is_active)
        return True


class InMemoryCars:
    def __init__(self, store: Store):
        self._s = store
        self.fail_status_updates = False

    def list_cars(self, *, only_active: bool = True):
        rows = [c for c in self._s.rows("cars") if c.is_active or not only_active]
        return sorted(rows, key=lambda c: c.plate_number)

    def get_by_id(self, car_id: int):
        return self._s.tables["cars"].get(car_id)

    def get_by_plate(self, plate_number: str):
        return next((c for c in self._s.rows("cars") if c.plate_number == plate_number), None)

    def upsert(self, *, car_id, plate_number, model, status, is_active=True, last_mileage=None) -> int:
        if car_id is None:
            return self._s.insert(
                "cars",
                lambda i: Car(
                    car_id=i,
                    plate_number=plate_number,
                    model=model,
                    status=status,
                    is_active=is_active,
                    last_mileage=last_mileage,
                ),
            )
        current = self.get_by_id(car_id)
        if not current:
            return 0
        self._s.tables["cars"][car_id] = replace(
            current,
            plate_number=plate_number,
            model=model,
            status=status,
            is_active=is_active,
            last_mileage=last_mileage,
        )
        return car_id

    def set_status(self, car_id: int, status: CarStatus, *, cur=None) -> bool:
        if self.fail_status_updates:
            raise RuntimeError("car store unavailable")
        current = self.get_by_id(car_id)
        if not current:
            return False
        self._s.tables["cars"][car_id] = replace(current, status=status)
        return True


class InMemoryRequests:
    """Request rows, joined to employees/leave types/cars on read like the SQL adapter."""

    def __init__(self, store: Store):
        self._s = store

    def _requester(self, employee_id: int) -> Optional[Requester]:
        e = self._s.tables["employees"].get(employee_id)
        if not e:
            return None
        return Requester(employee_id=e.employee_id, name=e.name, department=e.department, manager_id=e.manager_id)

    def _joined(self, req):
        req = replace(req, requester=self._requester(req.employee_id))
        if isinstance(req, LeaveRequest):
            lt = self._s.tables["leave_types"].get(req.leave_type_id)
            req = replace(req, leave_type_name=lt.name if lt else None, leave_type_code=lt.code if lt else None)
        if isinstance(req, CarUsageRequest):
            car = self._s.tables["cars"].get(req.car_id)
            req = replace(req, plate_number=car.plate_number if car else None)
        return req

    def _list(self, table, *, status=None, employee_id=None, manager_id=None, limit=200, keep=lambda r: True):
        rows = [self._joined(r) for r in self._s.rows(table)]
        rows = [
            r
            for r in rows
            if (status is None or r.status == status)
            and (employee_id is None or r.employee_id == employee_id)
            and (manager_id is None or (r.requester is not None and r.requester.manager_id == manager_id))
            and keep(r)
        ]
        rows.sort(key=lambda r: (r.created_at, r.request_id), reverse=True)
        return rows[:limit]

    def _decide(self, table, request_id, **changes) -> bool:
        current = self._s.tables[table].get(request_id)
        if not current or current.status != RequestStatus.PENDING:
            return False
        self._s.tables[table][request_id] = replace(current, **changes)
        return True

    # -------- Leave --------
    def create_leave(self, *, employee_id, leave_type_id, start_at, end_at, reason, hours, car_id=None) -> int:
        return self._s.insert(
            "leaves",
            lambda i: LeaveRequest(
                request_id=i,
                employee_id=employee_id,
                leave_type_id=leave_type_id,
                start_at=start_at,
                end_at=end_at,
                reason=reason,
                hours=hours,
                status=RequestStatus.PENDING,
                created_at=self._s.now,
                car_id=car_id,
            ),
        )

    def get_leave(self, request_id: int):
        r = self._s.tables["leaves"].get(request_id)
        return self._joined(r) if r else None

    def list_leaves(self, *, status=None, employee_id=None, manager_id=None, overlapping=None, limit=200):
        keep = (lambda r: r.start_at < overlapping[1] and r.end_at >= overlapping[0]) if overlapping else (lambda r: True)
        return self._list(
            "leaves", status=status, employee_id=employee_id, manager_id=manager_id, limit=limit, keep=keep
        )

    def decide_leave(self, *, request_id, status, approver_id, decided_at, comment=None, cur=None) -> bool:
        return self._decide(
            "leaves", request_id, status=status, approver_id=approver_id, approved_at=decided_at, review_comment=comment
        )

    # -------- Makeup --------
    def create_makeup(self, *, employee_id, request_date, request_time, check_type, reason) -> int:
        return self._s.insert(
            "makeups",
            lambda i: MakeupAttendanceRequest(
                request_id=i,
                employee_id=employee_id,
                request_date=request_date,
                request_time=request_time,
                check_type=check_type,
                reason=reason,
                status=RequestStatus.PENDING,
                created_at=self._s.now,
            ),
        )

    def get_makeup(self, request_id: int):
        r = self._s.tables["makeups"].get(request_id)
        return self._joined(r) if r else None

    def list_makeups(self, *, status=None, employee_id=None, manager_id=None, limit=200):
        return self._list("makeups", status=status, employee_id=employee_id, manager_id=manager_id, limit=limit)

    def decide_makeup(self, *, request_id, status, reviewer_id, decided_at, comment=None, cur=None) -> bool:
        return self._decide(
            "makeups", request_id, status=status, reviewer_id=reviewer_id, reviewed_at=decided_at, review_comment=comment
        )

    # -------- Car --------
    def create_car_request(self, *, employee_id, car_id, start_at, end_at, purpose) -> int:
        return self._s.insert(
            "car_requests",
            lambda i: CarUsageRequest(
                request_id=i,
                employee_id=employee_id,
                car_id=car_id,
                start_at=start_at,
                end_at=end_at,
                purpose=purpose,
                status=RequestStatus.PENDING,
                created_at=self._s.now,
            ),
        )

    def get_car_request(self, request_id: int):
        r = self._s.tables["car_requests"].get(request_id)
        return self._joined(r) if r else None

    def list_car_requests(self, *, status=None, employee_id=None, manager_id=None, limit=200):
        return self._list("car_requests", status=status, employee_id=employee_id, manager_id=manager_id, limit=limit)

    def decide_car_request(self, *, request_id, status, approver_id, decided_at, comment=None, cur=None) -> bool:
        return self._decide(
            "car_requests",
            request_id,
            status=status,
            approver_id=approver_id,
            approved_at=decided_at,
            review_comment=comment,
        )


class InMemoryTransactions:
    def __init__(self, store: Store):
        self._s = store

    @contextmanager
    def begin(self):
        snap = self._s.snapshot()
        try:
            yield self._s
        except Exception:
            self._s.restore(snap)
            raise


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2025, 1, 6, 9, 0, 0)


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def repos(store):
    return SimpleNamespace(
        employees=InMemoryEmployees(store),
        attendance=InMemoryAttendance(store),
        locations=InMemoryLocations(store),
        leave_types=InMemoryLeaveTypes(store),
        cars=InMemoryCars(store),
        requests=InMemoryRequests(store),
        tx=InMemoryTransactions(store),
    )


@pytest.fixture
def container(repos):
    return wire(
        employees=repos.employees,
        attendance=repos.attendance,
        locations=repos.locations,
        leave_types=repos.leave_types,
        cars=repos.cars,
        requests=repos.requests,
        tx=repos.tx,
    )


@pytest.fixture
def people(repos):
    """A supervisor with one direct report, an unrelated employee and an admin."""
    ids = SimpleNamespace()
    ids.admin = repos.employees.create(name="Ada Admin", pin="000001", department="Management", role=Role.ADMIN)
    ids.boss = repos.employees.create(name="Sam Supervisor", pin="111111", department="Sales")
    ids.staff = repos.employees.create(name="Tia Staff", pin="222222", department="Sales", manager_id=ids.boss)
    ids.other = repos.employees.create(name="Olu Other", pin="333333", department=None)
    return ids


@pytest.fixture
def catalog(repos):
    ids = SimpleNamespace()
    ids.annual = repos.leave_types.create(name="Annual leave", code="ANNUAL", color=None, sort_order=1)
    ids.trip = repos.leave_types.create(name="Business trip", code="BUSINESS_TRIP", color=None, sort_order=2)
    ids.car = repos.cars.upsert(car_id=None, plate_number="ABC-1234", model="Corolla", status=CarStatus.AVAILABLE)
    return ids


@pytest.fixture
def add_punch(repos):
    def _add(employee_id: int, check_type: CheckType, day: date, at: time, **kwargs) -> int:
        return repos.attendance.insert_punch(
            employee_id=employee_id,
            check_type=check_type,
            timestamp=datetime.combine(day, at),
            **kwargs,
        )

    return _add
