from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .cars.mysql_car_repository import MySQLCarRepository
from .cars.repository import CarRepository
from .cars.service import CarService
from .core.constants import DEFAULT_DEBOUNCE_MINUTES, DEFAULT_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .database.transaction import MySQLTransactionManager, TransactionManager
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .geo.mysql_location_repository import MySQLLocationRepository
from .geo.repository import LocationRepository
from .geo.service import CompanyLocationService
from .leaves.mysql_leave_type_repository import MySQLLeaveTypeRepository
from .leaves.repository import LeaveTypeRepository
from .leaves.service import LeaveTypeService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .timesheet.calculator.standard_calculator import StandardWorkHoursCalculator
from .timesheet.service import TimesheetService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    locations_repo: LocationRepository
    leave_types_repo: LeaveTypeRepository
    cars_repo: CarRepository
    requests_repo: RequestRepository

    employee_service: EmployeeService
    attendance_service: AttendanceService
    location_service: CompanyLocationService
    leave_type_service: LeaveTypeService
    car_service: CarService
    request_service: RequestService
    timesheet_service: TimesheetService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    employees: EmployeeRepository,
    attendance: AttendanceRepository,
    locations: LocationRepository,
    leave_types: LeaveTypeRepository,
    cars: CarRepository,
    requests: RequestRepository,
    tx: TransactionManager,
    grace_minutes: int = DEFAULT_GRACE_MINUTES,
    debounce_minutes: int = DEFAULT_DEBOUNCE_MINUTES,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build every service on top of the given repositories."""
    return Container(
        employees_repo=employees,
        attendance_repo=attendance,
        locations_repo=locations,
        leave_types_repo=leave_types,
        cars_repo=cars,
        requests_repo=requests,
        employee_service=EmployeeService(employees),
        attendance_service=AttendanceService(attendance, employees, locations, debounce_minutes=debounce_minutes),
        location_service=CompanyLocationService(locations),
        leave_type_service=LeaveTypeService(leave_types),
        car_service=CarService(cars),
        request_service=RequestService(requests, attendance, employees, leave_types, cars, tx),
        timesheet_service=TimesheetService(
            attendance,
            employees,
            requests,
            StandardWorkHoursCalculator(grace_minutes=grace_minutes),
        ),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    grace_minutes: int = DEFAULT_GRACE_MINUTES,
    debounce_minutes: int = DEFAULT_DEBOUNCE_MINUTES,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire(
        employees=MySQLEmployeeRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        locations=MySQLLocationRepository(conn),
        leave_types=MySQLLeaveTypeRepository(conn),
        cars=MySQLCarRepository(conn),
        requests=MySQLRequestRepository(conn),
        tx=MySQLTransactionManager(conn),
        grace_minutes=grace_minutes,
        debounce_minutes=debounce_minutes,
        conn=conn,
    )
