from datetime import date, datetime, time

import pytest

from punchclock.core.enums import CheckType, RequestStatus
from punchclock.core.exceptions import ValidationError


@pytest.fixture
def january(repos, people, catalog, add_punch):
    add_punch(people.staff, CheckType.IN, date(2025, 1, 6), time(8, 25))
    add_punch(people.staff, CheckType.OUT, date(2025, 1, 6), time(17, 10))

    def leave(leave_type_id, day, *, approve=True):
        request_id = repos.requests.create_leave(
            employee_id=people.staff,
            leave_type_id=leave_type_id,
            start_at=datetime.combine(day, time(9, 0)),
            end_at=datetime.combine(day, time(18, 0)),
            reason="r",
            hours=8.0,
        )
        if approve:
            repos.requests.decide_leave(
                request_id=request_id,
                status=RequestStatus.APPROVED,
                approver_id=people.boss,
                decided_at=datetime(2025, 1, 2, 9, 0),
            )
        return request_id

    leave(catalog.trip, date(2025, 1, 7))
    leave(catalog.annual, date(2025, 1, 8))
    leave(catalog.trip, date(2025, 1, 9), approve=False)
    return people


def test_build_month(container, january):
    sheet = container.timesheet_service.build_month(january.staff, 2025, 1)
    days = {d.day: d for d in sheet.days}

    assert len(sheet.days) == 31
    assert days[date(2025, 1, 6)].worked_hours == 8.0
    assert [p.check_type for p in days[date(2025, 1, 6)].punches] == [CheckType.IN, CheckType.OUT]

    trip = days[date(2025, 1, 7)]
    assert trip.worked_hours == 8.0
    assert trip.credited is True
    assert [l.leave_type_code for l in trip.leaves] == ["BUSINESS_TRIP"]

    annual = days[date(2025, 1, 8)]
    assert annual.worked_hours == 0.0
    assert len(annual.leaves) == 1

    # pending leave is not shown and not credited
    assert days[date(2025, 1, 9)].leaves == ()
    assert days[date(2025, 1, 9)].worked_hours == 0.0

    assert days[date(2025, 1, 1)].holiday == "元旦"
    assert sheet.total_hours == 16.0


def test_build_month_ignores_other_months(container, repos, january, add_punch):
    add_punch(january.staff, CheckType.IN, date(2025, 2, 3), time(8, 0))
    add_punch(january.staff, CheckType.OUT, date(2025, 2, 3), time(17, 0))

    sheet = container.timesheet_service.build_month(january.staff, 2025, 1)
    assert sheet.total_hours == 16.0


def test_build_month_rejects_unknown_employee_and_month(container, january):
    with pytest.raises(ValidationError):
        container.timesheet_service.build_month(999, 2025, 1)
    with pytest.raises(ValidationError):
        container.timesheet_service.build_month(january.staff, 2025, 13)


def test_build_table_for_department(container, january):
    table = container.timesheet_service.build_table(date(2025, 1, 6), date(2025, 1, 7), department="Sales")

    assert [(r.name, r.day) for r in table.rows] == [
        ("Sam Supervisor", date(2025, 1, 6)),
        ("Sam Supervisor", date(2025, 1, 7)),
        ("Tia Staff", date(2025, 1, 6)),
        ("Tia Staff", date(2025, 1, 7)),
    ]
    worked = table.rows[2]
    assert worked.masked_pin == "*****2"
    assert worked.first_in == datetime(2025, 1, 6, 8, 25)
    assert worked.last_out == datetime(2025, 1, 6, 17, 10)
    assert worked.worked_hours == 8.0
    assert table.rows[3].leave_names == ("Business trip",)

    assert table.totals == {january.boss: 0.0, january.staff: 16.0}


def test_build_table_for_one_employee(container, january):
    table = container.timesheet_service.build_table(date(2025, 1, 1), date(2025, 1, 31), employee_id=january.staff)
    assert {r.employee_id for r in table.rows} == {january.staff}
    assert len(table.rows) == 31
    assert table.totals[january.staff] == 16.0


def test_build_table_unknown_department_is_empty(container, january):
    table = container.timesheet_service.build_table(date(2025, 1, 1), date(2025, 1, 2), department="Nowhere")
    assert table.rows == ()
    assert table.totals == {}


def test_build_table_rejects_inverted_range(container, january):
    with pytest.raises(ValidationError):
        container.timesheet_service.build_table(date(2025, 1, 2), date(2025, 1, 1))


def test_report_keeps_older_leaves_in_a_busy_window(container, repos, january, catalog):
    for n in range(1000):
        request_id = repos.requests.create_leave(
            employee_id=january.boss,
            leave_type_id=catalog.annual,
            start_at=datetime(2025, 1, 1 + n % 28, 9, 0),
            end_at=datetime(2025, 1, 1 + n % 28, 18, 0),
            reason="r",
            hours=8.0,
        )
        repos.requests.decide_leave(
            request_id=request_id,
            status=RequestStatus.APPROVED,
            approver_id=january.admin,
            decided_at=datetime(2025, 1, 3, 9, 0),
        )

    table = container.timesheet_service.build_table(date(2025, 1, 1), date(2025, 1, 31))
    assert table.totals[january.staff] == 16.0
    trip_day = [r for r in table.rows if r.employee_id == january.staff and r.day == date(2025, 1, 7)]
    assert trip_day[0].leave_names == ("Business trip",)
