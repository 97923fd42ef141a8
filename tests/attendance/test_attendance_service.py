import logging
from datetime import datetime, timedelta

import pytest

from punchclock.core.enums import CheckType, Role
from punchclock.core.exceptions import AuthenticationError, AuthorizationError, DuplicatePunchError, ValidationError
from punchclock.core.session import Principal
from punchclock.geo.model import GeoPoint


def test_same_type_within_debounce_is_refused(container, people, fixed_now):
    svc = container.attendance_service
    svc.record_punch(people.staff, CheckType.IN, now=fixed_now)

    with pytest.raises(DuplicatePunchError):
        svc.record_punch(people.staff, CheckType.IN, now=fixed_now + timedelta(minutes=4, seconds=59))


def test_debounce_window_is_inclusive(container, people, fixed_now):
    svc = container.attendance_service
    svc.record_punch(people.staff, CheckType.IN, now=fixed_now)

    with pytest.raises(DuplicatePunchError):
        svc.record_punch(people.staff, CheckType.IN, now=fixed_now + timedelta(minutes=5))
    svc.record_punch(people.staff, CheckType.IN, now=fixed_now + timedelta(minutes=5, seconds=1))


def test_other_type_is_accepted_immediately(container, people, fixed_now):
    svc = container.attendance_service
    svc.record_punch(people.staff, CheckType.IN, now=fixed_now)
    punch = svc.record_punch(people.staff, CheckType.OUT, now=fixed_now + timedelta(seconds=30))

    assert punch.check_type == CheckType.OUT
    assert [p.check_type for p in svc.recent_punches(people.staff)] == [CheckType.OUT, CheckType.IN]


def test_later_punch_does_not_block_debounce(container, people, fixed_now, add_punch):
    tomorrow = fixed_now + timedelta(days=1)
    add_punch(people.staff, CheckType.IN, tomorrow.date(), tomorrow.time(), is_makeup=True)

    punch = container.attendance_service.record_punch(people.staff, CheckType.IN, now=fixed_now)
    assert punch.timestamp == fixed_now


def test_debounce_is_per_employee(container, people, fixed_now):
    svc = container.attendance_service
    svc.record_punch(people.staff, CheckType.IN, now=fixed_now)
    svc.record_punch(people.boss, CheckType.IN, now=fixed_now)


def test_recent_punches_newest_first_and_limited(container, people, fixed_now):
    svc = container.attendance_service
    for i in range(7):
        svc.record_punch(people.staff, CheckType.IN if i % 2 == 0 else CheckType.OUT, now=fixed_now + timedelta(hours=i))

    recent = svc.recent_punches(people.staff)
    assert len(recent) == 5
    assert recent[0].timestamp == fixed_now + timedelta(hours=6)
    assert [p.timestamp for p in recent] == sorted((p.timestamp for p in recent), reverse=True)


@pytest.mark.parametrize("pin", ["", "12345", "1234567", "12a456"])
def test_identify_rejects_malformed_pin(container, people, pin):
    with pytest.raises(ValidationError):
        container.attendance_service.identify(pin)


def test_identify_unknown_or_inactive_pin(container, repos, people):
    with pytest.raises(AuthenticationError):
        container.attendance_service.identify("999999")

    repos.employees.set_active(people.staff, is_active=False)
    with pytest.raises(AuthenticationError):
        container.attendance_service.identify("222222")


def test_identify_returns_active_employee(container, people):
    assert container.attendance_service.identify(" 222222 ").employee_id == people.staff


def test_kiosk_punch_records_position_and_distance(container, repos, people, fixed_now):
    repos.locations.create(name="Office", latitude=25.0330, longitude=121.5654, radius_meters=100)

    outcome = container.attendance_service.kiosk_punch(
        "222222", CheckType.IN, GeoPoint(25.0334, 121.5654, accuracy=12.0), now=fixed_now
    )

    assert outcome.employee.employee_id == people.staff
    assert outcome.range_check.within_range is True
    assert outcome.range_check.location.name == "Office"

    stored = repos.attendance.get_by_id(outcome.punch.punch_id)
    assert stored.latitude == 25.0334
    assert stored.accuracy == 12.0
    assert stored.distance_meters == outcome.range_check.distance_meters
    assert stored.within_range is True
    assert stored.is_makeup is False
    assert outcome.recent == (stored,)


def test_kiosk_punch_out_of_range_is_recorded_with_warning(container, repos, people, fixed_now, caplog):
    repos.locations.create(name="Office", latitude=25.0330, longitude=121.5654, radius_meters=100)

    with caplog.at_level(logging.WARNING, logger="punchclock.attendance.service"):
        outcome = container.attendance_service.kiosk_punch("222222", "IN", GeoPoint(25.1, 121.5654), now=fixed_now)

    assert outcome.range_check.within_range is False
    assert repos.attendance.get_by_id(outcome.punch.punch_id).within_range is False
    assert "out of range" in caplog.text


def test_kiosk_punch_without_geolocation(container, repos, people, fixed_now, caplog):
    with caplog.at_level(logging.WARNING, logger="punchclock.attendance.service"):
        outcome = container.attendance_service.kiosk_punch("222222", CheckType.OUT, None, now=fixed_now)

    assert outcome.range_check is None
    stored = repos.attendance.get_by_id(outcome.punch.punch_id)
    assert stored.latitude is None
    assert stored.within_range is None
    assert "without geolocation" in caplog.text


def test_kiosk_punch_bad_pin_records_nothing(container, repos, people, fixed_now):
    with pytest.raises(AuthenticationError):
        container.attendance_service.kiosk_punch("999999", CheckType.IN, None, now=fixed_now)
    assert repos.attendance.get_recent_for_employee(people.staff, 10) == []


@pytest.mark.parametrize("check_type", ["in", "BREAK", None])
def test_bad_check_type_is_a_validation_error(container, repos, people, fixed_now, caplog, check_type):
    svc = container.attendance_service
    with caplog.at_level(logging.WARNING, logger="punchclock.attendance.service"):
        with pytest.raises(ValidationError):
            svc.kiosk_punch("222222", check_type, None, now=fixed_now)
    with pytest.raises(ValidationError):
        svc.record_punch(people.staff, check_type, now=fixed_now)

    assert caplog.records == []
    assert repos.attendance.get_recent_for_employee(people.staff, 10) == []


def test_ledger_failure_is_fatal(container, repos, people, fixed_now):
    repos.attendance.fail_inserts = True
    with pytest.raises(RuntimeError):
        container.attendance_service.kiosk_punch("222222", CheckType.IN, None, now=fixed_now)


def test_only_admin_deletes_punches(container, repos, people, fixed_now):
    punch = container.attendance_service.record_punch(people.staff, CheckType.IN, now=fixed_now)

    with pytest.raises(AuthorizationError):
        container.attendance_service.delete_punch(Principal(people.boss, Role.EMPLOYEE), punch_id=punch.punch_id)

    container.attendance_service.delete_punch(Principal(people.admin, Role.ADMIN), punch_id=punch.punch_id)
    assert repos.attendance.get_by_id(punch.punch_id) is None

    with pytest.raises(ValidationError):
        container.attendance_service.delete_punch(Principal(people.admin, Role.ADMIN), punch_id=punch.punch_id)
