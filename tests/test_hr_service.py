from datetime import datetime, timedelta, timezone

import pytest

from conftest import EMPLOYEE_ID, FakeOdooClient
from services.attendance_reconciler import AttendanceReconciler
from services.hr_service import HrService
from services.odoo_rpc import OdooTransportError
from utils.odoo_datetime import format_odoo_datetime

NOW = datetime(2024, 3, 5, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def hr_service(fake_odoo, mongo_db):
    reconciler = AttendanceReconciler(fake_odoo, EMPLOYEE_ID, clock=lambda: NOW)
    return HrService(fake_odoo, employee_id=EMPLOYEE_ID, reconciler=reconciler, clock=lambda: NOW)


def test_current_employee(hr_service):
    employee = hr_service.get_current_employee()

    assert employee.id == EMPLOYEE_ID
    assert employee.name == "Jane Doe"
    assert employee.department == "R&D"


def test_current_employee_missing(fake_odoo, mongo_db):
    fake_odoo.employees = []

    assert HrService(fake_odoo).get_current_employee() is None


def test_current_employee_not_authenticated(mongo_db):
    client = FakeOdooClient(authenticated=False)

    assert HrService(client).get_current_employee() is None
    assert client.calls == []


def test_today_summary_adds_open_session(hr_service, fake_odoo):
    fake_odoo.add_record(
        check_in=format_odoo_datetime(NOW - timedelta(minutes=90)),
        check_out=format_odoo_datetime(NOW - timedelta(minutes=60)),
    )
    open_id = fake_odoo.add_record(check_in=format_odoo_datetime(NOW - timedelta(minutes=20)))
    # Yesterday, ignored
    fake_odoo.add_record(
        check_in=format_odoo_datetime(NOW - timedelta(days=2)),
        check_out=format_odoo_datetime(NOW - timedelta(days=2) + timedelta(hours=8)),
    )

    summary = hr_service.get_today_summary()

    assert summary["is_checked_in"] is True
    assert summary["attendance_id"] == open_id
    assert summary["current_check_in"] == NOW - timedelta(minutes=20)
    assert len(summary["today_records"]) == 2
    assert summary["total_worked_hours"] == "00:50:00"


def test_today_summary_checked_out(hr_service):
    summary = hr_service.get_today_summary()

    assert summary["is_checked_in"] is False
    assert summary["current_check_in"] is None
    assert summary["today_records"] == []
    assert summary["total_worked_hours"] == "00:00:00"


def test_history_is_cached(hr_service, fake_odoo):
    fake_odoo.add_record(check_in="2024-03-04 08:00:00", check_out="2024-03-04 16:00:00")

    first = hr_service.get_history()
    fake_odoo.add_record(check_in="2024-03-05 08:00:00", check_out="2024-03-05 16:00:00")
    second = hr_service.get_history()
    refreshed = hr_service.get_history(refresh=True)

    assert len(first) == 1
    assert len(second) == 1
    assert len(refreshed) == 2
    assert refreshed[0].check_in > refreshed[1].check_in
    assert len(fake_odoo.calls_of("search_read")) == 2


def test_history_invalidate(hr_service, fake_odoo):
    hr_service.get_history()
    hr_service.invalidate_history()
    hr_service.get_history()

    assert len(fake_odoo.calls_of("search_read")) == 2


def test_history_error_propagates(hr_service, fake_odoo):
    fake_odoo.read_error = OdooTransportError("HTTP Error: 500", 500)

    with pytest.raises(OdooTransportError):
        hr_service.get_history(refresh=True)


def test_unreadable_history_is_not_cached(hr_service, fake_odoo):
    record_id = fake_odoo.add_record(check_in="not a date", check_out=False)

    with pytest.raises(ValueError):
        hr_service.get_history(refresh=True)

    assert hr_service.storage.get_cache(f"attendance:{EMPLOYEE_ID}") is None

    fake_odoo.records[record_id]["check_in"] = "2024-03-05 08:00:00"
    assert len(hr_service.get_history()) == 1
