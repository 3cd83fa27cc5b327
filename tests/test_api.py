from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.container import build_services
from src.attendance_tracker.attendance_tracker.employees.model import Employee
from src.attendance_tracker.attendance_tracker.main import create_app
from tests.fakes import FakeAttendanceRepo, FakeCompanyRepo, FakeEmployeeRepo, FakeLeaveRepo, demo_company, utc

NINE = utc(2025, 10, 1, 3, 30)
FIVE_PM = utc(2025, 10, 1, 11, 30)


def build(employees=None):
    return build_services(
        attendance_repo=FakeAttendanceRepo(),
        employees_repo=employees
        or FakeEmployeeRepo(Employee(employee_id=1, company_id=1, full_name="Asha", email="a@example.com", sick_days_per_month=1)),
        companies_repo=FakeCompanyRepo(demo_company()),
        leave_repo=FakeLeaveRepo(),
    )


@pytest.fixture
def clock(monkeypatch):
    state = {"now": NINE}
    monkeypatch.setattr(
        "src.attendance_tracker.attendance_tracker.attendance.service.utc_now", lambda: state["now"]
    )
    monkeypatch.setattr(
        "src.attendance_tracker.attendance_tracker.reconciler.service.utc_now", lambda: state["now"]
    )
    return state


@pytest.fixture
def container():
    return build()


@pytest.fixture
def client(container):
    app = create_app(container, settings_module="config.testing")
    with app.test_client() as c:
        with c.session_transaction() as sess:
            sess["employee_id"] = 1
        yield c


def test_requests_without_session_are_unauthorized(container):
    app = create_app(container, settings_module="config.testing")
    resp = app.test_client().get("/api/attendance")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "NOT_AUTHENTICATED"


def test_sign_in_and_out_flow(client, clock):
    resp = client.post("/api/attendance", json={"type": "signIn", "location": "WFH"})
    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["location"] == "work_from_home"

    again = client.post("/api/attendance", json={"type": "signIn"})
    assert again.status_code == 409
    assert again.get_json() == {"error": "Already signed in", "code": "CONFLICT"}

    clock["now"] = FIVE_PM
    out = client.post("/api/attendance", json={"type": "signOut", "hours": 1})
    assert out.status_code == 200
    assert out.get_json()["attendance"]["totalHoursWorked"] == 8.0

    status = client.get("/api/attendance").get_json()
    assert status["status"] == "signedOut"


def test_sign_in_outside_window(client, clock):
    clock["now"] = utc(2025, 10, 1, 1, 0)

    resp = client.post("/api/attendance", json={"type": "signIn"})

    assert resp.status_code == 422
    assert resp.get_json()["code"] == "OUT_OF_WINDOW"


def test_unknown_type_and_bad_body(client, clock):
    assert client.post("/api/attendance", json={"type": "dance"}).status_code == 400
    assert client.post("/api/attendance", json=["signIn"]).status_code == 400
    assert client.post("/api/attendance", json={"type": "leave"}).status_code == 400


def test_leave_then_quota_exceeded(client, clock):
    first = client.post("/api/attendance", json={"type": "leave", "date": "2025-10-02", "leaveType": "sick"})
    assert first.status_code == 200

    second = client.post("/api/attendance", json={"type": "leave", "date": "2025-10-03"})
    assert second.status_code == 409
    assert second.get_json()["code"] == "QUOTA_EXCEEDED"

    balance = client.get("/api/leave?date=2025-10-15").get_json()
    assert balance["sickLeaves"] == 1
    assert balance["sickRemaining"] == 0


def test_half_day_lunch_and_overtime_routes(client, clock):
    client.post("/api/attendance", json={"type": "signIn"})

    assert client.post("/api/attendance/lunch").status_code == 200
    assert client.get("/api/attendance").get_json()["status"] == "idle"
    assert client.patch("/api/attendance/lunch").status_code == 200

    bad = client.patch("/api/attendance/overtime", json={"hours": 20})
    assert bad.status_code == 400
    ok = client.patch("/api/attendance/overtime", json={"hours": 2})
    assert ok.get_json()["overtimeHours"] == 2.0
    assert client.get("/api/attendance/overtime").get_json() == {"overtimeHours": 2.0}

    half = client.post("/api/attendance/halfday", json={"date": "2025-10-01"})
    assert half.status_code == 409


def test_report_route(client):
    resp = client.get("/api/reports/attendance?dateRange=2025-09-29_to_2025-10-03")

    assert resp.status_code == 200
    assert resp.get_json()["stats"]["totalDays"] == 5
    assert client.get("/api/reports/attendance").status_code == 400


def test_cron_requires_secret(client, clock):
    client.post("/api/attendance", json={"type": "signIn"})
    clock["now"] = utc(2025, 10, 1, 13, 30)

    assert client.get("/api/cron").status_code == 401

    resp = client.get("/api/cron", headers={"Authorization": "Bearer test-cron-secret"})
    assert resp.status_code == 200
    assert resp.get_json()["results"]["autoSignedOutEmployees"] == 1


def test_unexpected_errors_return_500():
    class BrokenEmployees(FakeEmployeeRepo):
        def get_by_id(self, employee_id):
            raise RuntimeError("boom")

    app = create_app(build(employees=BrokenEmployees()), settings_module="config.testing")
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["employee_id"] = 1

    resp = client.get("/api/attendance")

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Internal server error"
