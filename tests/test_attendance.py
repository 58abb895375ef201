"""Staff attendance: marking, edit windows, payroll locks, admin overrides, exports.

Invariants:
    - Attendance is one row per staff member per day; saving again updates it
    - Future dates are rejected; past dates need confirmation; >30 days is read-only for salons
    - Locked rows can only be changed through the admin override
    - Working hours are derived from check-in/check-out
"""

import io
from datetime import date, timedelta

import pytest
from openpyxl import load_workbook

from salonx.domain.attendance.service import compute_working_hours, resolve_export_range
from salonx.models_attendance import Attendance, AttendanceAuditLog
from tests.conftest import ADMIN_EMAIL, session_cookie_for

TODAY = date.today()


def record(staff, day=None, status="present", **extra):
    return {"staff_id": staff.id, "attendance_date": (day or TODAY).isoformat(), "status": status, **extra}


def test_compute_working_hours():
    assert compute_working_hours("09:00", "17:30") == 8.5
    assert compute_working_hours("09:00", None) is None
    assert compute_working_hours("18:00", "09:00") is None


def test_resolve_export_range():
    assert resolve_export_range(single_date="2025-02-10") == (date(2025, 2, 10), date(2025, 2, 10))
    assert resolve_export_range(month="2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
    assert resolve_export_range(today=date(2025, 4, 15)) == (date(2025, 4, 1), date(2025, 4, 30))


def test_save_and_read_today(salon_client, staff):
    response = salon_client.post(
        "/api/attendance", json={"records": [record(staff, check_in_time="09:00", check_out_time="18:00")]}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Saved attendance for 1 staff members"
    assert body["data"][0]["working_hours"] == 9.0

    daily = salon_client.get("/api/attendance", params={"date": TODAY.isoformat()}).json()
    assert daily["isLocked"] is False
    assert daily["lockThreshold"] == 30
    assert [row["status"] for row in daily["data"]] == ["present"]


def test_saving_twice_updates_same_row(salon_client, db, staff):
    salon_client.post("/api/attendance", json={"records": [record(staff)]})
    salon_client.post("/api/attendance", json={"records": [record(staff, status="half_day")]})
    rows = db.query(Attendance).all()
    assert len(rows) == 1
    assert rows[0].status == "half_day"


def test_future_date_is_rejected(salon_client, staff):
    response = salon_client.post("/api/attendance", json={"records": [record(staff, TODAY + timedelta(days=1))]})
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot mark attendance for future dates"


def test_past_date_needs_confirmation(salon_client, staff):
    yesterday = TODAY - timedelta(days=1)
    response = salon_client.post("/api/attendance", json={"records": [record(staff, yesterday)]})
    assert response.status_code == 400
    assert response.json()["detail"]["requireConfirmation"] is True

    confirmed = salon_client.post(
        "/api/attendance", json={"records": [record(staff, yesterday)], "confirmPastEdit": True}
    )
    assert confirmed.status_code == 200


def test_older_than_30_days_is_read_only(salon_client, staff):
    response = salon_client.post(
        "/api/attendance",
        json={"records": [record(staff, TODAY - timedelta(days=31))], "confirmPastEdit": True},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot edit attendance older than 30 days"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"records": []}, "Records array is required"),
        ({"records": [{"staff_id": "x"}]}, "Each record must have staff_id, attendance_date, and status"),
    ],
)
def test_save_validation(salon_client, payload, message):
    response = salon_client.post("/api/attendance", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == message


def test_invalid_status(salon_client, staff):
    response = salon_client.post("/api/attendance", json={"records": [record(staff, status="wfh")]})
    assert response.json()["detail"] == "Invalid status. Must be one of: present, absent, half_day, leave"


def test_staff_from_other_salon_is_rejected(client, staff, other_salon):
    client.cookies.update(session_cookie_for(other_salon.id, other_salon.owner_email))
    response = client.post("/api/attendance", json={"records": [record(staff)]})
    assert response.status_code == 400
    assert response.json()["detail"] == "One or more staff members do not belong to this salon"


def test_monthly_summary(salon_client, staff):
    salon_client.post(
        "/api/attendance", json={"records": [record(staff, check_in_time="10:00", check_out_time="14:00")]}
    )
    summary = salon_client.get(
        "/api/attendance", params={"month": TODAY.strftime("%Y-%m"), "staff_id": staff.id}
    ).json()["data"]
    assert summary["total_present_days"] == 1
    assert summary["total_working_hours"] == 4.0
    assert len(summary["records"]) == 1


def test_daily_requires_date(salon_client):
    assert salon_client.get("/api/attendance").json()["detail"] == "Date parameter is required"


def test_admin_lock_blocks_salon_edits(client, db, salon, staff):
    salon_cookie = session_cookie_for(salon.id, salon.owner_email)
    admin_cookie = session_cookie_for("admin", ADMIN_EMAIL, is_admin=True)

    client.cookies.update(salon_cookie)
    client.post("/api/attendance", json={"records": [record(staff)]})

    client.cookies.update(admin_cookie)
    locked = client.patch(
        "/api/admin/attendance",
        json={"salon_id": salon.id, "year": TODAY.year, "month": TODAY.month, "lock": True},
    )
    assert locked.json() == {"success": True, "count": 1, "message": "Locked 1 attendance records"}

    client.cookies.update(salon_cookie)
    response = client.post("/api/attendance", json={"records": [record(staff, status="absent")]})
    assert response.status_code == 400
    assert response.json()["detail"] == "Some records are locked and cannot be edited"

    client.cookies.update(admin_cookie)
    override = client.post(
        "/api/admin/attendance",
        json={"salon_id": salon.id, "staff_id": staff.id, "attendance_date": TODAY.isoformat(),
              "status": "absent", "admin_notes": "Payroll correction"},
    )
    assert override.json()["data"]["admin_override"] is True
    assert override.json()["data"]["status"] == "absent"

    actions = {row.action for row in db.query(AttendanceAuditLog).all()}
    assert {"lock", "admin_override"} <= actions


def test_old_dates_are_editable_only_through_admin_override(client, db, salon, staff):
    old_day = TODAY - timedelta(days=45)
    client.cookies.update(session_cookie_for(salon.id, salon.owner_email))
    refused = client.post(
        "/api/attendance", json={"records": [record(staff, day=old_day)], "confirmPastEdit": True}
    )
    assert refused.status_code == 400

    client.cookies.update(session_cookie_for("admin", ADMIN_EMAIL, is_admin=True))
    override = client.post(
        "/api/admin/attendance",
        json={"salon_id": salon.id, "staff_id": staff.id, "attendance_date": old_day.isoformat(), "status": "leave"},
    )
    assert override.status_code == 200
    row = db.query(Attendance).filter_by(staff_id=staff.id, attendance_date=old_day).one()
    assert row.admin_override is True


def test_admin_override_validation(admin_client, salon):
    response = admin_client.post("/api/admin/attendance", json={"salon_id": salon.id})
    assert response.json()["detail"] == "salon_id, staff_id, attendance_date, and status are required"

    missing = admin_client.post(
        "/api/admin/attendance",
        json={"salon_id": salon.id, "staff_id": "ghost", "attendance_date": "2025-01-01", "status": "present"},
    )
    assert missing.status_code == 404


def test_admin_list_requires_salon(admin_client):
    assert admin_client.get("/api/admin/attendance").json()["detail"] == "salon_id is required"


def test_admin_routes_reject_salon_session(salon_client, salon):
    assert salon_client.get("/api/admin/attendance", params={"salon_id": salon.id}).status_code == 403


def test_xlsx_export(salon_client, staff):
    salon_client.post("/api/attendance", json={"records": [record(staff)]})
    response = salon_client.get("/api/attendance/export", params={"date": TODAY.isoformat()})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert f"Attendance_{TODAY.isoformat()}_to_{TODAY.isoformat()}.xlsx" in response.headers["content-disposition"]

    sheet = load_workbook(io.BytesIO(response.content)).active
    assert sheet.cell(row=1, column=2).value == "Staff Name"
    assert sheet.cell(row=2, column=2).value == "Priya"
    assert sheet.cell(row=2, column=4).value == "Present"


def test_pdf_export(salon_client, staff):
    salon_client.post("/api/attendance", json={"records": [record(staff)]})
    response = salon_client.get("/api/attendance/export/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_export_rejects_inverted_range(salon_client):
    response = salon_client.get("/api/attendance/export", params={"from": "2025-02-10", "to": "2025-02-01"})
    assert response.status_code == 400
    assert response.json()["detail"] == "'from' must be on or before 'to'"
