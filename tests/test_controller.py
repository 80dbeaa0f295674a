from datetime import date

import pytest
from flask import Flask

from src.school_attendance.school_attendance.attendance.controller import register
from src.school_attendance.school_attendance.attendance.model import RosterEntry
from src.school_attendance.school_attendance.attendance.records_service import AttendanceRecordsService
from src.school_attendance.school_attendance.container import Container
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, LeaveReason, SubjectKind, ViewMode
from src.school_attendance.school_attendance.core.exceptions import RemoteError

DAY = date(2026, 2, 3)


@pytest.fixture
def client(gateway):
    app = Flask(__name__)
    container = Container(
        conn=None,
        attendance_gateway=gateway,
        attendance_records_service=AttendanceRecordsService(gateway),
    )
    register(app, container)
    return app.test_client()


def test_list_student_attendance(client):
    client.post(
        "/api/student-attendance",
        json={"records": [{"subject_id": "s1", "date": "2026-02-03", "status": "present"}], "class_id": "c1", "actor_id": "u1"},
    )

    resp = client.get("/api/student-attendance?start_date=2026-02-02&end_date=2026-02-08&class_id=c1")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["data"][0]["subject_id"] == "s1"
    assert body["data"][0]["last_updated_by"] == "Admin Demo"


def test_list_requires_a_date_range(client):
    resp = client.get("/api/student-attendance?class_id=c1")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please provide either a date or a date range"


def test_save_teacher_attendance(client, gateway):
    resp = client.post(
        "/api/teacher-attendance",
        json={"records": [{"subject_id": "t1", "status": "holiday"}], "date": "2026-02-03", "actor_id": "u1"},
    )

    assert resp.status_code == 200
    assert resp.get_json()["records"][0]["leave_reason"] == "holiday"
    stored = gateway.stored(SubjectKind.TEACHER)[("t1", DAY)]
    assert (stored.status, stored.leave_reason) == (AttendanceStatus.LEAVE, LeaveReason.HOLIDAY)


def test_save_rejects_invalid_payload(client, gateway):
    resp = client.post("/api/student-attendance", json={"records": [], "class_id": "c1", "actor_id": "u1"})

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No attendance data to save"


def test_save_passes_backend_failures_through(client, gateway):
    gateway.fail_with = RemoteError("Database unavailable", status_code=503)

    resp = client.post(
        "/api/student-attendance",
        json={"records": [{"subject_id": "s1", "date": "2026-02-03", "status": "absent"}], "class_id": "c1", "actor_id": "u1"},
    )

    assert resp.status_code == 503
    assert resp.get_json()["message"] == "Database unavailable"


def test_delete_missing_record_is_not_found(client):
    resp = client.delete("/api/student-attendance?subject_id=s1&date=2026-02-03")

    assert resp.status_code == 404


def test_summary_for_a_day(client):
    client.post(
        "/api/student-attendance",
        json={
            "records": [
                {"subject_id": "s1", "status": "present"},
                {"subject_id": "s2", "status": "present"},
                {"subject_id": "s3", "status": "absent"},
            ],
            "date": "2026-02-03",
            "class_id": "c1",
            "actor_id": "u1",
        },
    )

    resp = client.get(
        "/api/student-attendance/summary?date=2026-02-03&today=2026-02-03&class_id=c1"
        "&subject_id=s1&subject_id=s2&subject_id=s3&subject_id=s4"
    )

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["weekly_average"] == 50
    assert body["best_day"] == {"date": "2026-02-03", "percentage": 50, "present": 2}
    assert body["chart"][0] == {"date": "2026-02-03", "present": 2, "absent": 1, "not_marked": 1}


def test_unknown_subject_kind_is_not_routed(client):
    assert client.get("/api/parent-attendance?date=2026-02-03").status_code == 404


def test_container_opens_independent_sheets(gateway):
    container = Container(
        conn=None,
        attendance_gateway=gateway,
        attendance_records_service=AttendanceRecordsService(gateway),
    )
    roster = [RosterEntry("s1", "Asha Rao", "01")]

    first = container.open_sheet(kind=SubjectKind.STUDENT, mode=ViewMode.DAILY, roster=roster, cohort_id="c1", actor_id="u1", displayed=DAY)
    second = container.open_sheet(kind=SubjectKind.STUDENT, mode=ViewMode.DAILY, roster=roster, cohort_id="c1", actor_id="u1", displayed=DAY)
    first.mark_all("present")

    assert first.mark_for("s1", DAY).value == "present"
    assert second.store.is_empty()


def test_summary_rejects_ranges_longer_than_a_week(client, gateway):
    resp = client.get(
        "/api/student-attendance/summary?start_date=1000-01-01&end_date=9999-12-31&class_id=c1&subject_id=s1"
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Summaries cover at most 7 days"
    assert gateway.fetch_calls == []


def test_save_rejects_non_text_remarks(client, gateway):
    resp = client.post(
        "/api/student-attendance",
        json={
            "records": [{"subject_id": "s1", "date": "2026-02-03", "status": "present", "remarks": 123}],
            "class_id": "c1",
            "actor_id": "u1",
        },
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "remarks must be text"
    assert gateway.submitted == []
