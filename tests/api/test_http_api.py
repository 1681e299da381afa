from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from flask import Flask

from src.qr_attendance.qr_attendance.attendance.controller import register as register_attendance
from src.qr_attendance.qr_attendance.main import register_error_handlers
from src.qr_attendance.qr_attendance.stats.batch import BatchStatsRunner
from src.qr_attendance.qr_attendance.stats.controller import register as register_stats
from src.qr_attendance.qr_attendance.stats.service import AttendanceStatsService
from src.qr_attendance.qr_attendance.students.model import Student
from src.qr_attendance.qr_attendance.tokens.controller import register as register_tokens


@pytest.fixture
def app(classes_repo, students_repo, attendance_repo, token_manager, attendance_service):
    stats_service = AttendanceStatsService(students_repo, classes_repo, attendance_repo)
    container = SimpleNamespace(
        public_base_url="https://campus.example",
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        token_manager=token_manager,
        attendance_service=attendance_service,
        stats_service=stats_service,
        batch_stats_runner=BatchStatsRunner(stats_service, batch_size=2, delay_seconds=0),
    )

    app = Flask(__name__)
    app.secret_key = "test"
    register_error_handlers(app)
    register_tokens(app, container)
    register_attendance(app, container)
    register_stats(app, container)
    return app


def _client(app, user_id=None, role=None):
    client = app.test_client()
    if user_id is not None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role
    return client


def test_login_required(app):
    res = _client(app).post("/api/classes/CS101/attendance", json={"code": "CS101:x"})
    assert res.status_code == 401


def test_teacher_cannot_mark_attendance(app):
    res = _client(app, "t-1", "teacher").post("/api/classes/CS101/attendance", json={"code": "CS101:x"})
    assert res.status_code == 403


def test_code_for_other_class_reports_wrong_session(app, attendance_repo):
    res = _client(app, "s-1", "student").post("/api/classes/CS101/attendance", json={"code": "MA201:abc"})

    body = res.get_json()
    assert res.status_code == 200
    assert body["success"] is False
    assert body["state"] == "wrong_session"
    assert body["message"]
    assert attendance_repo.all() == []


def test_empty_form_code_is_wrong_session(app):
    res = _client(app, "s-1", "student").post("/api/classes/CS101/attendance", data={"code": ""})
    assert res.get_json()["state"] == "wrong_session"


def test_scan_status_already_marked(app, attendance_repo):
    attendance_repo.add(student_id="s-1", class_id="CS101", when=datetime.now())

    body = _client(app, "s-1", "student").get("/api/classes/CS101/scan-status").get_json()
    assert body == {"canScan": False, "state": "already_marked"}


def test_regenerate_token_returns_qr(app, classes_repo):
    client = _client(app, "t-1", "teacher")
    res = client.post("/api/classes/CS101/token")

    body = res.get_json()
    assert res.status_code == 200
    assert body["token"] == classes_repo.get_by_id("CS101").current_token.value
    assert body["scanUri"] == f"https://campus.example/student/class/CS101?qr={body['token']}"
    assert 0 < body["expiresIn"] <= 600
    assert body["qr"]

    status = client.get("/api/classes/CS101/token").get_json()
    assert status["active"] is True
    assert 0 < status["secondsRemaining"] <= 600


def test_other_teacher_cannot_regenerate(app):
    res = _client(app, "t-2", "teacher").post("/api/classes/CS101/token")
    assert res.status_code == 403


def test_regenerate_unknown_class(app):
    res = _client(app, "admin-1", "admin").post("/api/classes/NOPE/token")
    assert res.status_code == 400


def test_roster_for_day(app, attendance_repo):
    attendance_repo.add(student_id="s-1", class_id="CS101", when=datetime(2024, 7, 15, 9, 5))
    attendance_repo.add(student_id="s-2", class_id="CS101", when=datetime(2024, 7, 15, 9, 7))

    body = _client(app, "t-1", "teacher").get("/api/classes/CS101/attendance?date=2024-07-15").get_json()
    assert body["date"] == "2024-07-15"
    assert [r["studentId"] for r in body["records"]] == ["s-2", "s-1"]


def test_roster_bad_date(app):
    res = _client(app, "t-1", "teacher").get("/api/classes/CS101/attendance?date=15-07-2024")
    assert res.status_code == 400


def test_student_sees_only_own_stats(app):
    res = _client(app, "s-1", "student").get("/api/students/s-2/stats")
    assert res.status_code == 403


def test_student_without_enrollment_stats(app, students_repo):
    students_repo.add(Student(student_id="s-9", full_name="New", usn=None, department="", semester=None))

    res = _client(app, "s-9", "student").get("/api/students/s-9/stats")
    assert res.status_code == 200
    assert res.get_json()["totalClasses"] == 0


def test_history_lists_subject_stats_and_records(app):
    body = _client(app, "s-1", "student").get("/api/students/s-1/history").get_json()

    assert [s["subject"] for s in body["subjectStats"]] == ["Data Structures"]
    assert body["records"]
    assert all(r["attended"] is False for r in body["records"])


def test_trends_validation(app):
    client = _client(app, "admin-1", "admin")
    assert client.get("/api/students/s-1/trends?period=year").status_code == 400
    assert client.get("/api/students/ghost/trends").status_code == 400

    body = client.get("/api/students/s-1/trends?period=week&count=3").get_json()
    assert body["period"] == "week"
    assert len(body["buckets"]) == 3


def test_batch_stats_for_cohort(app, students_repo):
    students_repo.add(Student(student_id="s-2", full_name="Ravi K", usn=None, department="CSE", semester="5"))
    students_repo.add(Student(student_id="s-3", full_name="Meera P", usn=None, department="EEE", semester="5"))

    client = _client(app, "t-1", "teacher")
    body = client.post("/api/stats/batch", json={"department": "CSE", "semester": "5"}).get_json()
    assert sorted(body) == ["s-1", "s-2"]

    assert client.post("/api/stats/batch", json={}).status_code == 400
    assert _client(app, "s-1", "student").post("/api/stats/batch", json={"student_ids": ["s-1"]}).status_code == 403


def test_store_outage_is_503(app, attendance_repo):
    attendance_repo.fail_reads = True
    res = _client(app, "s-1", "student").get("/api/classes/CS101/scan-status")
    assert res.status_code == 503


def test_roster_limited_to_class_teacher(app, attendance_repo):
    attendance_repo.add(student_id="s-1", class_id="CS101", when=datetime(2024, 7, 15, 9, 5))

    res = _client(app, "t-other", "teacher").get("/api/classes/CS101/attendance?date=2024-07-15")
    assert res.status_code == 403

    res = _client(app, "admin-1", "admin").get("/api/classes/CS101/attendance?date=2024-07-15")
    assert res.status_code == 200
    assert len(res.get_json()["records"]) == 1


def test_roster_csv_export(app, attendance_repo):
    attendance_repo.add(student_id="s-1", class_id="CS101", when=datetime(2024, 7, 15, 9, 5))

    res = _client(app, "t-1", "teacher").get("/api/classes/CS101/attendance?date=2024-07-15&format=csv")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "Data_Structures_2024-07-15_attendance.csv" in res.headers["Content-Disposition"]
    lines = res.data.decode("utf-8-sig").splitlines()
    assert lines[0] == "Student Name,USN,Subject,Timestamp,Device Info"
    assert lines[1] == "Student s-1,,,2024-07-15 09:05:00,"
