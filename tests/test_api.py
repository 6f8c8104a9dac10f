from __future__ import annotations

import pytest

from src.coaching_center.coaching_center.container import build_services
from src.coaching_center.coaching_center.main import create_app


@pytest.fixture
def app(monkeypatch, students_repo, ledger_repo, submissions_repo, notifications_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_services(
        students_repo=students_repo,
        ledger_repo=ledger_repo,
        submissions_repo=submissions_repo,
        notifications_repo=notifications_repo,
    )
    return create_app(container)


def _login(client, *, user_id, role, name):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        sess["name"] = name


@pytest.fixture
def teacher(app):
    client = app.test_client()
    _login(client, user_id="t1", role="teacher", name="Ms. Johnson")
    return client


@pytest.fixture
def admin(app):
    client = app.test_client()
    _login(client, user_id="admin", role="admin", name="Admin")
    return client


def test_submit_then_approve_batch(teacher, admin):
    res = teacher.post(
        "/api/attendance/submissions",
        json={"date": "2024-06-01", "statuses": {"101": "present", "102": "absent"}},
    )
    assert res.status_code == 201
    assert res.get_json()["count"] == 2

    res = admin.get("/api/admin/attendance/batches")
    [batch] = res.get_json()["batches"]
    assert batch["id"] == "2024-06-01|8th|t1"
    assert batch["teacher_name"] == "Ms. Johnson"
    assert batch["pending_count"] == 2

    res = admin.post(f"/api/admin/attendance/batches/{batch['id']}/approve")
    assert res.status_code == 200
    assert res.get_json() == {"success": True, "message": "Attendance approved"}

    res = admin.get("/api/attendance/2024-06-01")
    body = res.get_json()
    assert body["attendance"] == {"101": "present", "102": "absent"}
    assert body["stats"]["present"] == 1

    assert admin.get("/api/admin/attendance/batches").get_json()["batches"] == []


def test_decided_batch_is_gone(teacher, admin):
    teacher.post("/api/attendance/submissions", json={"date": "2024-06-01", "statuses": {"101": "present"}})
    admin.post("/api/admin/attendance/batches/2024-06-01|8th|t1/reject")

    res = admin.post("/api/admin/attendance/batches/2024-06-01|8th|t1/approve")
    assert res.status_code == 404
    assert res.get_json()["message"] == "Batch not found or already processed"


def test_approve_by_ids_twice(teacher, admin):
    res = teacher.post("/api/attendance/submissions", json={"date": "2024-06-01", "statuses": {"101": "late"}})
    ids = [s["id"] for s in res.get_json()["submissions"]]

    assert admin.post("/api/admin/attendance/submissions/approve", json={"ids": ids}).get_json()["success"] is True
    again = admin.post("/api/admin/attendance/submissions/approve", json={"ids": ids}).get_json()
    assert again == {"success": False, "message": "Nothing to approve"}


def test_submission_with_only_unknown_students(teacher):
    res = teacher.post("/api/attendance/submissions", json={"date": "2024-06-01", "statuses": {"999": "present"}})
    assert res.status_code == 200
    assert res.get_json()["count"] == 0


def test_role_guards(app, teacher, admin):
    anon = app.test_client()
    assert anon.get("/api/notifications").status_code == 401

    assert teacher.get("/api/admin/attendance/batches").status_code == 403
    assert teacher.post("/api/attendance/2024-06-01/mark", json={"student_id": 101, "status": "present"}).status_code == 403
    assert admin.post(
        "/api/attendance/submissions",
        json={"date": "2024-06-01", "statuses": {"101": "present"}},
    ).status_code == 403


def test_bad_input_is_400(teacher, admin):
    assert teacher.post(
        "/api/attendance/submissions",
        json={"date": "06/01/2024", "statuses": {"101": "present"}},
    ).status_code == 400
    assert teacher.post(
        "/api/attendance/submissions",
        json={"date": "2024-06-01", "statuses": {"101": "sick"}},
    ).status_code == 400
    assert admin.post("/api/attendance/2024-06-01/mark", json={"status": "present"}).status_code == 400
    assert admin.get("/api/admin/attendance/submissions?status=maybe").status_code == 400


def test_direct_mark_and_history(admin):
    res = admin.post("/api/attendance/2024-06-01/mark", json={"student_id": 103, "status": "absent"})
    assert res.status_code == 200

    history = admin.get("/api/students/103/attendance").get_json()
    assert history["attendance"] == [{"date": "2024-06-01", "status": "absent"}]

    bell = admin.get("/api/notifications").get_json()
    assert bell["unread"] == 1
    assert bell["notifications"][0]["message"] == "C was marked absent on 2024-06-01"

    assert admin.post("/api/notifications/read-all").get_json()["updated"] == 1
    assert admin.post("/api/notifications/999/read").status_code == 404


def test_mark_all_and_replace_ledger(admin):
    res = admin.post("/api/attendance/2024-06-02/mark-all", json={"status": "present", "grade": "9th"})
    assert res.get_json()["count"] == 1

    res = admin.put("/api/attendance", json={"attendance": {"2024-06-03": {"101": "late"}}})
    assert res.get_json()["dates"] == 1
    assert admin.get("/api/attendance").get_json()["attendance"] == {"2024-06-03": {"101": "late"}}

    assert admin.delete("/api/attendance").get_json()["removed"] == 1


def test_replace_ledger_with_bad_student_id_is_400(admin):
    res = admin.put("/api/attendance", json={"attendance": {"2024-06-01": {"abc": "present"}}})
    assert res.status_code == 400
    assert res.get_json()["message"] == "Invalid student id: 'abc'"
