from __future__ import annotations

from datetime import date

import pytest

from src.coaching_center.coaching_center.core.enums import ApprovalStatus, AttendanceStatus, Role
from src.coaching_center.coaching_center.core.exceptions import AuthorizationError, ValidationError
from src.coaching_center.coaching_center.submissions.service import make_submission_id


DAY = date(2024, 6, 1)


def _submit(svc, statuses, *, teacher_id="t1", teacher_name="Ms. Johnson", work_date=DAY):
    return svc.submit_for_approval(
        current_role=Role.TEACHER,
        work_date=work_date,
        statuses=statuses,
        teacher_id=teacher_id,
        teacher_name=teacher_name,
    )


def test_submit_creates_one_pending_entry_per_student(submission_service, submissions_repo, fixed_now):
    created = _submit(submission_service, {101: "present", "102": AttendanceStatus.ABSENT})

    assert len(created) == 2
    assert [s.student_id for s in created] == [101, 102]
    assert all(s.approval_status == ApprovalStatus.PENDING for s in created)
    assert all(s.submitted_at == fixed_now for s in created)
    assert created[0].student_name == "A"
    assert created[0].grade == "8th"
    assert created[1].status == AttendanceStatus.ABSENT
    assert len(submissions_repo.list_all()) == 2


def test_submit_skips_unknown_students(submission_service, submissions_repo):
    created = _submit(submission_service, {101: "present", 999: "absent"})

    assert [s.student_id for s in created] == [101]
    assert len(submissions_repo.list_all()) == 1


def test_submit_with_only_unknown_students_is_silent(submission_service, notifications_repo):
    assert _submit(submission_service, {998: "present", 999: "absent"}) == []
    assert notifications_repo.unread_count() == 0


def test_submit_empty_is_noop(submission_service, submissions_repo):
    assert _submit(submission_service, {}) == []
    assert submissions_repo.list_all() == []


def test_submit_requires_teacher_role(submission_service):
    with pytest.raises(AuthorizationError):
        submission_service.submit_for_approval(
            current_role=Role.ADMIN,
            work_date=DAY,
            statuses={101: "present"},
            teacher_id="a1",
            teacher_name="Admin",
        )


def test_submit_requires_teacher_identity(submission_service):
    with pytest.raises(ValidationError):
        _submit(submission_service, {101: "present"}, teacher_id="  ")


def test_submit_rejects_bad_status_and_bad_id(submission_service, submissions_repo):
    with pytest.raises(ValidationError):
        _submit(submission_service, {101: "sick"})
    with pytest.raises(ValidationError):
        _submit(submission_service, {"abc": "present"})
    assert submissions_repo.list_all() == []


def test_submit_notifies_admin(submission_service, notifications_repo):
    _submit(submission_service, {101: "present", 102: "late"})

    [note] = notifications_repo.list_recent(limit=10)
    assert note.message == "Ms. Johnson submitted attendance for 2 students on 2024-06-01 for approval"
    assert note.read is False


def test_submission_ids_are_unique_for_same_student_and_date(submission_service):
    first = _submit(submission_service, {101: "present"})
    second = _submit(submission_service, {101: "absent"})

    assert first[0].submission_id != second[0].submission_id
    assert first[0].submission_id.startswith("2024-06-01-101-")


def test_make_submission_id_differs_within_same_millisecond(fixed_now):
    assert make_submission_id(DAY, 101, fixed_now) != make_submission_id(DAY, 101, fixed_now)


def test_list_for_teacher_is_newest_first(submission_service):
    _submit(submission_service, {101: "present"}, teacher_id="t1")
    _submit(submission_service, {201: "present"}, teacher_id="t2", teacher_name="Mr. Lee")
    _submit(submission_service, {102: "late"}, teacher_id="t1")

    mine = submission_service.list_for_teacher("t1")
    assert [s.student_id for s in mine] == [102, 101]


def test_list_history_is_admin_only(submission_service):
    _submit(submission_service, {101: "present"})

    with pytest.raises(AuthorizationError):
        submission_service.list_history(current_role=Role.TEACHER)

    rows = submission_service.list_history(current_role=Role.ADMIN, status=ApprovalStatus.PENDING)
    assert len(rows) == 1
    assert submission_service.list_history(current_role=Role.ADMIN, status=ApprovalStatus.APPROVED) == []


def test_get_batch_by_id(submission_service):
    _submit(submission_service, {101: "present", 102: "absent"})

    batch = submission_service.get_batch("2024-06-01|8th|t1")
    assert batch is not None
    assert batch.pending_count == 2
    assert submission_service.get_batch("2024-06-01|9th|t1") is None
