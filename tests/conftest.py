from __future__ import annotations

import dataclasses
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.coaching_center.coaching_center.attendance.model import LedgerEntry
from src.coaching_center.coaching_center.attendance.service import AttendanceService
from src.coaching_center.coaching_center.core.enums import ApprovalStatus, AttendanceStatus, StudentStatus
from src.coaching_center.coaching_center.notifications.model import Notification
from src.coaching_center.coaching_center.notifications.service import NotificationService
from src.coaching_center.coaching_center.students.model import Student
from src.coaching_center.coaching_center.submissions.approval import ApprovalService
from src.coaching_center.coaching_center.submissions.model import AttendanceSubmission
from src.coaching_center.coaching_center.submissions.service import SubmissionService


class TickingClock:
    """Returns a later instant on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self._now = start
        self._step = step

    def __call__(self) -> datetime:
        current = self._now
        self._now = self._now + self._step
        return current


class InMemoryStudents:
    def __init__(self, students):
        self._by_id = {s.student_id: s for s in students}

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._by_id.get(int(student_id))

    def list_active(self, *, grade=None):
        return [s for s in self._by_id.values() if s.is_active and (grade is None or s.grade == grade)]


class InMemoryLedger:
    def __init__(self):
        self._data: dict[date, dict[int, AttendanceStatus]] = {}
        self.writes = 0

    def get_all(self):
        return {d: dict(day) for d, day in self._data.items()}

    def replace_all(self, ledger):
        self._data = {d: dict(day) for d, day in ledger.items()}

    def mark_one(self, *, work_date, student_id, status):
        self.writes += 1
        self._data.setdefault(work_date, {})[int(student_id)] = status

    def get_for_date(self, work_date):
        return dict(self._data.get(work_date, {}))

    def get_for_student(self, *, student_id, start_date=None, end_date=None):
        out = []
        for d in sorted(self._data, reverse=True):
            if start_date and d < start_date:
                continue
            if end_date and d > end_date:
                continue
            status = self._data[d].get(int(student_id))
            if status is not None:
                out.append(LedgerEntry(work_date=d, student_id=int(student_id), status=status))
        return out

    def clear(self):
        removed = sum(len(day) for day in self._data.values())
        self._data = {}
        return removed


class InMemorySubmissions:
    def __init__(self, ledger: InMemoryLedger):
        self._rows: dict[str, AttendanceSubmission] = {}
        self._ledger = ledger

    def add_many(self, submissions):
        for s in submissions:
            self._rows[s.submission_id] = s

    def get(self, submission_id):
        return self._rows.get(str(submission_id))

    def list_all(self):
        return list(self._rows.values())

    def list_recent(self, *, status=None, teacher_id=None, limit=200):
        rows = [
            s
            for s in reversed(list(self._rows.values()))
            if (status is None or s.approval_status == status) and (teacher_id is None or s.teacher_id == teacher_id)
        ]
        return rows[:limit]

    def decide(self, *, submission_id, status, decided_by, decided_at):
        sub = self._rows.get(str(submission_id))
        if not sub or sub.approval_status != ApprovalStatus.PENDING:
            return False
        self._rows[sub.submission_id] = dataclasses.replace(
            sub,
            approval_status=status,
            approved_at=decided_at,
            approved_by=decided_by,
        )
        return True

    def approve_into_ledger(self, *, submission, decided_by, decided_at):
        current = self._rows.get(submission.submission_id)
        if not current or current.approval_status != ApprovalStatus.PENDING:
            return False
        # Ledger first: if it raises, the submission is still pending.
        self._ledger.mark_one(work_date=current.work_date, student_id=current.student_id, status=current.status)
        return self.decide(
            submission_id=current.submission_id,
            status=ApprovalStatus.APPROVED,
            decided_by=decided_by,
            decided_at=decided_at,
        )


class InMemoryNotifications:
    def __init__(self):
        self._items: list[Notification] = []
        self._next_id = 1

    def add(self, *, type, message, created_at, student_id=None):
        nid = self._next_id
        self._next_id += 1
        self._items.append(
            Notification(notification_id=nid, type=type, message=message, created_at=created_at, student_id=student_id)
        )
        return nid

    def list_recent(self, *, limit):
        items = sorted(self._items, key=lambda n: (n.created_at, n.notification_id), reverse=True)
        return items[:limit]

    def mark_read(self, *, notification_id):
        for i, n in enumerate(self._items):
            if n.notification_id == int(notification_id):
                self._items[i] = dataclasses.replace(n, read=True)
                return True
        return False

    def mark_all_read(self):
        updated = 0
        for i, n in enumerate(self._items):
            if not n.read:
                self._items[i] = dataclasses.replace(n, read=True)
                updated += 1
        return updated

    def unread_count(self):
        return sum(1 for n in self._items if not n.read)

    def prune(self, *, keep):
        newest = {n.notification_id for n in self.list_recent(limit=keep)}
        before = len(self._items)
        self._items = [n for n in self._items if n.notification_id in newest]
        return before - len(self._items)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> TickingClock:
    return TickingClock(fixed_now)


@pytest.fixture
def students_repo() -> InMemoryStudents:
    return InMemoryStudents(
        [
            Student(student_id=101, name="A", grade="8th", roll_number="8A-01"),
            Student(student_id=102, name="B", grade="8th", roll_number="8A-02"),
            Student(student_id=103, name="C", grade="8th", roll_number="8A-03"),
            Student(student_id=201, name="D", grade="9th", roll_number="9A-01"),
            Student(student_id=301, name="E", grade="9th", roll_number="9A-02", status=StudentStatus.INACTIVE),
        ]
    )


@pytest.fixture
def ledger_repo() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def submissions_repo(ledger_repo) -> InMemorySubmissions:
    return InMemorySubmissions(ledger_repo)


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def notifier(notifications_repo, clock) -> NotificationService:
    return NotificationService(notifications_repo, clock=clock)


@pytest.fixture
def submission_service(submissions_repo, students_repo, notifier, clock) -> SubmissionService:
    return SubmissionService(submissions_repo, students_repo, notifier, clock=clock)


@pytest.fixture
def approval_service(submissions_repo, notifier, clock) -> ApprovalService:
    return ApprovalService(submissions_repo, notifier, clock=clock)


@pytest.fixture
def attendance_service(ledger_repo, students_repo, notifier) -> AttendanceService:
    return AttendanceService(ledger_repo, students_repo, notifier)
