from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..attendance.mysql_attendance_repository import LEDGER_UPSERT_SQL
from ..core.enums import ApprovalStatus, AttendanceStatus
from ..database.connection import DatabaseConnection
from .model import AttendanceSubmission
from .repository import SubmissionRepository

_COLUMNS = """
    submission_id, work_date, student_id, student_name, grade, status,
    teacher_id, teacher_name, submitted_at, approval_status, approved_at, approved_by
"""


def _to_submission(r: dict) -> AttendanceSubmission:
    return AttendanceSubmission(
        submission_id=r["submission_id"],
        work_date=r["work_date"],
        student_id=int(r["student_id"]),
        student_name=r["student_name"],
        grade=r["grade"],
        status=AttendanceStatus(r["status"]),
        teacher_id=str(r["teacher_id"]),
        teacher_name=r["teacher_name"],
        submitted_at=r["submitted_at"],
        approval_status=ApprovalStatus(r["approval_status"]),
        approved_at=r.get("approved_at"),
        approved_by=r.get("approved_by"),
    )


class MySQLSubmissionRepository(SubmissionRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add_many(self, submissions: Sequence[AttendanceSubmission]) -> None:
        if not submissions:
            return
        with self._db.transaction() as cur:
            cur.executemany(
                """
                INSERT INTO attendance_submissions(
                    submission_id, work_date, student_id, student_name, grade, status,
                    teacher_id, teacher_name, submitted_at, approval_status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        s.submission_id,
                        s.work_date,
                        int(s.student_id),
                        s.student_name,
                        s.grade,
                        s.status.value,
                        s.teacher_id,
                        s.teacher_name,
                        s.submitted_at,
                        s.approval_status.value,
                    )
                    for s in submissions
                ],
            )

    def get(self, submission_id: str) -> Optional[AttendanceSubmission]:
        with self._db.transaction() as cur:
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_submissions WHERE submission_id=%s",
                (str(submission_id),),
            )
            r = cur.fetchone()
            return _to_submission(r) if r else None

    def list_all(self) -> Sequence[AttendanceSubmission]:
        with self._db.transaction() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_submissions ORDER BY seq ASC")
            return [_to_submission(r) for r in cur.fetchall()]

    def list_recent(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        teacher_id: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceSubmission]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("approval_status=%s")
            params.append(status.value)
        if teacher_id is not None:
            clauses.append("teacher_id=%s")
            params.append(str(teacher_id))

        where = " AND ".join(clauses)

        with self._db.transaction() as cur:
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_submissions
                WHERE {where}
                ORDER BY seq DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_submission(r) for r in cur.fetchall()]

    def decide(
        self,
        *,
        submission_id: str,
        status: ApprovalStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        with self._db.transaction() as cur:
            return _swap_pending(cur, submission_id, status, decided_by, decided_at)

    def approve_into_ledger(
        self,
        *,
        submission: AttendanceSubmission,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        with self._db.transaction() as cur:
            if not _swap_pending(cur, submission.submission_id, ApprovalStatus.APPROVED, decided_by, decided_at):
                return False
            cur.execute(
                LEDGER_UPSERT_SQL,
                (submission.work_date, int(submission.student_id), submission.status.value),
            )
            return True


def _swap_pending(cur, submission_id: str, status: ApprovalStatus, decided_by: str, decided_at: datetime) -> bool:
    cur.execute(
        """
        UPDATE attendance_submissions
        SET approval_status=%s, approved_at=%s, approved_by=%s
        WHERE submission_id=%s AND approval_status=%s
        """,
        (
            status.value,
            decided_at,
            str(decided_by),
            str(submission_id),
            ApprovalStatus.PENDING.value,
        ),
    )
    return cur.rowcount > 0
