from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..core.constants import BATCH_KEY_SEPARATOR
from ..core.enums import ApprovalStatus, AttendanceStatus


def _fmt_ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="milliseconds") if value else None


@dataclass(frozen=True)
class AttendanceSubmission:
    """A teacher's proposed attendance for one student on one date.

    Created `pending`; decided exactly once (approved or rejected) by an admin.
    Name and grade are copied from the directory at submission time.
    """

    submission_id: str
    work_date: date
    student_id: int
    student_name: str
    grade: str
    status: AttendanceStatus
    teacher_id: str
    teacher_name: str
    submitted_at: datetime
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.approval_status == ApprovalStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.submission_id,
            "date": self.work_date.isoformat(),
            "student_id": self.student_id,
            "student_name": self.student_name,
            "grade": self.grade,
            "status": self.status.value,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "submitted_at": _fmt_ts(self.submitted_at),
            "approval_status": self.approval_status.value,
            "approved_at": _fmt_ts(self.approved_at),
            "approved_by": self.approved_by,
        }


def batch_key(work_date: date, grade: str, teacher_id: str) -> str:
    return BATCH_KEY_SEPARATOR.join([work_date.isoformat(), grade, str(teacher_id)])


@dataclass
class AttendanceBatch:
    """Pending submissions of one teacher for one grade on one date.

    Derived on every read; never stored.
    """

    batch_id: str
    work_date: date
    grade: str
    teacher_id: str
    teacher_name: str
    submitted_at: datetime
    total_students: int = 0
    pending_count: int = 0
    submissions: List[AttendanceSubmission] = field(default_factory=list)

    @property
    def submission_ids(self) -> List[str]:
        return [s.submission_id for s in self.submissions]

    def to_dict(self) -> dict:
        return {
            "id": self.batch_id,
            "date": self.work_date.isoformat(),
            "grade": self.grade,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "submitted_at": _fmt_ts(self.submitted_at),
            "total_students": self.total_students,
            "pending_count": self.pending_count,
            "submissions": [s.to_dict() for s in self.submissions],
        }
