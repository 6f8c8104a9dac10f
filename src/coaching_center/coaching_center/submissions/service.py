from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable, List, Mapping, Optional, Sequence, Union

from ..common.validators import parse_attendance_status, require_non_empty, require_role
from ..core.constants import DEFAULT_ADMIN_HISTORY_LIMIT, DEFAULT_HISTORY_LIMIT
from ..core.enums import ApprovalStatus, AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..notifications.service import NotificationService
from ..students.repository import StudentRepository
from .aggregator import build_pending_batches
from .model import AttendanceBatch, AttendanceSubmission
from .repository import SubmissionRepository

logger = logging.getLogger(__name__)


def make_submission_id(work_date: date, student_id: int, created_at: datetime) -> str:
    millis = int(created_at.timestamp() * 1000)
    return f"{work_date.isoformat()}-{int(student_id)}-{millis}-{uuid.uuid4().hex[:6]}"


class SubmissionService:
    """Teacher side of the approval workflow, plus the admin's batch view."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        students: StudentRepository,
        notifications: Optional[NotificationService] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._submissions = submissions
        self._students = students
        self._notifications = notifications
        self._clock = clock or datetime.now

    def submit_for_approval(
        self,
        *,
        current_role: Role,
        work_date: date,
        statuses: Mapping[Union[int, str], Union[AttendanceStatus, str]],
        teacher_id: str,
        teacher_name: str,
    ) -> List[AttendanceSubmission]:
        """Record one pending submission per student and return only the new ones.

        Students missing from the directory are skipped without error; the
        client may be holding a stale roster.
        """

        require_role(current_role, Role.TEACHER, "Only teachers submit attendance for approval")
        teacher_id = require_non_empty(teacher_id, "Teacher id")
        teacher_name = require_non_empty(teacher_name, "Teacher name")

        submitted_at = self._clock()
        created: List[AttendanceSubmission] = []

        for raw_id, raw_status in statuses.items():
            try:
                student_id = int(raw_id)
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid student id: {raw_id!r}")
            status = parse_attendance_status(raw_status)

            student = self._students.get_by_id(student_id)
            if not student:
                logger.debug("skip unknown student %s in submission by %s", student_id, teacher_id)
                continue

            created.append(
                AttendanceSubmission(
                    submission_id=make_submission_id(work_date, student_id, submitted_at),
                    work_date=work_date,
                    student_id=student_id,
                    student_name=student.name,
                    grade=student.grade,
                    status=status,
                    teacher_id=teacher_id,
                    teacher_name=teacher_name,
                    submitted_at=submitted_at,
                )
            )

        if not created:
            return []

        self._submissions.add_many(created)
        logger.info(
            "teacher %s submitted %d attendance entries for %s (%d skipped)",
            teacher_id,
            len(created),
            work_date,
            len(statuses) - len(created),
        )
        if self._notifications:
            self._notifications.attendance_submitted(
                teacher_name=teacher_name,
                work_date=work_date,
                count=len(created),
            )
        return created

    def list_all(self) -> Sequence[AttendanceSubmission]:
        return self._submissions.list_all()

    def list_for_teacher(self, teacher_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceSubmission]:
        return self._submissions.list_recent(teacher_id=str(teacher_id), limit=int(limit))

    def list_history(
        self,
        *,
        current_role: Role,
        status: Optional[ApprovalStatus] = None,
        limit: int = DEFAULT_ADMIN_HISTORY_LIMIT,
    ) -> Sequence[AttendanceSubmission]:
        require_role(current_role, Role.ADMIN)
        return self._submissions.list_recent(status=status, limit=int(limit))

    def get_pending_batches(self) -> List[AttendanceBatch]:
        # Recomputed on every call so the view never lags behind decisions.
        return build_pending_batches(self._submissions.list_all())

    def get_batch(self, batch_id: str) -> Optional[AttendanceBatch]:
        for batch in self.get_pending_batches():
            if batch.batch_id == batch_id:
                return batch
        return None
