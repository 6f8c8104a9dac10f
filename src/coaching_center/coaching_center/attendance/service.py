from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Optional, Sequence, Union

from ..common.validators import parse_attendance_status, require_role
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..notifications.service import NotificationService
from ..students.repository import StudentRepository
from .model import DayStats, Ledger, LedgerEntry
from .repository import AttendanceLedgerRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases around the approved attendance ledger.

    Admins write here directly (bypassing submissions). Teachers never do:
    their marks go through `SubmissionService` and the approval workflow.
    A direct mark and a later approved submission for the same (date, student)
    simply overwrite each other, last write wins.
    """

    def __init__(
        self,
        ledger: AttendanceLedgerRepository,
        students: StudentRepository,
        notifications: Optional[NotificationService] = None,
    ):
        self._ledger = ledger
        self._students = students
        self._notifications = notifications

    def get_ledger(self) -> Ledger:
        return self._ledger.get_all()

    def set_ledger(self, *, current_role: Role, ledger: Ledger) -> None:
        require_role(current_role, Role.ADMIN, "Only admins can replace attendance")
        self._ledger.replace_all(ledger)
        logger.info("attendance ledger replaced (%d dates)", len(ledger))

    def get_day(self, work_date: date) -> Dict[int, AttendanceStatus]:
        return self._ledger.get_for_date(work_date)

    def mark_one(
        self,
        *,
        current_role: Role,
        work_date: date,
        student_id: int,
        status: Union[AttendanceStatus, str],
    ) -> None:
        require_role(current_role, Role.ADMIN, "Only admins can mark attendance directly")
        status = parse_attendance_status(status)

        self._ledger.mark_one(work_date=work_date, student_id=int(student_id), status=status)
        logger.info("direct mark %s student=%s status=%s", work_date, student_id, status.value)

        if status == AttendanceStatus.ABSENT and self._notifications:
            student = self._students.get_by_id(int(student_id))
            name = student.name if student else f"Student #{student_id}"
            self._notifications.absence_marked(student_id=int(student_id), student_name=name, work_date=work_date)

    def mark_all(
        self,
        *,
        current_role: Role,
        work_date: date,
        status: Union[AttendanceStatus, str],
        grade: Optional[str] = None,
    ) -> int:
        """Mark every active student (optionally of one grade) with the same status."""

        require_role(current_role, Role.ADMIN, "Only admins can mark attendance directly")
        status = parse_attendance_status(status)

        students = self._students.list_active(grade=grade)
        for s in students:
            self._ledger.mark_one(work_date=work_date, student_id=s.student_id, status=status)

        logger.info("mark all %s grade=%s status=%s count=%d", work_date, grade or "*", status.value, len(students))
        if students and self._notifications:
            self._notifications.attendance_saved(work_date=work_date, count=len(students))
        return len(students)

    def get_day_stats(self, work_date: date, *, grade: Optional[str] = None) -> DayStats:
        day = self._ledger.get_for_date(work_date)
        students = self._students.list_active(grade=grade)

        counts = {s: 0 for s in AttendanceStatus}
        for student in students:
            status = day.get(student.student_id)
            if status is not None:
                counts[status] += 1

        return DayStats(
            work_date=work_date,
            total=len(students),
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            late=counts[AttendanceStatus.LATE],
        )

    def get_student_history(
        self,
        student_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LedgerEntry]:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        return self._ledger.get_for_student(student_id=int(student_id), start_date=start_date, end_date=end_date)

    def clear_ledger(self, *, current_role: Role) -> int:
        require_role(current_role, Role.ADMIN, "Only admins can clear attendance")
        removed = self._ledger.clear()
        logger.warning("attendance ledger cleared (%d entries removed)", removed)
        return removed
