from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceLedgerRepository
from .attendance.repository import AttendanceLedgerRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_NOTIFICATION_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .submissions.approval import ApprovalService
from .submissions.mysql_submission_repository import MySQLSubmissionRepository
from .submissions.repository import SubmissionRepository
from .submissions.service import SubmissionService


@dataclass(frozen=True)
class Container:
    students_repo: StudentRepository
    ledger_repo: AttendanceLedgerRepository
    submissions_repo: SubmissionRepository
    notifications_repo: NotificationRepository

    notification_service: NotificationService
    attendance_service: AttendanceService
    submission_service: SubmissionService
    approval_service: ApprovalService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    students_repo: StudentRepository,
    ledger_repo: AttendanceLedgerRepository,
    submissions_repo: SubmissionRepository,
    notifications_repo: NotificationRepository,
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    notification_service = NotificationService(notifications_repo, limit=notification_limit)
    attendance_service = AttendanceService(ledger_repo, students_repo, notification_service)
    submission_service = SubmissionService(submissions_repo, students_repo, notification_service)
    approval_service = ApprovalService(submissions_repo, notification_service)

    return Container(
        students_repo=students_repo,
        ledger_repo=ledger_repo,
        submissions_repo=submissions_repo,
        notifications_repo=notifications_repo,
        notification_service=notification_service,
        attendance_service=attendance_service,
        submission_service=submission_service,
        approval_service=approval_service,
        conn=conn,
    )


def build_container(*, db_config: dict, notification_limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return build_services(
        students_repo=MySQLStudentRepository(conn),
        ledger_repo=MySQLAttendanceLedgerRepository(conn),
        submissions_repo=MySQLSubmissionRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        notification_limit=notification_limit,
        conn=conn,
    )
