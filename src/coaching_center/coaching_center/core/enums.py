from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access checks."""

    ADMIN = "admin"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    """Attendance values allowed in the ledger and in submissions."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class ApprovalStatus(str, Enum):
    """Lifecycle of a teacher submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class NotificationType(str, Enum):
    ATTENDANCE = "attendance"
    FEE = "fee"
    CUSTOM = "custom"
    INFO = "info"
