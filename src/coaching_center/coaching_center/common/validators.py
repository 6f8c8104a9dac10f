from __future__ import annotations

from typing import Union

from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_role(current_role: Role, expected: Role, message: str = "Permission denied") -> None:
    if current_role != expected:
        raise AuthorizationError(message)


def parse_attendance_status(value: Union[str, AttendanceStatus]) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid attendance status: {value!r}")
