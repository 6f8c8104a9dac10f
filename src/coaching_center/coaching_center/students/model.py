from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import StudentStatus


@dataclass(frozen=True)
class Student:
    """Directory entry. Owned by student management; attendance refers to it by id."""

    student_id: int
    name: str
    grade: str
    roll_number: str
    status: StudentStatus = StudentStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == StudentStatus.ACTIVE
