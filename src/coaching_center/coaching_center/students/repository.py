from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Read-only view of the student directory.

    Attendance services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_active(self, *, grade: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError
