from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import Ledger, LedgerEntry


class AttendanceLedgerRepository(Protocol):
    """Persistent store of approved attendance."""

    def get_all(self) -> Ledger:
        """Full ledger; empty dict when nothing has been stored."""

        raise NotImplementedError

    def replace_all(self, ledger: Ledger) -> None:
        """Replace the whole ledger in one transaction."""

        raise NotImplementedError

    def mark_one(self, *, work_date: date, student_id: int, status: AttendanceStatus) -> None:
        """Upsert one entry. Last write wins."""

        raise NotImplementedError

    def get_for_date(self, work_date: date) -> Dict[int, AttendanceStatus]:
        raise NotImplementedError

    def get_for_student(
        self,
        *,
        student_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LedgerEntry]:
        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError
