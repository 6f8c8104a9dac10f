from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict

from ..common.datetime_utils import parse_iso_date
from ..common.validators import parse_attendance_status
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

# date -> student_id -> status; at most one status per (date, student).
Ledger = Dict[date, Dict[int, AttendanceStatus]]


@dataclass(frozen=True)
class LedgerEntry:
    work_date: date
    student_id: int
    status: AttendanceStatus


@dataclass(frozen=True)
class DayStats:
    """Read-model for the attendance progress cards of one day."""

    work_date: date
    total: int
    present: int
    absent: int
    late: int

    @property
    def pending(self) -> int:
        return max(self.total - self.present - self.absent - self.late, 0)

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "pending": self.pending,
        }


def ledger_to_json(ledger: Ledger) -> dict:
    return {
        d.isoformat(): {str(sid): status.value for sid, status in day.items()}
        for d, day in sorted(ledger.items())
    }


def _parse_day(raw_date: str, day) -> Dict[int, AttendanceStatus]:
    if not isinstance(day or {}, dict):
        raise ValidationError(f"Attendance for {raw_date} must map student ids to a status")
    marks: Dict[int, AttendanceStatus] = {}
    for raw_id, raw_status in (day or {}).items():
        try:
            student_id = int(raw_id)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid student id: {raw_id!r}")
        marks[student_id] = parse_attendance_status(raw_status)
    return marks


def ledger_from_json(data: dict) -> Ledger:
    if not isinstance(data or {}, dict):
        raise ValidationError("attendance must map dates to student statuses")
    return {parse_iso_date(d): _parse_day(d, day) for d, day in (data or {}).items()}
