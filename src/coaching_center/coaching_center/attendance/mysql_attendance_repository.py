from __future__ import annotations

from datetime import date
from typing import Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from .model import Ledger, LedgerEntry
from .repository import AttendanceLedgerRepository

LEDGER_UPSERT_SQL = """
    INSERT INTO attendance_ledger(work_date, student_id, status)
    VALUES(%s,%s,%s)
    ON DUPLICATE KEY UPDATE status=VALUES(status)
"""


class MySQLAttendanceLedgerRepository(AttendanceLedgerRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_all(self) -> Ledger:
        with self._db.transaction() as cur:
            cur.execute(
                """
                SELECT work_date, student_id, status
                FROM attendance_ledger
                ORDER BY work_date ASC, student_id ASC
                """
            )
            ledger: Ledger = {}
            for r in cur.fetchall():
                ledger.setdefault(r["work_date"], {})[int(r["student_id"])] = AttendanceStatus(r["status"])
            return ledger

    def replace_all(self, ledger: Ledger) -> None:
        rows = [
            (work_date, int(student_id), status.value)
            for work_date, day in ledger.items()
            for student_id, status in day.items()
        ]
        with self._db.transaction() as cur:
            cur.execute("DELETE FROM attendance_ledger")
            if rows:
                cur.executemany(LEDGER_UPSERT_SQL, rows)

    def mark_one(self, *, work_date: date, student_id: int, status: AttendanceStatus) -> None:
        with self._db.transaction() as cur:
            cur.execute(LEDGER_UPSERT_SQL, (work_date, int(student_id), status.value))

    def get_for_date(self, work_date: date) -> Dict[int, AttendanceStatus]:
        with self._db.transaction() as cur:
            cur.execute(
                "SELECT student_id, status FROM attendance_ledger WHERE work_date=%s",
                (work_date,),
            )
            return {int(r["student_id"]): AttendanceStatus(r["status"]) for r in cur.fetchall()}

    def get_for_student(
        self,
        *,
        student_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LedgerEntry]:
        clauses = ["student_id=%s"]
        params: list[object] = [int(student_id)]

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with self._db.transaction() as cur:
            cur.execute(
                f"""
                SELECT work_date, student_id, status
                FROM attendance_ledger
                WHERE {where}
                ORDER BY work_date DESC
                """,
                tuple(params),
            )
            return [
                LedgerEntry(
                    work_date=r["work_date"],
                    student_id=int(r["student_id"]),
                    status=AttendanceStatus(r["status"]),
                )
                for r in cur.fetchall()
            ]

    def clear(self) -> int:
        with self._db.transaction() as cur:
            cur.execute("DELETE FROM attendance_ledger")
            return int(cur.rowcount)
