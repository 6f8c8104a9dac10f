from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import StudentStatus
from ..database.connection import DatabaseConnection
from .model import Student
from .repository import StudentRepository


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        grade=r["grade"],
        roll_number=r["roll_number"],
        status=StudentStatus(r["status"]),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with self._db.transaction() as cur:
            cur.execute(
                """
                SELECT student_id, name, grade, roll_number, status
                FROM students
                WHERE student_id=%s
                """,
                (int(student_id),),
            )
            r = cur.fetchone()
            return _to_student(r) if r else None

    def list_active(self, *, grade: Optional[str] = None) -> Sequence[Student]:
        clauses = ["status=%s"]
        params: list[object] = [StudentStatus.ACTIVE.value]
        if grade:
            clauses.append("grade=%s")
            params.append(grade)

        where = " AND ".join(clauses)

        with self._db.transaction() as cur:
            cur.execute(
                f"""
                SELECT student_id, name, grade, roll_number, status
                FROM students
                WHERE {where}
                ORDER BY name ASC
                """,
                tuple(params),
            )
            return [_to_student(r) for r in cur.fetchall()]
