from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, full_name, usn, department, semester
                FROM students
                WHERE student_id=%s
                """,
                (student_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Student(
                student_id=r["student_id"],
                full_name=r["full_name"],
                usn=r.get("usn"),
                department=r.get("department"),
                semester=str(r["semester"]) if r.get("semester") is not None else None,
            )

    def list_ids_for_cohort(self, *, department: str, semester: Optional[str] = None) -> Sequence[str]:
        clauses = ["department=%s"]
        params: list[object] = [department]
        if semester is not None:
            clauses.append("semester=%s")
            params.append(semester)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT student_id FROM students WHERE {where} ORDER BY student_id ASC", tuple(params))
            return [r["student_id"] for r in fetchall(cur)]
