from __future__ import annotations

from typing import Sequence, Set

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_db_datetime, in_clause, to_db_datetime
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id, full_name, created_at FROM students ORDER BY created_at DESC")
            return [
                Student(
                    student_id=r["student_id"],
                    full_name=r["full_name"],
                    created_at=from_db_datetime(r.get("created_at")),
                )
                for r in fetchall(cur)
            ]

    def existing_ids(self, student_ids: Sequence[str]) -> Set[str]:
        if not student_ids:
            return set()
        clause, params = in_clause("student_id", list(dict.fromkeys(student_ids)))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT student_id FROM students WHERE {clause}", tuple(params))
            return {r["student_id"] for r in fetchall(cur)}

    def create(self, student: Student) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO students(student_id, full_name, created_at) VALUES(%s,%s,%s)",
                (
                    student.student_id,
                    student.full_name,
                    to_db_datetime(student.created_at) if student.created_at else None,
                ),
            )
            return student.student_id

    def delete(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0
