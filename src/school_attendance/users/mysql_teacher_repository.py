from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, in_clause, to_db_datetime
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "teacher_id, full_name, phone, password_hash, created_at"


def _row_to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=r["teacher_id"],
        full_name=r["full_name"],
        phone=r["phone"],
        password_hash=r["password_hash"],
        created_at=from_db_datetime(r.get("created_at")),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (teacher_id,))
            r = fetchone(cur)
            return _row_to_teacher(r) if r else None

    def get_by_phone(self, phone: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE phone=%s", (phone,))
            r = fetchone(cur)
            return _row_to_teacher(r) if r else None

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY created_at DESC")
            return [_row_to_teacher(r) for r in fetchall(cur)]

    def get_names(self, teacher_ids: Sequence[str]) -> Dict[str, str]:
        if not teacher_ids:
            return {}
        clause, params = in_clause("teacher_id", list(dict.fromkeys(teacher_ids)))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT teacher_id, full_name FROM teachers WHERE {clause}", tuple(params))
            return {r["teacher_id"]: r["full_name"] for r in fetchall(cur)}

    def create(self, teacher: Teacher) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO teachers({_COLUMNS}) VALUES(%s,%s,%s,%s,%s)",
                (
                    teacher.teacher_id,
                    teacher.full_name,
                    teacher.phone,
                    teacher.password_hash,
                    to_db_datetime(teacher.created_at) if teacher.created_at else None,
                ),
            )
            return teacher.teacher_id

    def update(self, *, teacher_id: str, full_name: str, phone: str, password_hash: Optional[str] = None) -> bool:
        sets = ["full_name=%s", "phone=%s"]
        params: list[object] = [full_name, phone]
        if password_hash:
            sets.append("password_hash=%s")
            params.append(password_hash)
        params.append(teacher_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE teachers SET {', '.join(sets)} WHERE teacher_id=%s", tuple(params))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM teachers WHERE teacher_id=%s", (teacher_id,))
            return fetchone(cur) is not None

    def delete(self, teacher_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teachers WHERE teacher_id=%s", (teacher_id,))
            return cur.rowcount > 0
