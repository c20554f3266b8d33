from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, from_json, to_db_datetime, to_json
from .model import Parent
from .repository import ParentRepository

_COLUMNS = "parent_id, full_name, phone, password_hash, student_ids, created_at"


def _row_to_parent(r: dict) -> Parent:
    return Parent(
        parent_id=r["parent_id"],
        full_name=r["full_name"],
        phone=r["phone"],
        password_hash=r["password_hash"],
        student_ids=tuple(from_json(r.get("student_ids"), [])),
        created_at=from_db_datetime(r.get("created_at")),
    )


class MySQLParentRepository(ParentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, parent_id: str) -> Optional[Parent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parents WHERE parent_id=%s", (parent_id,))
            r = fetchone(cur)
            return _row_to_parent(r) if r else None

    def get_by_phone(self, phone: str) -> Optional[Parent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parents WHERE phone=%s", (phone,))
            r = fetchone(cur)
            return _row_to_parent(r) if r else None

    def list_all(self) -> Sequence[Parent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM parents ORDER BY created_at DESC")
            return [_row_to_parent(r) for r in fetchall(cur)]

    def create(self, parent: Parent) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO parents({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s)",
                (
                    parent.parent_id,
                    parent.full_name,
                    parent.phone,
                    parent.password_hash,
                    to_json(list(parent.student_ids)),
                    to_db_datetime(parent.created_at) if parent.created_at else None,
                ),
            )
            return parent.parent_id

    def delete(self, parent_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM parents WHERE parent_id=%s", (parent_id,))
            return cur.rowcount > 0
