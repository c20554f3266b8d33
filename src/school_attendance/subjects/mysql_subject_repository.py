from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_db_datetime,
    from_json,
    in_clause,
    to_db_datetime,
    to_json,
)
from ..schedules.model import ScheduleRule
from .model import Subject
from .repository import SubjectRepository

_COLUMNS = "subject_id, name, teacher_id, student_ids, schedule, start_date, periodicity_end_date, active, created_at"


def _row_to_subject(r: dict) -> Subject:
    return Subject(
        subject_id=r["subject_id"],
        name=r["name"],
        teacher_id=r["teacher_id"],
        student_ids=tuple(from_json(r["student_ids"], [])),
        schedule=tuple(
            ScheduleRule(day_of_week=int(s["day_of_week"]), start_time=s["start_time"], end_time=s["end_time"])
            for s in from_json(r["schedule"], [])
        ),
        start_date=r["start_date"],
        periodicity_end_date=r["periodicity_end_date"],
        active=bool(r.get("active", True)),
        created_at=from_db_datetime(r.get("created_at")),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, subject: Subject) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO subjects({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    subject.subject_id,
                    subject.name,
                    subject.teacher_id,
                    to_json(list(subject.student_ids)),
                    to_json([rule.to_dict() for rule in subject.schedule]),
                    subject.start_date,
                    subject.periodicity_end_date,
                    1 if subject.active else 0,
                    to_db_datetime(subject.created_at) if subject.created_at else None,
                ),
            )
            return subject.subject_id

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM subjects WHERE subject_id=%s", (subject_id,))
            r = fetchone(cur)
            return _row_to_subject(r) if r else None

    def list_all(self) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM subjects ORDER BY created_at DESC")
            return [_row_to_subject(r) for r in fetchall(cur)]

    def get_names(self, subject_ids: Sequence[str]) -> Dict[str, str]:
        if not subject_ids:
            return {}
        clause, params = in_clause("subject_id", list(dict.fromkeys(subject_ids)))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT subject_id, name FROM subjects WHERE {clause}", tuple(params))
            return {r["subject_id"]: r["name"] for r in fetchall(cur)}

    def update_fields(self, *, subject_id: str, name: str, teacher_id: str, student_ids: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subjects
                SET name=%s, teacher_id=%s, student_ids=%s
                WHERE subject_id=%s
                """,
                (name, teacher_id, to_json(list(student_ids)), subject_id),
            )
            # rowcount is 0 when values are unchanged, so check existence separately.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM subjects WHERE subject_id=%s", (subject_id,))
            return fetchone(cur) is not None

    def delete(self, subject_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE subject_id=%s", (subject_id,))
            return cur.rowcount > 0
