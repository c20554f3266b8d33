from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import LessonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_db_datetime,
    from_json,
    to_db_datetime,
    to_json,
)
from .model import AttendanceEntry, Lesson
from .repository import LessonRepository

_COLUMNS = (
    "lesson_id, subject_id, teacher_id, student_ids, start_time, end_time, "
    "status, attendance, photos, report_updated_at"
)


def _row_to_lesson(r: dict) -> Lesson:
    attendance = from_json(r.get("attendance"))
    return Lesson(
        lesson_id=r["lesson_id"],
        subject_id=r["subject_id"],
        teacher_id=r["teacher_id"],
        student_ids=tuple(from_json(r["student_ids"], [])),
        start_time=from_db_datetime(r["start_time"]),
        end_time=from_db_datetime(r["end_time"]),
        status=LessonStatus(r["status"]),
        attendance=(
            tuple(AttendanceEntry(student_id=a["student_id"], present=bool(a["present"])) for a in attendance)
            if attendance is not None
            else None
        ),
        photos=tuple(from_json(r.get("photos"), [])),
        report_updated_at=from_db_datetime(r.get("report_updated_at")),
    )


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_many(self, lessons: Sequence[Lesson]) -> int:
        if not lessons:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"""
                INSERT INTO lessons({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (
                        lesson.lesson_id,
                        lesson.subject_id,
                        lesson.teacher_id,
                        to_json(list(lesson.student_ids)),
                        to_db_datetime(lesson.start_time),
                        to_db_datetime(lesson.end_time),
                        lesson.status.value,
                        None,
                        to_json(list(lesson.photos)),
                        None,
                    )
                    for lesson in lessons
                ],
            )
            return len(lessons)

    def get_by_id(self, lesson_id: str) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lessons WHERE lesson_id=%s", (lesson_id,))
            r = fetchone(cur)
            return _row_to_lesson(r) if r else None

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        teacher_id: Optional[str] = None,
        student_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[Lesson]:
        clauses = ["start_time BETWEEN %s AND %s"]
        params: list[object] = [to_db_datetime(start), to_db_datetime(end)]

        if teacher_id is not None:
            clauses.append("teacher_id=%s")
            params.append(teacher_id)
        if student_ids is not None:
            if not student_ids:
                return []
            clauses.append("JSON_OVERLAPS(student_ids, CAST(%s AS JSON))")
            params.append(to_json(list(student_ids)))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM lessons
                WHERE {where}
                ORDER BY start_time ASC, lesson_id ASC
                """,
                tuple(params),
            )
            return [_row_to_lesson(r) for r in fetchall(cur)]

    def update_future_scheduled(
        self,
        *,
        subject_id: str,
        since: datetime,
        teacher_id: str,
        student_ids: Sequence[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE lessons
                SET teacher_id=%s, student_ids=%s
                WHERE subject_id=%s AND start_time>=%s AND status=%s
                """,
                (
                    teacher_id,
                    to_json(list(student_ids)),
                    subject_id,
                    to_db_datetime(since),
                    LessonStatus.SCHEDULED.value,
                ),
            )
            return int(cur.rowcount)

    def delete_future(self, *, subject_id: str, since: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM lessons WHERE subject_id=%s AND start_time>=%s",
                (subject_id, to_db_datetime(since)),
            )
            return int(cur.rowcount)

    def save_report(
        self,
        *,
        lesson_id: str,
        attendance: Sequence[AttendanceEntry],
        photos: Sequence[str],
        status: LessonStatus,
        report_updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE lessons
                SET attendance=%s, photos=%s, status=%s, report_updated_at=%s
                WHERE lesson_id=%s
                """,
                (
                    to_json([a.to_dict() for a in attendance]),
                    to_json(list(photos)),
                    status.value,
                    to_db_datetime(report_updated_at),
                    lesson_id,
                ),
            )
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM lessons WHERE lesson_id=%s", (lesson_id,))
            return fetchone(cur) is not None

    def set_status(self, *, lesson_id: str, status: LessonStatus, expected: LessonStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE lessons SET status=%s WHERE lesson_id=%s AND status=%s",
                (status.value, lesson_id, expected.value),
            )
            return cur.rowcount > 0
