from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LessonStatus
from .model import AttendanceEntry, Lesson


class LessonRepository(Protocol):
    def insert_many(self, lessons: Sequence[Lesson]) -> int:
        raise NotImplementedError

    def get_by_id(self, lesson_id: str) -> Optional[Lesson]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start: datetime,
        end: datetime,
        teacher_id: Optional[str] = None,
        student_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[Lesson]:
        """Lessons with start_time in [start, end], ordered by start_time.

        `student_ids` keeps lessons enrolling at least one of the given students.
        """

        raise NotImplementedError

    def update_future_scheduled(
        self,
        *,
        subject_id: str,
        since: datetime,
        teacher_id: str,
        student_ids: Sequence[str],
    ) -> int:
        """Set teacher/students on lessons with start_time >= since and status scheduled."""

        raise NotImplementedError

    def delete_future(self, *, subject_id: str, since: datetime) -> int:
        """Delete lessons with start_time >= since, whatever their status."""

        raise NotImplementedError

    def save_report(
        self,
        *,
        lesson_id: str,
        attendance: Sequence[AttendanceEntry],
        photos: Sequence[str],
        status: LessonStatus,
        report_updated_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def set_status(self, *, lesson_id: str, status: LessonStatus, expected: LessonStatus) -> bool:
        """Compare-and-set on status; False when the lesson is missing or not in `expected`."""

        raise NotImplementedError
