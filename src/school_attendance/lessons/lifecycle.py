"""Lesson lifecycle: what happens to lessons when their subject changes.

Lessons in the past are never rewritten or removed here. "Today" is the UTC
start of day of the `now` passed by the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc, start_of_day
from ..common.ids import new_object_id
from ..core.enums import LessonStatus
from ..core.exceptions import PersistenceError, ValidationError
from ..schedules.expander import ScheduleExpander
from ..subjects.model import Subject
from .model import Lesson
from .repository import LessonRepository

logger = logging.getLogger(__name__)


class LessonLifecycleManager:
    def __init__(self, lessons: LessonRepository, expander: ScheduleExpander):
        self._lessons = lessons
        self._expander = expander

    def build_lessons(self, subject: Subject) -> list[Lesson]:
        drafts = self._expander.expand(subject.start_date, subject.periodicity_end_date, subject.schedule)
        return [
            Lesson(
                lesson_id=new_object_id(),
                subject_id=subject.subject_id,
                teacher_id=subject.teacher_id,
                student_ids=tuple(subject.student_ids),
                start_time=d.start_time,
                end_time=d.end_time,
                status=d.status,
            )
            for d in drafts
        ]

    def on_subject_created(self, subject: Subject, lessons: Optional[Sequence[Lesson]] = None) -> int:
        """Batch-insert every lesson of the subject's range.

        `lessons` may be passed when the caller already expanded them.
        """

        if lessons is None:
            lessons = self.build_lessons(subject)
        if not lessons:
            logger.info("Subject %s has no lessons in its range", subject.subject_id)
            return 0

        try:
            inserted = self._lessons.insert_many(lessons)
        except PersistenceError:
            logger.exception("Lesson batch insert failed for subject %s", subject.subject_id)
            raise

        logger.info("Generated %d lessons for subject %s", inserted, subject.subject_id)
        return inserted

    def on_subject_updated(
        self,
        *,
        subject_id: str,
        teacher_id: str,
        student_ids: Sequence[str],
        now: Optional[datetime] = None,
    ) -> int:
        """Copy teacher/students onto lessons from today on that are still scheduled.

        Completed lessons keep who actually taught and attended them.
        """

        since = start_of_day(now or now_utc())
        updated = self._lessons.update_future_scheduled(
            subject_id=subject_id,
            since=since,
            teacher_id=teacher_id,
            student_ids=list(student_ids),
        )
        logger.info("Propagated subject %s changes to %d lessons", subject_id, updated)
        return updated

    def on_subject_deleted(self, *, subject_id: str, now: Optional[datetime] = None) -> int:
        """Drop lessons from today on; earlier lessons stay as history."""

        since = start_of_day(now or now_utc())
        deleted = self._lessons.delete_future(subject_id=subject_id, since=since)
        logger.info("Deleted %d future lessons of subject %s", deleted, subject_id)
        return deleted

    def cancel_lesson(self, lesson_id: str) -> None:
        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson:
            raise ValidationError("Lesson not found")
        if lesson.status != LessonStatus.SCHEDULED:
            raise ValidationError("Only scheduled lessons can be cancelled")

        if not self._lessons.set_status(
            lesson_id=lesson_id, status=LessonStatus.CANCELLED, expected=LessonStatus.SCHEDULED
        ):
            raise ValidationError("Lesson is no longer scheduled")
