from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import List, Optional, Sequence

from ..common.datetime_utils import week_bounds
from ..common.validators import require_object_id
from ..core.constants import LOCAL_DATETIME_FORMAT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..core.session import SessionContext
from ..schedules.normalizer import TimeNormalizer
from ..subjects.repository import SubjectRepository
from ..users.repository import ParentRepository, TeacherRepository
from .lifecycle import LessonLifecycleManager
from .model import Lesson
from .repository import LessonRepository


@dataclass(frozen=True)
class LessonView:
    """Read-model for week calendars.

    `historical` marks lessons whose subject was deleted; they are still
    shown, just without a subject name.
    """

    lesson: Lesson
    subject_name: Optional[str]
    teacher_name: Optional[str]
    historical: bool

    def to_dict(self, normalizer: TimeNormalizer) -> dict:
        lesson = self.lesson
        return {
            "id": lesson.lesson_id,
            "subjectId": lesson.subject_id,
            "subjectName": self.subject_name,
            "teacherId": lesson.teacher_id,
            "teacherName": self.teacher_name,
            "studentIds": list(lesson.student_ids),
            "startTime": lesson.start_time.isoformat(),
            "endTime": lesson.end_time.isoformat(),
            "localStart": normalizer.to_local(lesson.start_time).strftime(LOCAL_DATETIME_FORMAT),
            "localEnd": normalizer.to_local(lesson.end_time).strftime(LOCAL_DATETIME_FORMAT),
            "status": lesson.status.value,
            "attendance": (
                [{"studentId": a.student_id, "present": a.present} for a in lesson.attendance]
                if lesson.attendance is not None
                else None
            ),
            "photos": list(lesson.photos),
            "reportUpdatedAt": lesson.report_updated_at.isoformat() if lesson.report_updated_at else None,
            "historical": self.historical,
        }


class LessonService:
    """Use case: week views per role, and admin lesson cancellation."""

    def __init__(
        self,
        lessons: LessonRepository,
        subjects: SubjectRepository,
        teachers: TeacherRepository,
        parents: ParentRepository,
        lifecycle: LessonLifecycleManager,
    ):
        self._lessons = lessons
        self._subjects = subjects
        self._teachers = teachers
        self._parents = parents
        self._lifecycle = lifecycle

    def _to_views(self, lessons: Sequence[Lesson]) -> List[LessonView]:
        subject_names = self._subjects.get_names([l.subject_id for l in lessons])
        teacher_names = self._teachers.get_names([l.teacher_id for l in lessons])
        return [
            LessonView(
                lesson=l,
                subject_name=subject_names.get(l.subject_id),
                teacher_name=teacher_names.get(l.teacher_id),
                historical=l.subject_id not in subject_names,
            )
            for l in lessons
        ]

    def week_for_admin(self, ctx: SessionContext, day: date) -> List[LessonView]:
        ctx.require(Role.ADMIN)
        start, end = week_bounds(day)
        return self._to_views(self._lessons.list_between(start=start, end=end))

    def week_for_teacher(self, ctx: SessionContext, day: date) -> List[LessonView]:
        ctx.require(Role.TEACHER)
        start, end = week_bounds(day)
        return self._to_views(self._lessons.list_between(start=start, end=end, teacher_id=ctx.user_id))

    def week_for_parent(self, ctx: SessionContext, day: date) -> List[LessonView]:
        """Lessons enrolling any of the parent's children.

        Attendance is reduced to the parent's own children.
        """

        ctx.require(Role.PARENT)
        parent = self._parents.get_by_id(ctx.user_id or "")
        if not parent:
            raise AuthorizationError("Parent account not found")
        if not parent.student_ids:
            return []

        children = set(parent.student_ids)
        start, end = week_bounds(day)
        lessons = self._lessons.list_between(start=start, end=end, student_ids=list(parent.student_ids))

        masked = [
            replace(
                l,
                attendance=(
                    tuple(a for a in l.attendance if a.student_id in children)
                    if l.attendance is not None
                    else None
                ),
            )
            for l in lessons
        ]
        return self._to_views(masked)

    def cancel_lesson(self, ctx: SessionContext, *, lesson_id: str) -> None:
        ctx.require(Role.ADMIN)
        self._lifecycle.cancel_lesson(require_object_id(lesson_id, "Lesson"))
