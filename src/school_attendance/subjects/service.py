from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import now_utc, parse_iso_date
from ..common.ids import new_object_id
from ..common.validators import require_non_empty, require_object_id, require_object_ids
from ..core.enums import Role
from ..core.exceptions import PersistenceError, ValidationError
from ..core.session import SessionContext
from ..lessons.lifecycle import LessonLifecycleManager
from ..schedules.model import ScheduleRule
from ..users.repository import StudentRepository, TeacherRepository
from .model import Subject
from .repository import SubjectRepository

logger = logging.getLogger(__name__)

RuleInput = Union[ScheduleRule, Mapping[str, Any]]


@dataclass(frozen=True)
class CreatedSubject:
    subject: Subject
    lesson_count: int


def _as_date(value: Union[date, str, None], field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(require_non_empty(value, field_name))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def _as_rules(schedule: Sequence[RuleInput]) -> tuple[ScheduleRule, ...]:
    if not schedule or isinstance(schedule, (str, bytes, Mapping)):
        raise ValidationError("Schedule must contain at least one rule")
    return tuple(r if isinstance(r, ScheduleRule) else ScheduleRule.parse(r) for r in schedule)


class SubjectService:
    """Use case: admin manages subjects; lessons follow through the lifecycle manager."""

    def __init__(
        self,
        subjects: SubjectRepository,
        lifecycle: LessonLifecycleManager,
        teachers: Optional[TeacherRepository] = None,
        students: Optional[StudentRepository] = None,
    ):
        self._subjects = subjects
        self._lifecycle = lifecycle
        self._teachers = teachers
        self._students = students

    def _check_references(self, teacher_id: str, student_ids: Sequence[str]) -> None:
        if self._teachers and not self._teachers.get_by_id(teacher_id):
            raise ValidationError("Teacher not found")
        if self._students:
            missing = set(student_ids) - self._students.existing_ids(student_ids)
            if missing:
                raise ValidationError("Unknown students selected")

    def list_subjects(self, ctx: SessionContext) -> Sequence[Subject]:
        ctx.require(Role.ADMIN)
        return self._subjects.list_all()

    def create_subject(
        self,
        ctx: SessionContext,
        *,
        name: str,
        teacher_id: str,
        student_ids: Sequence[str],
        schedule: Sequence[RuleInput],
        start_date: Union[date, str],
        end_date: Union[date, str],
        now: Optional[datetime] = None,
    ) -> CreatedSubject:
        """Insert the subject, then every lesson of its range.

        If the lessons cannot be written the subject is removed again, so it
        never silently exists without its schedule, and the error is re-raised.
        """

        ctx.require(Role.ADMIN)

        name = require_non_empty(name, "Name")
        teacher_id = require_object_id(teacher_id, "Teacher")
        student_ids = require_object_ids(student_ids, "Students")
        rules = _as_rules(schedule)
        start = _as_date(start_date, "Start date")
        end = _as_date(end_date, "End date")
        if start > end:
            raise ValidationError("Start date cannot be after end date")

        self._check_references(teacher_id, student_ids)

        subject = Subject(
            subject_id=new_object_id(),
            name=name,
            teacher_id=teacher_id,
            student_ids=tuple(student_ids),
            schedule=rules,
            start_date=start,
            periodicity_end_date=end,
            active=True,
            created_at=now or now_utc(),
        )

        # Expand before writing anything so range errors never leave a subject behind.
        lessons = self._lifecycle.build_lessons(subject)

        self._subjects.insert(subject)
        try:
            count = self._lifecycle.on_subject_created(subject, lessons)
        except PersistenceError:
            try:
                self._subjects.delete(subject.subject_id)
            except PersistenceError:
                logger.exception("Could not roll back subject %s after lesson failure", subject.subject_id)
            raise

        logger.info("Created subject %s (%s) with %d lessons", subject.subject_id, subject.name, count)
        return CreatedSubject(subject=subject, lesson_count=count)

    def update_subject(
        self,
        ctx: SessionContext,
        *,
        subject_id: str,
        name: str,
        teacher_id: str,
        student_ids: Sequence[str],
        now: Optional[datetime] = None,
    ) -> int:
        """Change name/teacher/students; returns how many future lessons were updated."""

        ctx.require(Role.ADMIN)

        subject_id = require_object_id(subject_id, "Subject")
        name = require_non_empty(name, "Name")
        teacher_id = require_object_id(teacher_id, "Teacher")
        student_ids = require_object_ids(student_ids, "Students")

        self._check_references(teacher_id, student_ids)

        if not self._subjects.update_fields(
            subject_id=subject_id, name=name, teacher_id=teacher_id, student_ids=student_ids
        ):
            raise ValidationError("Subject not found")

        return self._lifecycle.on_subject_updated(
            subject_id=subject_id, teacher_id=teacher_id, student_ids=student_ids, now=now
        )

    def delete_subject(self, ctx: SessionContext, *, subject_id: str, now: Optional[datetime] = None) -> int:
        """Remove future lessons, then the subject; returns the number of lessons removed.

        Lessons go first: if that fails the subject is still there and the
        delete can simply be retried, instead of leaving orphaned future lessons.
        """

        ctx.require(Role.ADMIN)

        subject_id = require_object_id(subject_id, "Subject")
        if not self._subjects.get_by_id(subject_id):
            raise ValidationError("Subject not found")

        deleted = self._lifecycle.on_subject_deleted(subject_id=subject_id, now=now)
        self._subjects.delete(subject_id)

        logger.info("Deleted subject %s", subject_id)
        return deleted
