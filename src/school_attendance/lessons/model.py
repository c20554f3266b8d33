from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from ..core.enums import LessonStatus


@dataclass(frozen=True)
class AttendanceEntry:
    student_id: str
    present: bool

    def to_dict(self) -> dict:
        return {"student_id": self.student_id, "present": self.present}


@dataclass(frozen=True)
class Lesson:
    """One dated occurrence of a subject.

    `teacher_id` and `student_ids` are snapshots taken when the lesson was
    generated (or last propagated from a subject update), not live references.
    Once a lesson is in the past it is a historical fact.
    """

    lesson_id: str
    subject_id: str
    teacher_id: str
    student_ids: Tuple[str, ...]
    start_time: datetime
    end_time: datetime
    status: LessonStatus = LessonStatus.SCHEDULED
    attendance: Optional[Tuple[AttendanceEntry, ...]] = None
    photos: Tuple[str, ...] = field(default_factory=tuple)
    report_updated_at: Optional[datetime] = None
