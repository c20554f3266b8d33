"""Attendance recording: the terminal write path of a lesson.

Order matters: validate everything, then upload photos, then write the lesson
once. An upload failure therefore leaves the lesson exactly as it was.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_object_id
from ..core.enums import LessonStatus, Role
from ..core.exceptions import AuthorizationError, UploadError, ValidationError
from ..core.session import SessionContext
from ..lessons.model import AttendanceEntry, Lesson
from ..lessons.repository import LessonRepository
from ..media.image_host import ImageHost, ImageUpload

logger = logging.getLogger(__name__)


def build_attendance(attendance_map: Any) -> List[AttendanceEntry]:
    """One entry per key of the map; students missing from the map get no entry."""

    if attendance_map is None or not isinstance(attendance_map, Mapping):
        raise ValidationError("Attendance data is required")

    entries: list[AttendanceEntry] = []
    seen: set[str] = set()
    for student_id, present in attendance_map.items():
        if not isinstance(student_id, str):
            raise ValidationError("Attendance contains an invalid student")
        student_id = require_object_id(student_id, "Student")
        if student_id in seen:
            raise ValidationError("Attendance lists a student more than once")
        if not isinstance(present, bool):
            raise ValidationError("Attendance values must be true or false")
        seen.add(student_id)
        entries.append(AttendanceEntry(student_id=student_id, present=present))
    return entries


class AttendanceRecorder:
    def __init__(self, lessons: LessonRepository, image_host: ImageHost):
        self._lessons = lessons
        self._image_host = image_host

    def _upload_all(self, lesson_id: str, photos: Sequence[ImageUpload]) -> List[str]:
        urls: list[str] = []
        for photo in photos:
            if photo.is_empty:
                continue
            try:
                urls.append(self._image_host.upload(photo))
            except UploadError:
                logger.error("Upload failed for lesson %s after %d photos; nothing saved", lesson_id, len(urls))
                raise
        return urls

    def record_attendance(
        self,
        ctx: SessionContext,
        *,
        lesson_id: str,
        attendance_map: Mapping[str, bool],
        existing_photos: Optional[Sequence[str]] = None,
        new_photos: Sequence[ImageUpload] = (),
        now: Optional[datetime] = None,
    ) -> Lesson:
        """Replace the lesson's attendance, merge photos and mark it completed.

        `existing_photos` are the already stored URLs the teacher kept; any
        stored photo left out of it is dropped from the lesson.
        """

        ctx.require(Role.TEACHER, Role.ADMIN)

        lesson_id = require_object_id(lesson_id, "Lesson")
        attendance = build_attendance(attendance_map)

        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson:
            raise ValidationError("Lesson not found")
        if ctx.role == Role.TEACHER and lesson.teacher_id != ctx.user_id:
            raise AuthorizationError("This lesson belongs to another teacher")
        if lesson.status == LessonStatus.CANCELLED:
            raise ValidationError("Cannot report on a cancelled lesson")

        kept = list(existing_photos or [])
        unknown = [url for url in kept if url not in lesson.photos]
        if unknown:
            raise ValidationError("Unknown photos in the report")

        uploaded = self._upload_all(lesson_id, new_photos)
        photos = kept + uploaded
        report_time = now or now_utc()

        if not self._lessons.save_report(
            lesson_id=lesson_id,
            attendance=attendance,
            photos=photos,
            status=LessonStatus.COMPLETED,
            report_updated_at=report_time,
        ):
            raise ValidationError("Lesson not found")

        logger.info(
            "Attendance saved for lesson %s: %d students, %d photos (%d new)",
            lesson_id,
            len(attendance),
            len(photos),
            len(uploaded),
        )
        return Lesson(
            lesson_id=lesson.lesson_id,
            subject_id=lesson.subject_id,
            teacher_id=lesson.teacher_id,
            student_ids=lesson.student_ids,
            start_time=lesson.start_time,
            end_time=lesson.end_time,
            status=LessonStatus.COMPLETED,
            attendance=tuple(attendance),
            photos=tuple(photos),
            report_updated_at=report_time,
        )
