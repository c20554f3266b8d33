from datetime import datetime, timezone

import pytest

from school_attendance.attendance.service import AttendanceRecorder, build_attendance
from school_attendance.core.enums import LessonStatus, Role
from school_attendance.core.exceptions import AuthorizationError, UploadError, ValidationError
from school_attendance.core.session import SessionContext
from school_attendance.lessons.model import AttendanceEntry
from school_attendance.media.image_host import ImageUpload

REPORTED_AT = datetime(2024, 1, 10, 7, 0, tzinfo=timezone.utc)
OLD_PHOTO = "https://img.example.com/old.jpg"
DROPPED_PHOTO = "https://img.example.com/dropped.jpg"


def photo(name: str) -> ImageUpload:
    return ImageUpload(filename=name, content_type="image/jpeg", data=b"\xff\xd8jpeg")


@pytest.fixture
def lesson(make_subject, make_lesson):
    subject = make_subject()
    return make_lesson(
        subject.subject_id,
        datetime(2024, 1, 10, 4, 0, tzinfo=timezone.utc),
        photos=[OLD_PHOTO, DROPPED_PHOTO],
    )


@pytest.fixture
def recorder(container):
    return container.attendance_recorder


def test_report_records_marked_students_and_merges_photos(recorder, lessons, lesson, teacher_ctx, student_ids):
    s1, s2, _s3 = student_ids

    result = recorder.record_attendance(
        teacher_ctx,
        lesson_id=lesson.lesson_id,
        attendance_map={s1: True, s2: False},
        existing_photos=[OLD_PHOTO],
        new_photos=[photo("board.jpg")],
        now=REPORTED_AT,
    )

    stored = lessons.get_by_id(lesson.lesson_id)
    assert stored == result
    assert stored.status == LessonStatus.COMPLETED
    # s3 was not in the map and gets no entry.
    assert stored.attendance == (AttendanceEntry(s1, True), AttendanceEntry(s2, False))
    assert stored.photos == (OLD_PHOTO, "https://img.example.com/board.jpg")
    assert stored.report_updated_at == REPORTED_AT


def test_resubmitting_replaces_previous_report(recorder, lessons, lesson, teacher_ctx, student_ids):
    recorder.record_attendance(teacher_ctx, lesson_id=lesson.lesson_id, attendance_map={student_ids[0]: True})
    recorder.record_attendance(teacher_ctx, lesson_id=lesson.lesson_id, attendance_map={student_ids[0]: False})

    stored = lessons.get_by_id(lesson.lesson_id)
    assert stored.attendance == (AttendanceEntry(student_ids[0], False),)
    assert stored.photos == ()


def test_upload_failure_leaves_lesson_untouched(lessons, lesson, teacher_ctx, student_ids, image_host_cls):
    host = image_host_cls(fail_on=2)
    recorder = AttendanceRecorder(lessons, host)

    with pytest.raises(UploadError):
        recorder.record_attendance(
            teacher_ctx,
            lesson_id=lesson.lesson_id,
            attendance_map={student_ids[0]: True},
            existing_photos=[OLD_PHOTO],
            new_photos=[photo("a.jpg"), photo("b.jpg"), photo("c.jpg")],
        )

    assert lessons.get_by_id(lesson.lesson_id) == lesson
    assert host.calls == 2


def test_invalid_map_fails_before_any_upload(recorder, image_host, lessons, lesson, teacher_ctx, student_ids):
    with pytest.raises(ValidationError):
        recorder.record_attendance(
            teacher_ctx,
            lesson_id=lesson.lesson_id,
            attendance_map={student_ids[0]: "yes"},
            new_photos=[photo("a.jpg")],
        )

    assert image_host.calls == 0
    assert lessons.get_by_id(lesson.lesson_id) == lesson


def test_empty_uploads_are_skipped(recorder, image_host, lessons, lesson, teacher_ctx, student_ids):
    recorder.record_attendance(
        teacher_ctx,
        lesson_id=lesson.lesson_id,
        attendance_map={student_ids[0]: True},
        new_photos=[ImageUpload(filename="undefined", content_type="image/jpeg", data=b""), photo("ok.jpg")],
    )

    assert image_host.calls == 1
    assert lessons.get_by_id(lesson.lesson_id).photos == ("https://img.example.com/ok.jpg",)


def test_unknown_existing_photo_is_rejected(recorder, image_host, lesson, teacher_ctx, student_ids):
    with pytest.raises(ValidationError):
        recorder.record_attendance(
            teacher_ctx,
            lesson_id=lesson.lesson_id,
            attendance_map={student_ids[0]: True},
            existing_photos=["https://elsewhere.example.com/x.jpg"],
            new_photos=[photo("a.jpg")],
        )
    assert image_host.calls == 0


def test_other_teacher_cannot_report(recorder, lesson, student_ids):
    ctx = SessionContext(role=Role.TEACHER, user_id="0" * 21 + "101")

    with pytest.raises(AuthorizationError):
        recorder.record_attendance(ctx, lesson_id=lesson.lesson_id, attendance_map={student_ids[0]: True})


def test_parent_cannot_report(recorder, lesson, parent_ctx, student_ids):
    with pytest.raises(AuthorizationError):
        recorder.record_attendance(parent_ctx, lesson_id=lesson.lesson_id, attendance_map={student_ids[0]: True})


def test_cancelled_lesson_cannot_be_reported(recorder, lessons, lesson, teacher_ctx, student_ids):
    lessons.set_status(lesson_id=lesson.lesson_id, status=LessonStatus.CANCELLED, expected=LessonStatus.SCHEDULED)

    with pytest.raises(ValidationError):
        recorder.record_attendance(teacher_ctx, lesson_id=lesson.lesson_id, attendance_map={student_ids[0]: True})


def test_missing_lesson(recorder, admin_ctx, student_ids):
    with pytest.raises(ValidationError):
        recorder.record_attendance(admin_ctx, lesson_id="9" * 24, attendance_map={student_ids[0]: True})


@pytest.mark.parametrize("raw", [None, [], "{}", {"": True}, {"abc": 1}])
def test_build_attendance_rejects_malformed_maps(raw):
    with pytest.raises(ValidationError):
        build_attendance(raw)


def test_build_attendance_allows_empty_map():
    assert build_attendance({}) == []


def test_build_attendance_rejects_same_student_twice(student_ids):
    s1 = student_ids[0]

    with pytest.raises(ValidationError):
        build_attendance({s1: True, f" {s1} ": False})


def test_build_attendance_normalizes_and_checks_ids(student_ids):
    s1 = student_ids[0]

    assert build_attendance({f" {s1}": True}) == [AttendanceEntry(s1, True)]
    with pytest.raises(ValidationError):
        build_attendance({"s1": True})


def test_duplicate_student_in_report_writes_nothing(recorder, image_host, lessons, lesson, teacher_ctx, student_ids):
    s1 = student_ids[0]

    with pytest.raises(ValidationError):
        recorder.record_attendance(
            teacher_ctx,
            lesson_id=lesson.lesson_id,
            attendance_map={s1: True, f"{s1} ": False},
            new_photos=[photo("a.jpg")],
        )

    assert image_host.calls == 0
    assert lessons.get_by_id(lesson.lesson_id) == lesson
