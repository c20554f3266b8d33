from datetime import datetime, timezone

import pytest

from school_attendance.core.enums import LessonStatus
from school_attendance.core.exceptions import ValidationError


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def lifecycle(container):
    return container.lifecycle


@pytest.fixture
def timeline(make_subject, make_lesson):
    # fixed_now is 2024-01-10 06:00Z, so "today" starts at 2024-01-10 00:00Z.
    subject = make_subject()
    return {
        "subject": subject,
        "past": make_lesson(subject.subject_id, utc(2024, 1, 8, 4, 0)),
        "earlier_today": make_lesson(subject.subject_id, utc(2024, 1, 10, 4, 0)),
        "future_completed": make_lesson(subject.subject_id, utc(2024, 1, 12, 4, 0), status=LessonStatus.COMPLETED),
        "future": make_lesson(subject.subject_id, utc(2024, 1, 15, 4, 0)),
    }


def test_update_reaches_only_scheduled_lessons_from_today(lifecycle, lessons, timeline, fixed_now, student_ids):
    new_teacher = "f" * 24
    subject = timeline["subject"]

    updated = lifecycle.on_subject_updated(
        subject_id=subject.subject_id, teacher_id=new_teacher, student_ids=student_ids[:1], now=fixed_now
    )

    assert updated == 2
    for key in ("earlier_today", "future"):
        lesson = lessons.get_by_id(timeline[key].lesson_id)
        assert lesson.teacher_id == new_teacher
        assert lesson.student_ids == tuple(student_ids[:1])
    for key in ("past", "future_completed"):
        assert lessons.get_by_id(timeline[key].lesson_id) == timeline[key]


def test_delete_removes_lessons_from_today_and_keeps_history(lifecycle, lessons, timeline, fixed_now):
    subject = timeline["subject"]

    deleted = lifecycle.on_subject_deleted(subject_id=subject.subject_id, now=fixed_now)

    assert deleted == 3
    assert lessons.for_subject(subject.subject_id) == [timeline["past"]]


def test_created_subject_gets_its_lessons(lifecycle, lessons, make_subject):
    subject = make_subject()

    count = lifecycle.on_subject_created(subject)

    # Mondays of January 2024: 1, 8, 15, 22, 29
    assert count == 5
    stored = lessons.for_subject(subject.subject_id)
    assert [l.start_time.day for l in stored] == [1, 8, 15, 22, 29]
    assert all(l.teacher_id == subject.teacher_id for l in stored)
    assert all(l.student_ids == subject.student_ids for l in stored)


def test_cancel_scheduled_lesson(lifecycle, lessons, timeline):
    lesson = timeline["future"]

    lifecycle.cancel_lesson(lesson.lesson_id)

    assert lessons.get_by_id(lesson.lesson_id).status == LessonStatus.CANCELLED


def test_cancel_rejects_completed_and_missing_lessons(lifecycle, timeline):
    with pytest.raises(ValidationError):
        lifecycle.cancel_lesson(timeline["future_completed"].lesson_id)
    with pytest.raises(ValidationError):
        lifecycle.cancel_lesson("0" * 24)
