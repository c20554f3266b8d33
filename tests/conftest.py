from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Sequence

import pytest

from school_attendance.container import assemble
from school_attendance.core.enums import LessonStatus, Role
from school_attendance.core.exceptions import PersistenceError, UploadError
from school_attendance.core.session import SessionContext
from school_attendance.lessons.model import Lesson
from school_attendance.media.image_host import ImageUpload
from school_attendance.subjects.model import Subject
from school_attendance.users.model import Parent, Student, Teacher


def oid(n: int) -> str:
    return f"{n:024x}"


class InMemorySubjects:
    def __init__(self):
        self.items: Dict[str, Subject] = {}
        self.fail_on_delete = False

    def insert(self, subject: Subject) -> str:
        self.items[subject.subject_id] = subject
        return subject.subject_id

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        return self.items.get(subject_id)

    def list_all(self):
        return sorted(self.items.values(), key=lambda s: s.created_at, reverse=True)

    def get_names(self, subject_ids):
        return {sid: self.items[sid].name for sid in subject_ids if sid in self.items}

    def update_fields(self, *, subject_id, name, teacher_id, student_ids) -> bool:
        s = self.items.get(subject_id)
        if not s:
            return False
        self.items[subject_id] = replace(s, name=name, teacher_id=teacher_id, student_ids=tuple(student_ids))
        return True

    def delete(self, subject_id: str) -> bool:
        if self.fail_on_delete:
            raise PersistenceError("Database operation failed")
        return self.items.pop(subject_id, None) is not None


class InMemoryLessons:
    def __init__(self):
        self.items: Dict[str, Lesson] = {}
        self.fail_on_insert = False
        self.fail_on_delete = False

    def add(self, lesson: Lesson) -> Lesson:
        self.items[lesson.lesson_id] = lesson
        return lesson

    def insert_many(self, lessons: Sequence[Lesson]) -> int:
        if self.fail_on_insert:
            raise PersistenceError("Database operation failed")
        for lesson in lessons:
            self.items[lesson.lesson_id] = lesson
        return len(lessons)

    def get_by_id(self, lesson_id: str) -> Optional[Lesson]:
        return self.items.get(lesson_id)

    def for_subject(self, subject_id: str):
        return sorted((l for l in self.items.values() if l.subject_id == subject_id), key=lambda l: l.start_time)

    def list_between(self, *, start, end, teacher_id=None, student_ids=None):
        out = [l for l in self.items.values() if start <= l.start_time <= end]
        if teacher_id is not None:
            out = [l for l in out if l.teacher_id == teacher_id]
        if student_ids is not None:
            wanted = set(student_ids)
            out = [l for l in out if wanted & set(l.student_ids)]
        return sorted(out, key=lambda l: (l.start_time, l.lesson_id))

    def update_future_scheduled(self, *, subject_id, since, teacher_id, student_ids) -> int:
        count = 0
        for lid, l in list(self.items.items()):
            if l.subject_id == subject_id and l.start_time >= since and l.status == LessonStatus.SCHEDULED:
                self.items[lid] = replace(l, teacher_id=teacher_id, student_ids=tuple(student_ids))
                count += 1
        return count

    def delete_future(self, *, subject_id, since) -> int:
        if self.fail_on_delete:
            raise PersistenceError("Database operation failed")
        doomed = [lid for lid, l in self.items.items() if l.subject_id == subject_id and l.start_time >= since]
        for lid in doomed:
            del self.items[lid]
        return len(doomed)

    def save_report(self, *, lesson_id, attendance, photos, status, report_updated_at) -> bool:
        l = self.items.get(lesson_id)
        if not l:
            return False
        self.items[lesson_id] = replace(
            l,
            attendance=tuple(attendance),
            photos=tuple(photos),
            status=status,
            report_updated_at=report_updated_at,
        )
        return True

    def set_status(self, *, lesson_id, status, expected) -> bool:
        l = self.items.get(lesson_id)
        if not l or l.status != expected:
            return False
        self.items[lesson_id] = replace(l, status=status)
        return True


class InMemoryTeachers:
    def __init__(self, *teachers: Teacher):
        self.items: Dict[str, Teacher] = {t.teacher_id: t for t in teachers}

    def get_by_id(self, teacher_id):
        return self.items.get(teacher_id)

    def get_by_phone(self, phone):
        return next((t for t in self.items.values() if t.phone == phone), None)

    def list_all(self):
        return list(self.items.values())

    def get_names(self, teacher_ids):
        return {tid: self.items[tid].full_name for tid in teacher_ids if tid in self.items}

    def create(self, teacher: Teacher) -> str:
        self.items[teacher.teacher_id] = teacher
        return teacher.teacher_id

    def update(self, *, teacher_id, full_name, phone, password_hash=None) -> bool:
        t = self.items.get(teacher_id)
        if not t:
            return False
        self.items[teacher_id] = replace(
            t, full_name=full_name, phone=phone, password_hash=password_hash or t.password_hash
        )
        return True

    def delete(self, teacher_id) -> bool:
        return self.items.pop(teacher_id, None) is not None


class InMemoryStudents:
    def __init__(self, *students: Student):
        self.items: Dict[str, Student] = {s.student_id: s for s in students}

    def list_all(self):
        return list(self.items.values())

    def existing_ids(self, student_ids):
        return {sid for sid in student_ids if sid in self.items}

    def create(self, student: Student) -> str:
        self.items[student.student_id] = student
        return student.student_id

    def delete(self, student_id) -> bool:
        return self.items.pop(student_id, None) is not None


class InMemoryParents:
    def __init__(self, *parents: Parent):
        self.items: Dict[str, Parent] = {p.parent_id: p for p in parents}

    def get_by_id(self, parent_id):
        return self.items.get(parent_id)

    def get_by_phone(self, phone):
        return next((p for p in self.items.values() if p.phone == phone), None)

    def list_all(self):
        return list(self.items.values())

    def create(self, parent: Parent) -> str:
        self.items[parent.parent_id] = parent
        return parent.parent_id

    def delete(self, parent_id) -> bool:
        return self.items.pop(parent_id, None) is not None


class FakeImageHost:
    """Returns predictable URLs; `fail_on` makes the n-th upload (1-based) fail."""

    def __init__(self, fail_on: Optional[int] = None):
        self.uploaded: list[str] = []
        self.calls = 0
        self._fail_on = fail_on

    def upload(self, image: ImageUpload) -> str:
        self.calls += 1
        if self._fail_on is not None and self.calls == self._fail_on:
            raise UploadError("Photo upload failed")
        url = f"https://img.example.com/{image.filename}"
        self.uploaded.append(url)
        return url


TEACHER_ID = oid(0x100)
OTHER_TEACHER_ID = oid(0x101)
STUDENT_IDS = [oid(0x201), oid(0x202), oid(0x203)]
PARENT_ID = oid(0x301)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 10, 6, 0, tzinfo=timezone.utc)


@pytest.fixture
def admin_ctx() -> SessionContext:
    return SessionContext(role=Role.ADMIN)


@pytest.fixture
def teacher_ctx() -> SessionContext:
    return SessionContext(role=Role.TEACHER, user_id=TEACHER_ID)


@pytest.fixture
def teachers() -> InMemoryTeachers:
    from werkzeug.security import generate_password_hash

    return InMemoryTeachers(
        Teacher(
            teacher_id=TEACHER_ID,
            full_name="Aziza Karimova",
            phone="998901112233",
            password_hash=generate_password_hash("teach-pw"),
        ),
        Teacher(
            teacher_id=OTHER_TEACHER_ID,
            full_name="Bobur Aliev",
            phone="998904445566",
            password_hash=generate_password_hash("other-pw"),
        ),
    )


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents(*(Student(student_id=sid, full_name=f"Student {i}") for i, sid in enumerate(STUDENT_IDS)))


@pytest.fixture
def parents() -> InMemoryParents:
    from werkzeug.security import generate_password_hash

    return InMemoryParents(
        Parent(
            parent_id=PARENT_ID,
            full_name="Dilnoza Yusupova",
            phone="998907778899",
            password_hash=generate_password_hash("parent-pw"),
            student_ids=(STUDENT_IDS[0],),
        )
    )


@pytest.fixture
def subjects() -> InMemorySubjects:
    return InMemorySubjects()


@pytest.fixture
def lessons() -> InMemoryLessons:
    return InMemoryLessons()


@pytest.fixture
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture
def container(subjects, lessons, teachers, students, parents, image_host):
    return assemble(
        subjects_repo=subjects,
        lessons_repo=lessons,
        teachers_repo=teachers,
        students_repo=students,
        parents_repo=parents,
        image_host=image_host,
        admin_login="admin",
        admin_password="adminpassword",
        timezone_offset_hours=5,
        max_schedule_days=731,
    )


@pytest.fixture
def parent_ctx() -> SessionContext:
    return SessionContext(role=Role.PARENT, user_id=PARENT_ID)


@pytest.fixture
def student_ids() -> list[str]:
    return list(STUDENT_IDS)


@pytest.fixture
def make_subject(subjects):
    from school_attendance.schedules.model import ScheduleRule

    counter = iter(range(0x400, 0x500))

    def _make(name: str = "Mathematics", teacher_id: str = TEACHER_ID, student_ids=None) -> Subject:
        subject = Subject(
            subject_id=oid(next(counter)),
            name=name,
            teacher_id=teacher_id,
            student_ids=tuple(student_ids if student_ids is not None else STUDENT_IDS),
            schedule=(ScheduleRule(day_of_week=1, start_time="09:00", end_time="10:30"),),
            start_date=date(2024, 1, 1),
            periodicity_end_date=date(2024, 1, 31),
            created_at=datetime(2023, 12, 20, tzinfo=timezone.utc),
        )
        subjects.insert(subject)
        return subject

    return _make


@pytest.fixture
def make_lesson(lessons):
    counter = iter(range(0x500, 0x600))

    def _make(
        subject_id: str,
        start: datetime,
        *,
        teacher_id: str = TEACHER_ID,
        student_ids=None,
        status: LessonStatus = LessonStatus.SCHEDULED,
        attendance=None,
        photos=(),
    ) -> Lesson:
        return lessons.add(
            Lesson(
                lesson_id=oid(next(counter)),
                subject_id=subject_id,
                teacher_id=teacher_id,
                student_ids=tuple(student_ids if student_ids is not None else STUDENT_IDS),
                start_time=start,
                end_time=start + timedelta(minutes=90),
                status=status,
                attendance=attendance,
                photos=tuple(photos),
            )
        )

    return _make


@pytest.fixture
def image_host_cls():
    return FakeImageHost
