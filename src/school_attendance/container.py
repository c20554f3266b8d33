from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceRecorder
from .core.constants import DEFAULT_MAX_SCHEDULE_DAYS, DEFAULT_TIMEZONE_OFFSET_HOURS
from .database.connection import DatabaseConnection, DBConfig
from .lessons.lifecycle import LessonLifecycleManager
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .lessons.repository import LessonRepository
from .lessons.service import LessonService
from .media.image_host import ImageHost
from .schedules.expander import ScheduleExpander
from .schedules.normalizer import TimeNormalizer
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .users.mysql_parent_repository import MySQLParentRepository
from .users.mysql_student_repository import MySQLStudentRepository
from .users.mysql_teacher_repository import MySQLTeacherRepository
from .users.repository import ParentRepository, StudentRepository, TeacherRepository
from .users.service import AuthService, ParentService, StudentService, TeacherService


@dataclass(frozen=True)
class Container:
    subjects_repo: SubjectRepository
    lessons_repo: LessonRepository
    teachers_repo: TeacherRepository
    students_repo: StudentRepository
    parents_repo: ParentRepository
    image_host: ImageHost

    normalizer: TimeNormalizer
    expander: ScheduleExpander
    lifecycle: LessonLifecycleManager

    auth_service: AuthService
    teacher_service: TeacherService
    student_service: StudentService
    parent_service: ParentService
    subject_service: SubjectService
    lesson_service: LessonService
    attendance_recorder: AttendanceRecorder

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    subjects_repo: SubjectRepository,
    lessons_repo: LessonRepository,
    teachers_repo: TeacherRepository,
    students_repo: StudentRepository,
    parents_repo: ParentRepository,
    image_host: ImageHost,
    admin_login: str,
    admin_password: str,
    timezone_offset_hours: float = DEFAULT_TIMEZONE_OFFSET_HOURS,
    max_schedule_days: int = DEFAULT_MAX_SCHEDULE_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over the given repositories (MySQL in the app, fakes in tests)."""

    normalizer = TimeNormalizer(timezone_offset_hours)
    expander = ScheduleExpander(normalizer, max_days=max_schedule_days)
    lifecycle = LessonLifecycleManager(lessons_repo, expander)

    return Container(
        subjects_repo=subjects_repo,
        lessons_repo=lessons_repo,
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        parents_repo=parents_repo,
        image_host=image_host,
        normalizer=normalizer,
        expander=expander,
        lifecycle=lifecycle,
        auth_service=AuthService(
            teachers_repo, parents_repo, admin_login=admin_login, admin_password=admin_password
        ),
        teacher_service=TeacherService(teachers_repo, parents_repo),
        student_service=StudentService(students_repo),
        parent_service=ParentService(parents_repo, teachers_repo, students_repo),
        subject_service=SubjectService(subjects_repo, lifecycle, teachers_repo, students_repo),
        lesson_service=LessonService(lessons_repo, subjects_repo, teachers_repo, parents_repo, lifecycle),
        attendance_recorder=AttendanceRecorder(lessons_repo, image_host),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    image_host: ImageHost,
    admin_login: str,
    admin_password: str,
    timezone_offset_hours: float = DEFAULT_TIMEZONE_OFFSET_HOURS,
    max_schedule_days: int = DEFAULT_MAX_SCHEDULE_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return assemble(
        subjects_repo=MySQLSubjectRepository(conn),
        lessons_repo=MySQLLessonRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        parents_repo=MySQLParentRepository(conn),
        image_host=image_host,
        admin_login=admin_login,
        admin_password=admin_password,
        timezone_offset_hours=timezone_offset_hours,
        max_schedule_days=max_schedule_days,
        conn=conn,
    )
