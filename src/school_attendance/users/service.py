from __future__ import annotations

import hmac
import logging
from datetime import datetime
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_utc
from ..common.ids import new_object_id
from ..common.logging_utils import mask_phone
from ..common.validators import (
    normalize_phone,
    require_min_length,
    require_non_empty,
    require_object_id,
    require_object_ids,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, ValidationError
from ..core.session import SessionContext
from .model import Parent, Student, Teacher
from .repository import ParentRepository, StudentRepository, TeacherRepository

logger = logging.getLogger(__name__)


def _check_password(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except Exception:
        # e.g. placeholder or corrupted hashes
        return False


class AuthService:
    """Use case: resolve login credentials to a session.

    The admin account lives in configuration; parents and teachers log in
    with their phone number. Parents are checked before teachers.
    """

    def __init__(
        self,
        teachers: TeacherRepository,
        parents: ParentRepository,
        *,
        admin_login: str,
        admin_password: str,
    ):
        self._teachers = teachers
        self._parents = parents
        self._admin_login = admin_login
        self._admin_password = admin_password

    def authenticate(self, identifier: str, password: str) -> SessionContext:
        identifier = (identifier or "").strip()
        password = password or ""
        if not identifier or not password:
            raise AuthenticationError("Invalid login or password")

        if self._admin_password and hmac.compare_digest(identifier, self._admin_login):
            if hmac.compare_digest(password, self._admin_password):
                logger.info("Admin logged in")
                return SessionContext(role=Role.ADMIN)
            raise AuthenticationError("Invalid login or password")

        phone = "".join(identifier.split())

        parent = self._parents.get_by_phone(phone)
        if parent and _check_password(parent.password_hash, password):
            logger.info("Parent %s logged in", mask_phone(phone))
            return SessionContext(role=Role.PARENT, user_id=parent.parent_id)

        teacher = self._teachers.get_by_phone(phone)
        if teacher and _check_password(teacher.password_hash, password):
            logger.info("Teacher %s logged in", mask_phone(phone))
            return SessionContext(role=Role.TEACHER, user_id=teacher.teacher_id)

        logger.warning("Failed login for %s", mask_phone(phone))
        raise AuthenticationError("Invalid login or password")


class _PhoneRegistry:
    """Phones are a single login namespace shared by parents and teachers."""

    def __init__(self, teachers: TeacherRepository, parents: ParentRepository):
        self._teachers = teachers
        self._parents = parents

    def ensure_free(self, phone: str, *, allow_teacher_id: Optional[str] = None) -> None:
        teacher = self._teachers.get_by_phone(phone)
        if teacher and teacher.teacher_id != allow_teacher_id:
            raise ConflictError("A user with this phone already exists")
        if self._parents.get_by_phone(phone):
            raise ConflictError("A user with this phone already exists")


class TeacherService:
    """Use case: manage teachers (admin)."""

    def __init__(self, teachers: TeacherRepository, parents: ParentRepository):
        self._teachers = teachers
        self._phones = _PhoneRegistry(teachers, parents)

    def list_teachers(self, ctx: SessionContext) -> Sequence[Teacher]:
        ctx.require(Role.ADMIN)
        return self._teachers.list_all()

    def create_teacher(
        self,
        ctx: SessionContext,
        *,
        full_name: str,
        phone: str,
        password: str,
        now: Optional[datetime] = None,
    ) -> str:
        ctx.require(Role.ADMIN)
        full_name = require_non_empty(full_name, "Full name")
        phone = normalize_phone(phone)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        self._phones.ensure_free(phone)

        teacher = Teacher(
            teacher_id=new_object_id(),
            full_name=full_name,
            phone=phone,
            password_hash=generate_password_hash(password),
            created_at=now or now_utc(),
        )
        return self._teachers.create(teacher)

    def update_teacher(
        self,
        ctx: SessionContext,
        *,
        teacher_id: str,
        full_name: str,
        phone: str,
        password: Optional[str] = None,
    ) -> None:
        ctx.require(Role.ADMIN)
        teacher_id = require_object_id(teacher_id, "Teacher")
        full_name = require_non_empty(full_name, "Full name")
        phone = normalize_phone(phone)

        password_hash = None
        if password and password.strip():
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        self._phones.ensure_free(phone, allow_teacher_id=teacher_id)

        if not self._teachers.update(
            teacher_id=teacher_id, full_name=full_name, phone=phone, password_hash=password_hash
        ):
            raise ValidationError("Teacher not found")

    def delete_teacher(self, ctx: SessionContext, *, teacher_id: str) -> None:
        ctx.require(Role.ADMIN)
        if not self._teachers.delete(require_object_id(teacher_id, "Teacher")):
            raise ValidationError("Teacher not found")


class StudentService:
    """Use case: manage students (admin)."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_students(self, ctx: SessionContext) -> Sequence[Student]:
        ctx.require(Role.ADMIN)
        return self._students.list_all()

    def create_student(self, ctx: SessionContext, *, full_name: str, now: Optional[datetime] = None) -> str:
        ctx.require(Role.ADMIN)
        student = Student(
            student_id=new_object_id(),
            full_name=require_non_empty(full_name, "Full name"),
            created_at=now or now_utc(),
        )
        return self._students.create(student)

    def delete_student(self, ctx: SessionContext, *, student_id: str) -> None:
        ctx.require(Role.ADMIN)
        if not self._students.delete(require_object_id(student_id, "Student")):
            raise ValidationError("Student not found")


class ParentService:
    """Use case: manage parents (admin)."""

    def __init__(self, parents: ParentRepository, teachers: TeacherRepository, students: StudentRepository):
        self._parents = parents
        self._students = students
        self._phones = _PhoneRegistry(teachers, parents)

    def list_parents(self, ctx: SessionContext) -> Sequence[Parent]:
        ctx.require(Role.ADMIN)
        return self._parents.list_all()

    def create_parent(
        self,
        ctx: SessionContext,
        *,
        full_name: str,
        phone: str,
        password: str,
        student_ids: Sequence[str],
        now: Optional[datetime] = None,
    ) -> str:
        ctx.require(Role.ADMIN)
        full_name = require_non_empty(full_name, "Full name")
        phone = normalize_phone(phone)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        student_ids = require_object_ids(student_ids, "Students", allow_empty=True)

        missing = set(student_ids) - self._students.existing_ids(student_ids)
        if missing:
            raise ValidationError("Unknown students selected")

        self._phones.ensure_free(phone)

        parent = Parent(
            parent_id=new_object_id(),
            full_name=full_name,
            phone=phone,
            password_hash=generate_password_hash(password),
            student_ids=tuple(student_ids),
            created_at=now or now_utc(),
        )
        return self._parents.create(parent)

    def delete_parent(self, ctx: SessionContext, *, parent_id: str) -> None:
        ctx.require(Role.ADMIN)
        if not self._parents.delete(require_object_id(parent_id, "Parent")):
            raise ValidationError("Parent not found")
