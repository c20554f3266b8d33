from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence, Set

from .model import Parent, Student, Teacher


class TeacherRepository(Protocol):
    """Repository interface for teachers.

    Services depend on these protocols, not on the MySQL classes.
    """

    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_phone(self, phone: str) -> Optional[Teacher]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def get_names(self, teacher_ids: Sequence[str]) -> Dict[str, str]:
        raise NotImplementedError

    def create(self, teacher: Teacher) -> str:
        raise NotImplementedError

    def update(self, *, teacher_id: str, full_name: str, phone: str, password_hash: Optional[str] = None) -> bool:
        raise NotImplementedError

    def delete(self, teacher_id: str) -> bool:
        raise NotImplementedError


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def existing_ids(self, student_ids: Sequence[str]) -> Set[str]:
        raise NotImplementedError

    def create(self, student: Student) -> str:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError


class ParentRepository(Protocol):
    def get_by_id(self, parent_id: str) -> Optional[Parent]:
        raise NotImplementedError

    def get_by_phone(self, phone: str) -> Optional[Parent]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Parent]:
        raise NotImplementedError

    def create(self, parent: Parent) -> str:
        raise NotImplementedError

    def delete(self, parent_id: str) -> bool:
        raise NotImplementedError
