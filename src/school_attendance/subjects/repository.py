from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence

from .model import Subject


class SubjectRepository(Protocol):
    def insert(self, subject: Subject) -> str:
        raise NotImplementedError

    def get_by_id(self, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Subject]:
        """Newest first."""

        raise NotImplementedError

    def get_names(self, subject_ids: Sequence[str]) -> Dict[str, str]:
        """subject_id -> name for the ids that still exist."""

        raise NotImplementedError

    def update_fields(self, *, subject_id: str, name: str, teacher_id: str, student_ids: Sequence[str]) -> bool:
        raise NotImplementedError

    def delete(self, subject_id: str) -> bool:
        raise NotImplementedError
