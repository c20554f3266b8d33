from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Teacher:
    """Directory entry for a teacher. `phone` is the login identifier."""

    teacher_id: str
    full_name: str
    phone: str
    password_hash: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Student:
    student_id: str
    full_name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Parent:
    """Directory entry for a parent; `student_ids` are their children."""

    parent_id: str
    full_name: str
    phone: str
    password_hash: str
    student_ids: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None
