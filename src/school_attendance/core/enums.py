from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Session roles used for route gating."""

    ADMIN = "admin"
    PARENT = "parent"
    TEACHER = "teacher"


class LessonStatus(str, Enum):
    """Lesson state stored in the lessons table.

    scheduled -> completed (attendance report)
    scheduled -> cancelled (reserved)
    """

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
