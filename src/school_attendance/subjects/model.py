from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..schedules.model import ScheduleRule


@dataclass(frozen=True)
class Subject:
    """A course taught by one teacher to a fixed set of students on a weekly schedule.

    `schedule`, `start_date` and `periodicity_end_date` never change after
    creation; a different schedule means a new subject.
    """

    subject_id: str
    name: str
    teacher_id: str
    student_ids: Tuple[str, ...]
    schedule: Tuple[ScheduleRule, ...]
    start_date: date
    periodicity_end_date: date
    active: bool = True
    created_at: Optional[datetime] = None
