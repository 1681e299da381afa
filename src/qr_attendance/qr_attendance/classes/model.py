from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..schedules.model import ScheduleRule
from ..tokens.model import SessionToken


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class taught to one department/semester cohort."""

    class_id: str
    subject: str
    department: str
    semester: str
    teacher_id: Optional[str] = None
    schedules: Tuple[ScheduleRule, ...] = field(default_factory=tuple)
    current_token: Optional[SessionToken] = None
