from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: Student.

    Note: enrollment is implicit, a student attends every class of the same
    department and semester.
    """

    student_id: str
    full_name: str
    usn: Optional[str]
    department: Optional[str]
    semester: Optional[str]

    @property
    def has_enrollment(self) -> bool:
        return bool(self.department) and bool(self.semester)
