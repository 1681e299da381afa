from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_ids_for_cohort(self, *, department: str, semester: Optional[str] = None) -> Sequence[str]:
        raise NotImplementedError
