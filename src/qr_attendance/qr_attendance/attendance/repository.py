from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord, RosterRow


class AttendanceRepository(Protocol):
    """Write-once store of attendance records.

    There is intentionally no update/delete operation.
    """

    def exists_for(self, *, class_id: str, student_id: str, attend_date: date) -> bool:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        """Insert ``record``.

        Raises DuplicateError when (class_id, attend_date, student_id) is taken
        and TransientIOError when the store cannot be written.
        """

        raise NotImplementedError

    def list_for_student(self, *, student_id: str, class_ids: Sequence[str]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_roster(self, *, class_id: str, attend_date: date) -> Sequence[RosterRow]:
        """Records of one class on one day joined with student names, newest first."""

        raise NotImplementedError
