from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student present at one class on one day.

    Unique per (class_id, attend_date, student_id); write-once.
    """

    student_id: str
    class_id: str
    attend_date: date
    timestamp: datetime
    device_fingerprint: str = ""
    record_id: Optional[int] = None


@dataclass(frozen=True)
class RosterRow:
    """Read-model for the teacher's per-day attendance list."""

    student_id: str
    full_name: str
    usn: Optional[str]
    class_id: str
    subject: str
    timestamp: datetime
    device_fingerprint: str
