from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import TrendDirection, TrendPeriod


@dataclass(frozen=True)
class RateSummary:
    total: int
    attended: int
    missed: int
    rate: int


@dataclass(frozen=True)
class SubjectBreakdown:
    subject: str
    attended: int
    total: int
    missed: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "attended": self.attended,
            "total": self.total,
            "missed": self.missed,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class AttendanceStats:
    attendance_rate: int
    total_classes: int
    attended_classes: int
    missed_classes: int
    subject_breakdown: Tuple[SubjectBreakdown, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "AttendanceStats":
        return cls(attendance_rate=0, total_classes=0, attended_classes=0, missed_classes=0)

    def to_dict(self) -> dict:
        return {
            "attendanceRate": self.attendance_rate,
            "totalClasses": self.total_classes,
            "attendedClasses": self.attended_classes,
            "missedClasses": self.missed_classes,
            "subjectBreakdown": [s.to_dict() for s in self.subject_breakdown],
        }


@dataclass(frozen=True)
class HistoryEntry:
    """One expected session and whether the student attended it."""

    class_id: str
    subject: str
    session_date: date
    attended: bool
    timestamp: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "classId": self.class_id,
            "subject": self.subject,
            "date": self.session_date.strftime("%Y-%m-%d"),
            "attended": self.attended,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass(frozen=True)
class TrendBucket:
    label: str
    start: date
    end: date
    attended: int
    expected: int
    rate: int
    delta: int = 0
    rate_delta: int = 0
    direction: TrendDirection = TrendDirection.SAME

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "start": self.start.strftime("%Y-%m-%d"),
            "end": self.end.strftime("%Y-%m-%d"),
            "attended": self.attended,
            "expected": self.expected,
            "rate": self.rate,
            "delta": self.delta,
            "rateDelta": self.rate_delta,
            "direction": self.direction.value,
        }


@dataclass(frozen=True)
class TrendReport:
    period: TrendPeriod
    buckets: Tuple[TrendBucket, ...]

    @property
    def latest(self) -> Optional[TrendBucket]:
        return self.buckets[-1] if self.buckets else None

    def to_dict(self) -> dict:
        return {"period": self.period.value, "buckets": [b.to_dict() for b in self.buckets]}
