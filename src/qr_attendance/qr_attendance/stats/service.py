from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..common.datetime_utils import add_months, now_local, start_of_month, start_of_week
from ..core.constants import DEFAULT_SEMESTER_START, DEFAULT_TREND_MONTHS, DEFAULT_TREND_WEEKS
from ..core.enums import TrendDirection, TrendPeriod
from ..core.exceptions import ValidationError
from ..schedules.expansion import count_expected, expand_occurrences
from ..students.repository import StudentRepository
from .calculator.base import RateCalculator
from .calculator.capped_calculator import CappedRateCalculator
from .model import AttendanceStats, HistoryEntry, SubjectBreakdown, TrendBucket, TrendReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Enrollment:
    classes: Tuple[SchoolClass, ...]
    records: Tuple[AttendanceRecord, ...]


class AttendanceStatsService:
    """Joins expected sessions (from weekly rules) with recorded attendance.

    Expected sessions are expanded over [semester_start, today] using each
    class's current rules.
    """

    def __init__(
        self,
        students: StudentRepository,
        classes: ClassRepository,
        attendance: AttendanceRepository,
        *,
        semester_start: date = DEFAULT_SEMESTER_START,
        calculator: Optional[RateCalculator] = None,
    ):
        self._students = students
        self._classes = classes
        self._attendance = attendance
        self._semester_start = semester_start
        self._calculator = calculator or CappedRateCalculator()

    @property
    def semester_start(self) -> date:
        return self._semester_start

    def student_stats(self, student_id: str, *, today: Optional[date] = None) -> AttendanceStats:
        today = today or now_local().date()
        enrollment = self._load(student_id)
        if not enrollment.classes:
            return AttendanceStats.empty()

        expected_by_subject: Dict[str, int] = defaultdict(int)
        for c in enrollment.classes:
            expected_by_subject[c.subject] += count_expected(c.schedules, self._semester_start, today)

        subject_of = {c.class_id: c.subject for c in enrollment.classes}
        attended_by_subject: Dict[str, int] = defaultdict(int)
        for r in enrollment.records:
            attended_by_subject[subject_of[r.class_id]] += 1

        overall = self._calculator.summarize(
            expected=sum(expected_by_subject.values()),
            attended=len(enrollment.records),
        )

        breakdown = []
        for subject in sorted(set(expected_by_subject) | set(attended_by_subject)):
            s = self._calculator.summarize(
                expected=expected_by_subject.get(subject, 0),
                attended=attended_by_subject.get(subject, 0),
            )
            breakdown.append(
                SubjectBreakdown(subject=subject, attended=s.attended, total=s.total, missed=s.missed, percentage=s.rate)
            )

        return AttendanceStats(
            attendance_rate=overall.rate,
            total_classes=overall.total,
            attended_classes=overall.attended,
            missed_classes=overall.missed,
            subject_breakdown=tuple(breakdown),
        )

    def student_history(self, student_id: str, *, today: Optional[date] = None) -> List[HistoryEntry]:
        """Every expected session so far with an attended flag, newest first."""

        today = today or now_local().date()
        enrollment = self._load(student_id)

        attended_on: Dict[Tuple[str, date], AttendanceRecord] = {}
        for r in enrollment.records:
            attended_on[(r.class_id, r.attend_date)] = r

        out: list[HistoryEntry] = []
        for c in enrollment.classes:
            for occ in expand_occurrences(c.schedules, self._semester_start, today, class_id=c.class_id):
                rec = attended_on.get((c.class_id, occ.session_date))
                out.append(
                    HistoryEntry(
                        class_id=c.class_id,
                        subject=c.subject,
                        session_date=occ.session_date,
                        attended=rec is not None,
                        timestamp=rec.timestamp if rec else None,
                    )
                )

        out.sort(key=lambda e: e.session_date, reverse=True)
        return out

    def trend(
        self,
        student_id: str,
        *,
        period: TrendPeriod = TrendPeriod.WEEK,
        count: Optional[int] = None,
        today: Optional[date] = None,
    ) -> TrendReport:
        """Attendance per week/month for the last ``count`` periods, oldest first."""

        today = today or now_local().date()
        if count is None:
            count = DEFAULT_TREND_WEEKS if period == TrendPeriod.WEEK else DEFAULT_TREND_MONTHS
        if count <= 0:
            raise ValidationError("count must be positive")

        enrollment = self._load(student_id)

        buckets: list[TrendBucket] = []
        prev: Optional[TrendBucket] = None
        for start, end, label in _periods(period, today, count):
            window_end = min(end, today)
            window_start = max(start, self._semester_start)
            expected = sum(count_expected(c.schedules, window_start, window_end) for c in enrollment.classes)
            attended = sum(1 for r in enrollment.records if start <= r.attend_date <= end)
            s = self._calculator.summarize(expected=expected, attended=attended)

            delta = attended - prev.attended if prev else 0
            rate_delta = s.rate - prev.rate if prev else 0
            bucket = TrendBucket(
                label=label,
                start=start,
                end=end,
                attended=attended,
                expected=expected,
                rate=s.rate,
                delta=delta,
                rate_delta=rate_delta,
                direction=_direction(delta),
            )
            buckets.append(bucket)
            prev = bucket

        return TrendReport(period=period, buckets=tuple(buckets))

    def weekly_trend(
        self, student_id: str, *, today: Optional[date] = None, weeks: int = DEFAULT_TREND_WEEKS
    ) -> TrendReport:
        return self.trend(student_id, period=TrendPeriod.WEEK, count=weeks, today=today)

    def monthly_trend(
        self, student_id: str, *, today: Optional[date] = None, months: int = DEFAULT_TREND_MONTHS
    ) -> TrendReport:
        return self.trend(student_id, period=TrendPeriod.MONTH, count=months, today=today)

    def _load(self, student_id: str) -> _Enrollment:
        student = self._students.get_by_id(student_id)
        if student is None:
            raise ValidationError("Student not found")

        if not student.has_enrollment:
            logger.debug("student %s has no department/semester", student_id)
            return _Enrollment(classes=(), records=())

        classes = tuple(self._classes.list_for_cohort(department=student.department, semester=student.semester))
        class_ids = [c.class_id for c in classes]
        records = tuple(self._attendance.list_for_student(student_id=student_id, class_ids=class_ids))
        # Only records of enrolled classes count.
        known = set(class_ids)
        return _Enrollment(classes=classes, records=tuple(r for r in records if r.class_id in known))


def _direction(delta: int) -> TrendDirection:
    if delta > 0:
        return TrendDirection.UP
    if delta < 0:
        return TrendDirection.DOWN
    return TrendDirection.SAME


def _periods(period: TrendPeriod, today: date, count: int) -> Sequence[Tuple[date, date, str]]:
    out = []
    if period == TrendPeriod.WEEK:
        current = start_of_week(today)
        for i in range(count - 1, -1, -1):
            start = current - timedelta(weeks=i)
            out.append((start, start + timedelta(days=6), f"{start:%b %d}"))
    else:
        current = start_of_month(today)
        for i in range(count - 1, -1, -1):
            start = add_months(current, -i)
            end = add_months(start, 1) - timedelta(days=1)
            out.append((start, end, f"{start:%b %Y}"))
    return out
