from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import ScanState
from ..core.exceptions import DuplicateError, ExpiryError, OutsideScheduleError, WrongSessionError
from ..schedules.expansion import is_within_schedule
from ..tokens.payload import parse_scan_payload
from ..tokens.service import SessionTokenManager
from .model import AttendanceRecord, RosterRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Verifies a scanned/typed code and writes the attendance record.

    Checks run fail-fast in a fixed order: class match, schedule window,
    token validity, existing record. Check-then-write is not transactional;
    the unique key on (class, day, student) rejects a concurrent second write.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        classes: ClassRepository,
        tokens: SessionTokenManager,
    ):
        self._attendance = attendance
        self._classes = classes
        self._tokens = tokens

    def mark_attendance(
        self,
        *,
        student_id: str,
        target_class_id: str,
        code: str,
        device_fingerprint: str = "",
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        student_id = require_non_empty(student_id, "student_id")

        payload = parse_scan_payload(code)
        if payload.class_id != target_class_id:
            raise WrongSessionError("This code is for a different class")

        school_class = self._classes.get_by_id(target_class_id)
        if school_class is None:
            raise WrongSessionError("Class not found")

        if not is_within_schedule(school_class.schedules, now):
            raise OutsideScheduleError("Class is not in session")

        if not self._tokens.is_valid(school_class, payload.token, now):
            raise ExpiryError("Session code has expired")

        today = now.date()
        if self._attendance.exists_for(class_id=school_class.class_id, student_id=student_id, attend_date=today):
            raise DuplicateError("Attendance already recorded for today")

        record = AttendanceRecord(
            student_id=student_id,
            class_id=school_class.class_id,
            attend_date=today,
            timestamp=now,
            device_fingerprint=(device_fingerprint or "")[:512],
        )
        record_id = self._attendance.create(record)
        logger.info("attendance recorded: class=%s student=%s", school_class.class_id, student_id)
        return replace(record, record_id=record_id)

    def check_preconditions(
        self,
        *,
        student_id: str,
        class_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[ScanState]:
        """Idle-time check: ALREADY_MARKED, OUTSIDE_SCHEDULE or None when scanning may start."""

        now = now or now_local()
        if self._attendance.exists_for(class_id=class_id, student_id=student_id, attend_date=now.date()):
            return ScanState.ALREADY_MARKED

        school_class = self._classes.get_by_id(class_id)
        if school_class is None or not is_within_schedule(school_class.schedules, now):
            return ScanState.OUTSIDE_SCHEDULE
        return None

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return self._classes.get_by_id(class_id)

    def list_for_class_on_date(self, class_id: str, attend_date: date) -> Sequence[RosterRow]:
        return self._attendance.list_roster(class_id=class_id, attend_date=attend_date)
