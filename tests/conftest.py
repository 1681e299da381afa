from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Optional

import pytest

from src.qr_attendance.qr_attendance.attendance.model import AttendanceRecord, RosterRow
from src.qr_attendance.qr_attendance.attendance.service import AttendanceService
from src.qr_attendance.qr_attendance.classes.model import SchoolClass
from src.qr_attendance.qr_attendance.core.enums import Weekday
from src.qr_attendance.qr_attendance.core.exceptions import DuplicateError, TransientIOError
from src.qr_attendance.qr_attendance.schedules.model import ScheduleRule
from src.qr_attendance.qr_attendance.students.model import Student
from src.qr_attendance.qr_attendance.tokens.service import SessionTokenManager

MONDAY_9_10 = ScheduleRule(day_of_week=Weekday.MONDAY, start_time=time(9, 0), end_time=time(10, 0), room="A-101")
WEDNESDAY_11_12 = ScheduleRule(day_of_week=Weekday.WEDNESDAY, start_time=time(11, 0), end_time=time(12, 0))


@dataclass
class InMemoryClasses:
    by_id: dict[str, SchoolClass] = field(default_factory=dict)

    def add(self, school_class: SchoolClass) -> SchoolClass:
        self.by_id[school_class.class_id] = school_class
        return school_class

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        return self.by_id.get(class_id)

    def list_for_cohort(self, *, department: str, semester: str):
        return [c for c in self.by_id.values() if c.department == department and c.semester == semester]

    def replace_token(self, *, class_id: str, token) -> bool:
        current = self.by_id.get(class_id)
        if current is None:
            return False
        self.by_id[class_id] = replace(current, current_token=token)
        return True


@dataclass
class InMemoryStudents:
    by_id: dict[str, Student] = field(default_factory=dict)

    def add(self, student: Student) -> Student:
        self.by_id[student.student_id] = student
        return student

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self.by_id.get(student_id)

    def list_ids_for_cohort(self, *, department: str, semester: Optional[str] = None):
        return [
            s.student_id
            for s in self.by_id.values()
            if s.department == department and (semester is None or s.semester == semester)
        ]


class InMemoryAttendance:
    """Keyed like the unique index on attendance_records."""

    def __init__(self):
        self._by_key: dict[tuple[str, date, str], AttendanceRecord] = {}
        self._id = 0
        self.fail_reads = False
        self.fail_writes = False

    def exists_for(self, *, class_id: str, student_id: str, attend_date: date) -> bool:
        if self.fail_reads:
            raise TransientIOError("read failed")
        return (class_id, attend_date, student_id) in self._by_key

    def create(self, record: AttendanceRecord) -> int:
        if self.fail_writes:
            raise TransientIOError("write failed")
        key = (record.class_id, record.attend_date, record.student_id)
        if key in self._by_key:
            raise DuplicateError("Record already exists")
        self._id += 1
        self._by_key[key] = replace(record, record_id=self._id)
        return self._id

    def add(self, *, student_id: str, class_id: str, when: datetime) -> None:
        self.create(AttendanceRecord(student_id=student_id, class_id=class_id, attend_date=when.date(), timestamp=when))

    def all(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())

    def list_for_student(self, *, student_id: str, class_ids):
        wanted = set(class_ids)
        return [r for r in self._by_key.values() if r.student_id == student_id and r.class_id in wanted]

    def list_roster(self, *, class_id: str, attend_date: date):
        rows = [
            RosterRow(
                student_id=r.student_id,
                full_name=f"Student {r.student_id}",
                usn=None,
                class_id=r.class_id,
                subject="",
                timestamp=r.timestamp,
                device_fingerprint=r.device_fingerprint,
            )
            for r in self._by_key.values()
            if r.class_id == class_id and r.attend_date == attend_date
        ]
        rows.sort(key=lambda r: r.timestamp, reverse=True)
        return rows


class SequentialTokens:
    def __init__(self):
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"tok{self.n}"


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 2024-07-15, inside the 09:00-10:00 slot
    return datetime(2024, 7, 15, 9, 5, 0)


@pytest.fixture
def cs101() -> SchoolClass:
    return SchoolClass(
        class_id="CS101",
        subject="Data Structures",
        department="CSE",
        semester="5",
        teacher_id="t-1",
        schedules=(MONDAY_9_10,),
    )


@pytest.fixture
def classes_repo(cs101) -> InMemoryClasses:
    repo = InMemoryClasses()
    repo.add(cs101)
    return repo


@pytest.fixture
def students_repo() -> InMemoryStudents:
    repo = InMemoryStudents()
    repo.add(Student(student_id="s-1", full_name="Asha Rao", usn="1XX21CS001", department="CSE", semester="5"))
    return repo


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def token_manager(classes_repo) -> SessionTokenManager:
    return SessionTokenManager(classes_repo, ttl=timedelta(minutes=10), token_factory=SequentialTokens())


@pytest.fixture
def attendance_service(attendance_repo, classes_repo, token_manager) -> AttendanceService:
    return AttendanceService(attendance_repo, classes_repo, token_manager)
