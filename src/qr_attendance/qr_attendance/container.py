from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .core.constants import (
    DEFAULT_PUBLIC_BASE_URL,
    DEFAULT_SEMESTER_START,
    DEFAULT_STATS_BATCH_DELAY_SECONDS,
    DEFAULT_STATS_BATCH_SIZE,
    DEFAULT_TOKEN_TTL_MINUTES,
)
from .database.connection import DBConfig, DatabaseConnection
from .stats.batch import BatchStatsRunner
from .stats.service import AttendanceStatsService
from .students.mysql_student_repository import MySQLStudentRepository
from .tokens.service import SessionTokenManager


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    public_base_url: str

    classes_repo: MySQLClassRepository
    students_repo: MySQLStudentRepository
    attendance_repo: MySQLAttendanceRepository

    token_manager: SessionTokenManager
    attendance_service: AttendanceService
    stats_service: AttendanceStatsService
    batch_stats_runner: BatchStatsRunner


def build_container(
    *,
    db_config: dict,
    token_ttl_minutes: int = DEFAULT_TOKEN_TTL_MINUTES,
    semester_start: date = DEFAULT_SEMESTER_START,
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL,
    stats_batch_size: int = DEFAULT_STATS_BATCH_SIZE,
    stats_batch_delay_seconds: float = DEFAULT_STATS_BATCH_DELAY_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    classes_repo = MySQLClassRepository(conn)
    students_repo = MySQLStudentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    token_manager = SessionTokenManager(classes_repo, ttl=timedelta(minutes=int(token_ttl_minutes)))
    attendance_service = AttendanceService(attendance_repo, classes_repo, token_manager)
    stats_service = AttendanceStatsService(
        students_repo,
        classes_repo,
        attendance_repo,
        semester_start=semester_start,
    )
    batch_stats_runner = BatchStatsRunner(
        stats_service,
        batch_size=stats_batch_size,
        delay_seconds=stats_batch_delay_seconds,
    )

    return Container(
        conn=conn,
        public_base_url=public_base_url,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        token_manager=token_manager,
        attendance_service=attendance_service,
        stats_service=stats_service,
        batch_stats_runner=batch_stats_runner,
    )
