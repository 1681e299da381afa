from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, RosterRow
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_for(self, *, class_id: str, student_id: str, attend_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM attendance_records
                WHERE class_id=%s AND attend_date=%s AND student_id=%s
                """,
                (class_id, attend_date, student_id),
            )
            return fetchone(cur) is not None

    def create(self, record: AttendanceRecord) -> int:
        # Plain INSERT: the unique key rejects a second record for the same day.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(class_id, attend_date, student_id, recorded_at, device_fingerprint)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    record.class_id,
                    record.attend_date,
                    record.student_id,
                    record.timestamp,
                    record.device_fingerprint or "",
                ),
            )
            return int(cur.lastrowid)

    def list_for_student(self, *, student_id: str, class_ids: Sequence[str]) -> Sequence[AttendanceRecord]:
        if not class_ids:
            return []

        placeholders = ",".join(["%s"] * len(class_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT record_id, class_id, attend_date, student_id, recorded_at, device_fingerprint
                FROM attendance_records
                WHERE student_id=%s AND class_id IN ({placeholders})
                ORDER BY recorded_at DESC
                """,
                (student_id, *class_ids),
            )
            return [
                AttendanceRecord(
                    record_id=int(r["record_id"]),
                    student_id=r["student_id"],
                    class_id=r["class_id"],
                    attend_date=r["attend_date"],
                    timestamp=r["recorded_at"],
                    device_fingerprint=r.get("device_fingerprint") or "",
                )
                for r in fetchall(cur)
            ]

    def list_roster(self, *, class_id: str, attend_date: date) -> Sequence[RosterRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    ar.student_id, COALESCE(s.full_name, ar.student_id) AS full_name, s.usn,
                    ar.class_id, c.subject, ar.recorded_at, ar.device_fingerprint
                FROM attendance_records ar
                JOIN classes c ON c.class_id = ar.class_id
                LEFT JOIN students s ON s.student_id = ar.student_id
                WHERE ar.class_id=%s AND ar.attend_date=%s
                ORDER BY ar.recorded_at DESC
                """,
                (class_id, attend_date),
            )
            return [
                RosterRow(
                    student_id=r["student_id"],
                    full_name=r["full_name"],
                    usn=r.get("usn"),
                    class_id=r["class_id"],
                    subject=r["subject"],
                    timestamp=r["recorded_at"],
                    device_fingerprint=r.get("device_fingerprint") or "",
                )
                for r in fetchall(cur)
            ]
