from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from ..schedules.model import ScheduleRule
from ..tokens.model import SessionToken
from .model import SchoolClass
from .repository import ClassRepository

_CLASS_COLUMNS = """
    class_id, subject, department, semester, teacher_id,
    token_value, token_issued_at, token_expires_at
"""


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_CLASS_COLUMNS} FROM classes WHERE class_id=%s", (class_id,))
            r = fetchone(cur)
            if not r:
                return None
            rules = self._load_rules(cur, [r["class_id"]])
            return self._to_class(r, rules.get(r["class_id"], ()))

    def list_for_cohort(self, *, department: str, semester: str) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CLASS_COLUMNS}
                FROM classes
                WHERE department=%s AND semester=%s
                ORDER BY subject ASC, class_id ASC
                """,
                (department, semester),
            )
            rows = fetchall(cur)
            rules = self._load_rules(cur, [r["class_id"] for r in rows])
            return [self._to_class(r, rules.get(r["class_id"], ())) for r in rows]

    def replace_token(self, *, class_id: str, token: SessionToken) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE classes
                SET token_value=%s, token_issued_at=%s, token_expires_at=%s
                WHERE class_id=%s
                """,
                (token.value, token.issued_at, token.expires_at, class_id),
            )
            return cur.rowcount > 0

    def _load_rules(self, cur, class_ids: Sequence[str]) -> dict[str, tuple[ScheduleRule, ...]]:
        if not class_ids:
            return {}

        placeholders = ",".join(["%s"] * len(class_ids))
        cur.execute(
            f"""
            SELECT class_id, day_of_week, start_time, end_time, room
            FROM class_schedules
            WHERE class_id IN ({placeholders})
            ORDER BY class_id ASC, position ASC, schedule_id ASC
            """,
            tuple(class_ids),
        )
        out: dict[str, list[ScheduleRule]] = {}
        for r in fetchall(cur):
            out.setdefault(r["class_id"], []).append(
                ScheduleRule(
                    day_of_week=Weekday.parse(r["day_of_week"]),
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    room=r.get("room"),
                )
            )
        return {k: tuple(v) for k, v in out.items()}

    @staticmethod
    def _to_class(r: dict, rules: tuple[ScheduleRule, ...]) -> SchoolClass:
        token = None
        if r.get("token_value") and r.get("token_expires_at"):
            token = SessionToken(
                value=r["token_value"],
                issued_at=r.get("token_issued_at") or r["token_expires_at"],
                expires_at=r["token_expires_at"],
            )
        return SchoolClass(
            class_id=r["class_id"],
            subject=r["subject"],
            department=r["department"],
            semester=str(r["semester"]),
            teacher_id=r.get("teacher_id"),
            schedules=rules,
            current_token=token,
        )
