from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the session by the external auth layer."""

    TEACHER = "teacher"
    STUDENT = "student"
    ADMIN = "admin"


class Weekday(str, Enum):
    """Day names as stored on schedule rules."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def number(self) -> int:
        """Same numbering as ``date.weekday()`` (Monday == 0)."""
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def from_date(cls, day) -> "Weekday":
        return _WEEKDAY_ORDER[day.weekday()]

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        text = (value or "").strip().capitalize()
        for member in cls:
            if member.value == text or member.value[:3] == text:
                return member
        raise ValueError(f"Unknown weekday: {value!r}")


_WEEKDAY_ORDER = (
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
)


class ScanState(str, Enum):
    """States of the student-side capture flow."""

    IDLE = "idle"
    SCANNING = "scanning"
    VERIFYING = "verifying"
    SUCCESS = "success"
    ALREADY_MARKED = "already_marked"
    WRONG_SESSION = "wrong_session"
    EXPIRED_TOKEN = "expired_token"
    OUTSIDE_SCHEDULE = "outside_schedule"
    FAILURE = "failure"
    PERMISSION_DENIED = "permission_denied"

    @property
    def is_terminal(self) -> bool:
        return self not in (ScanState.IDLE, ScanState.SCANNING, ScanState.VERIFYING)


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


class TrendPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
