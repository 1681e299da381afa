from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import Weekday


@dataclass(frozen=True)
class ScheduleRule:
    """One weekly recurring slot of a class."""

    day_of_week: Weekday
    start_time: time
    end_time: time
    room: Optional[str] = None

    def covers(self, now: datetime) -> bool:
        """Weekday matches and start <= now <= end (inclusive bounds)."""
        if Weekday.from_date(now.date()) != self.day_of_week:
            return False
        return self.start_time <= now.time() <= self.end_time

    def label(self) -> str:
        return f"{self.day_of_week.value} {self.start_time:%H:%M}-{self.end_time:%H:%M}"


@dataclass(frozen=True)
class ExpectedSession:
    """A calendar occurrence implied by a weekly rule."""

    class_id: str
    session_date: date
    rule: ScheduleRule
