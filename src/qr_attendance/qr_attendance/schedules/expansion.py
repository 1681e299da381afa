"""Expected-session expansion from weekly schedule rules.

Expansion always applies the class's *current* rule set to the whole window.
Editing a class's weekly rules therefore changes expected counts for past dates
too; rule history is not kept.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import each_day
from ..core.enums import Weekday
from .model import ExpectedSession, ScheduleRule


def expand_occurrences(
    rules: Sequence[ScheduleRule],
    start: date,
    end: date,
    *,
    class_id: str = "",
) -> List[ExpectedSession]:
    """Every (date, rule) pair in [start, end], in date order then rule order.

    Several rules on the same weekday each produce their own occurrence.
    """

    if end < start or not rules:
        return []

    by_day: dict[Weekday, list[ScheduleRule]] = {}
    for rule in rules:
        by_day.setdefault(rule.day_of_week, []).append(rule)

    out: list[ExpectedSession] = []
    for day in each_day(start, end):
        for rule in by_day.get(Weekday.from_date(day), ()):
            out.append(ExpectedSession(class_id=class_id, session_date=day, rule=rule))
    return out


def count_expected(rules: Sequence[ScheduleRule], start: date, end: date) -> int:
    if end < start or not rules:
        return 0

    per_weekday = [0] * 7
    for rule in rules:
        per_weekday[rule.day_of_week.number] += 1

    return sum(per_weekday[day.weekday()] for day in each_day(start, end))


def active_rule(rules: Iterable[ScheduleRule], now: datetime) -> Optional[ScheduleRule]:
    for rule in rules:
        if rule.covers(now):
            return rule
    return None


def is_within_schedule(rules: Iterable[ScheduleRule], now: datetime) -> bool:
    return active_rule(rules, now) is not None
