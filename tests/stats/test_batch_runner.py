from __future__ import annotations

import asyncio

import pytest

from src.qr_attendance.qr_attendance.core.exceptions import ValidationError
from src.qr_attendance.qr_attendance.stats.batch import BatchStatsRunner
from src.qr_attendance.qr_attendance.stats.model import AttendanceStats


class FakeStats:
    def __init__(self, *, missing=()):
        self.calls: list[str] = []
        self.missing = set(missing)

    def student_stats(self, student_id, *, today=None):
        self.calls.append(student_id)
        if student_id in self.missing:
            raise ValidationError("Student not found")
        n = int(student_id.split("-")[1])
        return AttendanceStats(attendance_rate=n, total_classes=n, attended_classes=n, missed_classes=0)


def test_runs_every_student_once_in_batches():
    fake = FakeStats()
    runner = BatchStatsRunner(fake, batch_size=2, delay_seconds=0)

    results = asyncio.run(runner.run(["s-1", "s-2", "s-3", "s-1", "s-4", "s-5"]))

    assert list(results) == ["s-1", "s-2", "s-3", "s-4", "s-5"]
    assert sorted(fake.calls) == ["s-1", "s-2", "s-3", "s-4", "s-5"]
    assert results["s-3"].attendance_rate == 3
    assert runner.latest == results


def test_newest_run_wins():
    runner = BatchStatsRunner(FakeStats(), batch_size=1, delay_seconds=0.05)

    async def main():
        older = asyncio.create_task(runner.run(["s-1", "s-2", "s-3"]))
        await asyncio.sleep(0)
        newer = await runner.run(["s-4"])
        return await older, newer

    older, newer = asyncio.run(main())

    assert set(older) == {"s-1", "s-2", "s-3"}
    assert runner.latest == newer
    assert set(runner.latest) == {"s-4"}


def test_failure_propagates_and_publishes_nothing():
    runner = BatchStatsRunner(FakeStats(missing={"s-2"}), batch_size=5, delay_seconds=0)

    with pytest.raises(ValidationError):
        asyncio.run(runner.run(["s-1", "s-2"]))
    assert runner.latest is None


def test_empty_input():
    runner = BatchStatsRunner(FakeStats())
    assert asyncio.run(runner.run([])) == {}
    assert runner.latest == {}


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        BatchStatsRunner(FakeStats(), batch_size=0)
