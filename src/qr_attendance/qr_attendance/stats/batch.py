from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Dict, Iterable, Optional

from ..core.constants import DEFAULT_STATS_BATCH_DELAY_SECONDS, DEFAULT_STATS_BATCH_SIZE
from .model import AttendanceStats
from .service import AttendanceStatsService

logger = logging.getLogger(__name__)


class BatchStatsRunner:
    """Computes stats for many students, a few at a time.

    Batching and the pause between batches only throttle load on the store.
    Runs are not cancelled; the newest run is the only one that publishes to
    ``latest``.
    """

    def __init__(
        self,
        stats: AttendanceStatsService,
        *,
        batch_size: int = DEFAULT_STATS_BATCH_SIZE,
        delay_seconds: float = DEFAULT_STATS_BATCH_DELAY_SECONDS,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._stats = stats
        self._batch_size = int(batch_size)
        self._delay = max(float(delay_seconds), 0.0)
        self._generation = 0
        self._latest: Optional[Dict[str, AttendanceStats]] = None

    @property
    def latest(self) -> Optional[Dict[str, AttendanceStats]]:
        return self._latest

    async def run(self, student_ids: Iterable[str], *, today: Optional[date] = None) -> Dict[str, AttendanceStats]:
        self._generation += 1
        generation = self._generation

        ids = list(dict.fromkeys(student_ids))
        results: Dict[str, AttendanceStats] = {}

        for i in range(0, len(ids), self._batch_size):
            batch = ids[i : i + self._batch_size]
            stats = await asyncio.gather(
                *(asyncio.to_thread(self._stats.student_stats, sid, today=today) for sid in batch)
            )
            results.update(zip(batch, stats))
            logger.debug("stats batch %d done (%d/%d)", i // self._batch_size + 1, len(results), len(ids))

            if i + self._batch_size < len(ids):
                await asyncio.sleep(self._delay)

        if generation == self._generation:
            self._latest = results
        else:
            logger.debug("stats run %d superseded by %d; result not published", generation, self._generation)
        return results
