from __future__ import annotations

import math
from fractions import Fraction

from ..model import RateSummary
from .base import RateCalculator


def round_half_up(value: Fraction) -> int:
    return int(math.floor(value + Fraction(1, 2)))


class CappedRateCalculator(RateCalculator):
    """total = max(expected, attended), so the rate never exceeds 100.

    Expected counts can fall short of real sessions when a class's weekly
    rules were edited after the fact; attended records then win.
    """

    def summarize(self, *, expected: int, attended: int) -> RateSummary:
        expected = max(int(expected), 0)
        attended = max(int(attended), 0)

        total = max(expected, attended)
        missed = max(0, total - attended)
        rate = round_half_up(Fraction(attended * 100, total)) if total > 0 else 0
        return RateSummary(total=total, attended=attended, missed=missed, rate=rate)
