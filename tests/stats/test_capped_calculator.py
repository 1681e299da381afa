from __future__ import annotations

from fractions import Fraction

import pytest

from src.qr_attendance.qr_attendance.stats.calculator.capped_calculator import CappedRateCalculator, round_half_up


@pytest.mark.parametrize(
    "expected, attended, total, missed, rate",
    [
        (4, 3, 4, 1, 75),
        (0, 0, 0, 0, 0),
        (2, 3, 3, 0, 100),
        (3, 1, 3, 2, 33),
        (3, 2, 3, 1, 67),
        (8, 1, 8, 7, 13),
    ],
)
def test_summarize(expected, attended, total, missed, rate):
    s = CappedRateCalculator().summarize(expected=expected, attended=attended)
    assert (s.total, s.attended, s.missed, s.rate) == (total, attended, missed, rate)


def test_rate_never_exceeds_hundred():
    calc = CappedRateCalculator()
    for expected in range(0, 6):
        for attended in range(0, 10):
            s = calc.summarize(expected=expected, attended=attended)
            assert 0 <= s.rate <= 100
            assert s.missed >= 0


def test_round_half_up():
    assert round_half_up(Fraction(25, 2)) == 13
    assert round_half_up(Fraction(49, 2)) == 25
    assert round_half_up(Fraction(124, 10)) == 12
