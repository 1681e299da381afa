from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import RateSummary


class RateCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance rates)."""

    @abstractmethod
    def summarize(self, *, expected: int, attended: int) -> RateSummary:
        raise NotImplementedError
