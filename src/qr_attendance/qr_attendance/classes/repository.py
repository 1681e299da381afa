from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..tokens.model import SessionToken
from .model import SchoolClass


class ClassRepository(Protocol):
    """Repository interface for classes.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def list_for_cohort(self, *, department: str, semester: str) -> Sequence[SchoolClass]:
        """Classes a student of (department, semester) is enrolled in."""

        raise NotImplementedError

    def replace_token(self, *, class_id: str, token: SessionToken) -> bool:
        """Swap the class's current token for ``token`` in one write.

        Returns False when the class does not exist.
        """

        raise NotImplementedError
