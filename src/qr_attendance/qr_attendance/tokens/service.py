from __future__ import annotations

import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_TOKEN_TTL_MINUTES
from ..core.exceptions import ValidationError
from .model import SessionToken

logger = logging.getLogger(__name__)


class SessionTokenManager:
    """Issues and validates the per-class session token.

    Validity is a pure value comparison against whatever token the class
    currently stores, so a regenerate simply wins over any scan still carrying
    the previous value. No locking is involved.
    """

    def __init__(
        self,
        classes: ClassRepository,
        *,
        ttl: timedelta = timedelta(minutes=DEFAULT_TOKEN_TTL_MINUTES),
        token_factory: Callable[[], str] | None = None,
    ):
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._classes = classes
        self._ttl = ttl
        self._token_factory = token_factory or (lambda: secrets.token_urlsafe(16))

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def generate(self, class_id: str, *, now: Optional[datetime] = None) -> SessionToken:
        now = now or now_local()
        token = SessionToken(value=self._token_factory(), issued_at=now, expires_at=now + self._ttl)

        if not self._classes.replace_token(class_id=class_id, token=token):
            raise ValidationError("Class not found")

        logger.info("session token regenerated for class %s (expires %s)", class_id, token.expires_at.isoformat())
        return token

    @staticmethod
    def is_valid(school_class: SchoolClass, token: str, now: datetime) -> bool:
        current = school_class.current_token
        if current is None or not token:
            return False
        if current.is_expired(now):
            return False
        return hmac.compare_digest(current.value.encode("utf-8"), token.encode("utf-8"))

    @staticmethod
    def time_remaining(school_class: SchoolClass, now: datetime) -> timedelta:
        current = school_class.current_token
        if current is None or current.is_expired(now):
            return timedelta(0)
        return current.expires_at - now
