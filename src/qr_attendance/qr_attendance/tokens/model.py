from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SessionToken:
    """Short-lived value authorizing attendance for one class.

    Replaced as a whole on regeneration; never mutated in place.
    """

    value: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class ScanPayload:
    """What a scanned QR code or a typed code decodes to."""

    class_id: str
    token: str
