from __future__ import annotations

from ..core.enums import ScanState
from ..core.exceptions import (
    CameraPermissionError,
    DuplicateError,
    ExpiryError,
    OutsideScheduleError,
    TransientIOError,
    ValidationError,
)

MESSAGES = {
    ScanState.SUCCESS: "Attendance marked.",
    ScanState.ALREADY_MARKED: "Your attendance is already recorded for today.",
    ScanState.WRONG_SESSION: "This code is not for this class.",
    ScanState.EXPIRED_TOKEN: "This code has expired. Ask your teacher for a new one.",
    ScanState.OUTSIDE_SCHEDULE: "You can only mark attendance during scheduled class hours.",
    ScanState.FAILURE: "Could not mark attendance. Please try again.",
    ScanState.PERMISSION_DENIED: "Camera access is required. Enable it in your settings, then retry.",
}


def state_for_error(exc: Exception) -> ScanState:
    """Terminal state for a verification error."""

    # Subclasses before their bases.
    if isinstance(exc, OutsideScheduleError):
        return ScanState.OUTSIDE_SCHEDULE
    if isinstance(exc, ExpiryError):
        return ScanState.EXPIRED_TOKEN
    if isinstance(exc, ValidationError):
        return ScanState.WRONG_SESSION
    if isinstance(exc, DuplicateError):
        return ScanState.ALREADY_MARKED
    if isinstance(exc, TransientIOError):
        return ScanState.FAILURE
    if isinstance(exc, CameraPermissionError):
        return ScanState.PERMISSION_DENIED
    return ScanState.FAILURE


def message_for(state: ScanState) -> str:
    return MESSAGES.get(state, "")
