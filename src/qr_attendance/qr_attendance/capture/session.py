from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.outcome import message_for, state_for_error
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.enums import ScanState
from ..core.exceptions import CameraPermissionError, DomainError, InvalidTransitionError

if TYPE_CHECKING:
    from .scanner import FrameScanLoop

logger = logging.getLogger(__name__)

Listener = Callable[[ScanState, ScanState], None]

_TERMINAL = tuple(s for s in ScanState if s.is_terminal)


@dataclass(frozen=True)
class _Verdict:
    state: ScanState
    record: Optional[AttendanceRecord] = None
    error: Optional[Exception] = None


class ScanSession:
    """Student-side capture flow for one class.

    idle -> scanning -> verifying -> one terminal state; terminal states go
    back to idle only through retry(). Camera denial lands in
    PERMISSION_DENIED and is never retried automatically.
    """

    def __init__(
        self,
        service: AttendanceService,
        *,
        student_id: str,
        class_id: str,
        device_fingerprint: str = "",
        clock: Callable[[], datetime] = now_local,
    ):
        self._service = service
        self._student_id = student_id
        self._class_id = class_id
        self._device_fingerprint = device_fingerprint
        self._clock = clock

        self._state = ScanState.IDLE
        self._blocked: Optional[ScanState] = None
        self._last_error: Optional[Exception] = None
        self._record: Optional[AttendanceRecord] = None
        self._listeners: List[Listener] = []

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def class_id(self) -> str:
        return self._class_id

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def record(self) -> Optional[AttendanceRecord]:
        return self._record

    @property
    def message(self) -> str:
        return message_for(self._state)

    @property
    def can_start(self) -> bool:
        """Idle and the last idle check did not find the class out of session."""
        return self._state is ScanState.IDLE and self._blocked is None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def start_scan(self) -> None:
        self._transition(ScanState.SCANNING, allowed_from=(ScanState.IDLE,))

    def cancel_scan(self) -> None:
        self._transition(ScanState.IDLE, allowed_from=(ScanState.SCANNING,))

    def submit_payload(self, raw: str) -> ScanState:
        """Verify a decoded payload; must be called while scanning."""

        self._transition(ScanState.VERIFYING, allowed_from=(ScanState.SCANNING,))
        return self._finish(self._verify(raw))

    def submit_manual_code(self, code: str) -> ScanState:
        self.start_scan()
        return self.submit_payload(code)

    async def scan(self, loop: "FrameScanLoop") -> ScanState:
        """Run a camera loop and verify what it decodes.

        Verification runs in a worker thread. A loop cancelled before
        decoding returns the session to idle.
        """

        self.start_scan()
        try:
            data = await loop.run()
        except CameraPermissionError as e:
            self._last_error = e
            self._transition(ScanState.PERMISSION_DENIED, allowed_from=(ScanState.SCANNING,))
            return self._state
        except Exception as e:
            logger.exception("camera loop failed for class %s", self._class_id)
            self._last_error = e
            self._transition(ScanState.FAILURE, allowed_from=(ScanState.SCANNING,))
            return self._state

        if data is None:
            self.cancel_scan()
            return self._state

        self._transition(ScanState.VERIFYING, allowed_from=(ScanState.SCANNING,))
        return self._finish(await asyncio.to_thread(self._verify, data))

    def retry(self) -> None:
        self._transition(ScanState.IDLE, allowed_from=_TERMINAL)
        self._last_error = None
        self._blocked = None

    def check_preconditions(self) -> Optional[ScanState]:
        """Query schedule window and existing record without touching state."""

        return self._service.check_preconditions(
            student_id=self._student_id,
            class_id=self._class_id,
            now=self._clock(),
        )

    def apply_preconditions(self, found: Optional[ScanState]) -> Optional[ScanState]:
        """Act on a check_preconditions() result; ignored unless idle."""

        if self._state is not ScanState.IDLE:
            return None

        if found is ScanState.ALREADY_MARKED:
            self._blocked = None
            self._transition(ScanState.ALREADY_MARKED, allowed_from=(ScanState.IDLE,))
        else:
            self._blocked = found
        return found

    def recheck_preconditions(self) -> Optional[ScanState]:
        if self._state is not ScanState.IDLE:
            return None
        return self.apply_preconditions(self.check_preconditions())

    def _verify(self, raw: str) -> _Verdict:
        try:
            record = self._service.mark_attendance(
                student_id=self._student_id,
                target_class_id=self._class_id,
                code=raw,
                device_fingerprint=self._device_fingerprint,
                now=self._clock(),
            )
        except DomainError as e:
            return _Verdict(state_for_error(e), error=e)
        except Exception as e:
            logger.exception("unexpected error while marking attendance for class %s", self._class_id)
            return _Verdict(ScanState.FAILURE, error=e)
        return _Verdict(ScanState.SUCCESS, record=record)

    def _finish(self, verdict: _Verdict) -> ScanState:
        self._last_error = verdict.error
        if verdict.record is not None:
            self._record = verdict.record
        self._transition(verdict.state, allowed_from=(ScanState.VERIFYING,))
        logger.info("scan outcome class=%s student=%s state=%s", self._class_id, self._student_id, verdict.state.value)
        return verdict.state

    def _transition(self, new: ScanState, *, allowed_from: Iterable[ScanState]) -> None:
        allowed = tuple(allowed_from)
        if self._state not in allowed:
            raise InvalidTransitionError(f"Cannot go from {self._state.value} to {new.value}")

        old = self._state
        self._state = new
        for listener in list(self._listeners):
            listener(old, new)
