from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..core.constants import DEFAULT_FRAME_INTERVAL_SECONDS

if TYPE_CHECKING:
    from .camera import FrameSource

logger = logging.getLogger(__name__)

Decoder = Callable[[Any], Optional[str]]


class FrameScanLoop:
    """One-shot camera decode loop.

    Opening, reading and decoding run in worker threads; each iteration
    yields to the event loop once. The frame source is held only while run()
    is active and is closed on every exit path.
    """

    def __init__(
        self,
        source: "FrameSource",
        *,
        decoder: Decoder,
        frame_interval: float = DEFAULT_FRAME_INTERVAL_SECONDS,
        max_frames: Optional[int] = None,
    ):
        self._source = source
        self._decoder = decoder
        self._frame_interval = float(frame_interval)
        self._max_frames = max_frames
        self._cancelled = False
        self._running = False
        self.frames_read = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    async def run(self) -> Optional[str]:
        """Decoded text, or None when cancelled / out of frames."""

        if self._cancelled:
            return None

        self._running = True
        try:
            await asyncio.to_thread(self._source.open)
            while not self._cancelled:
                frame = await asyncio.to_thread(self._source.read)
                self.frames_read += 1
                if frame is not None and not self._cancelled:
                    data = await asyncio.to_thread(self._decoder, frame)
                    if data:
                        logger.debug("code decoded after %d frames", self.frames_read)
                        return data

                if self._max_frames is not None and self.frames_read >= self._max_frames:
                    return None

                await asyncio.sleep(self._frame_interval)
            return None
        finally:
            self._running = False
            self._source.close()
