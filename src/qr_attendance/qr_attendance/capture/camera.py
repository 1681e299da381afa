from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Protocol

import cv2
from PIL import Image

from ..core.exceptions import CameraPermissionError

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """Something that yields still frames; acquired by open(), released by close()."""

    def open(self) -> None:
        raise NotImplementedError

    def read(self) -> Optional[Image.Image]:
        """Next frame, or None when no frame is ready yet."""

        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class OpenCVCamera(FrameSource):
    """Webcam frames via OpenCV, converted to RGB Pillow images."""

    def __init__(self, device: int | str = 0):
        self._device = device
        self._capture = None

    def open(self) -> None:
        capture = cv2.VideoCapture(self._device)
        if not capture.isOpened():
            capture.release()
            raise CameraPermissionError(f"Cannot open camera {self._device!r}")
        self._capture = capture
        logger.debug("camera %r opened", self._device)

    def read(self) -> Optional[Image.Image]:
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        if not ok or frame is None:
            return None
        return Image.fromarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.debug("camera %r released", self._device)


class ImageFileSource(FrameSource):
    """Frames read from image files, one per read(); used for uploads and replays."""

    def __init__(self, paths: Iterable[str | Path]):
        self._paths = [Path(p) for p in paths]
        self._pending: list[Path] = []

    def open(self) -> None:
        self._pending = list(self._paths)

    def read(self) -> Optional[Image.Image]:
        if not self._pending:
            return None
        path = self._pending.pop(0)
        with Image.open(path) as img:
            return img.convert("RGB")

    def close(self) -> None:
        self._pending = []
