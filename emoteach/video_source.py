"""
Video Source
============
Thin OpenCV capture wrapper exposing what the sampler needs:

    is_active        : bool
    current_frame()  : latest BGR frame (np.ndarray) or None
    started/stopped  : lifecycle events delivered to registered listeners

Accepts a webcam index or a path to an uploaded video file.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Protocol, Union

import cv2
import numpy as np
from loguru import logger

from config import CAMERA_INDEX, FRAME_HEIGHT, FRAME_WIDTH
from emoteach.errors import CameraUnavailableError

STARTED = "started"
STOPPED = "stopped"


class VideoSource(Protocol):
    @property
    def is_active(self) -> bool:
        ...

    def current_frame(self) -> Optional[np.ndarray]:
        ...

    def add_listener(self, event: str, callback: Callable[[], None]) -> None:
        ...


class LifecycleEvents:
    """Listener registry shared by real and fake sources."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable[[], None]]] = {STARTED: [], STOPPED: []}

    def add_listener(self, event: str, callback: Callable[[], None]) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown video source event: {event}")
        self._listeners[event].append(callback)

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            callback()


class CameraSource(LifecycleEvents):
    def __init__(self, source: Union[int, str] = CAMERA_INDEX,
                 width: int = FRAME_WIDTH, height: int = FRAME_HEIGHT):
        super().__init__()
        self.source = source
        self.width = width
        self.height = height
        self._cap: Optional[cv2.VideoCapture] = None
        self._last_frame: Optional[np.ndarray] = None

    @property
    def is_active(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def start(self) -> None:
        """Open the capture device. Raises CameraUnavailableError on failure."""
        if self.is_active:
            return
        logger.info("Starting video source {}", self.source)
        cap = cv2.VideoCapture(self.source)
        if not cap.isOpened():
            cap.release()
            logger.error("Could not open video source {}", self.source)
            raise CameraUnavailableError(f"Unable to access camera or video: {self.source}")

        if isinstance(self.source, int):
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self._cap = cap
        self._emit(STARTED)

    def current_frame(self) -> Optional[np.ndarray]:
        if not self.is_active:
            return None
        ret, frame = self._cap.read()
        if not ret:
            # end of file, or the device dropped out
            logger.info("Video source {} returned no frame, stopping", self.source)
            self.stop()
            return None
        self._last_frame = frame
        return frame

    @property
    def last_frame(self) -> Optional[np.ndarray]:
        return self._last_frame

    def stop(self) -> None:
        if self._cap is None:
            return
        logger.info("Stopping video source {}", self.source)
        self._cap.release()
        self._cap = None
        self._last_frame = None
        self._emit(STOPPED)
