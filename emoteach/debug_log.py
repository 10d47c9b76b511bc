"""
Per-session debug log
=====================
A single loguru sink shared by every browser session of the app. Records are
appended to the rolling buffer of the session that logged them, found through
a caller-supplied ``session_id()`` lookup. Records with no known session are
dropped from the panels (stderr still has them).
"""

from __future__ import annotations

import weakref
from collections import deque
from typing import Callable, Hashable, Optional

from loguru import logger

DEBUG_LOG_LINES = 5


class SessionLogRouter:
    def __init__(self, session_id: Callable[[], Optional[Hashable]],
                 maxlen: int = DEBUG_LOG_LINES):
        self.session_id = session_id
        self.maxlen = maxlen
        # buffers live in session state; a closed session's entry goes with it
        self._buffers: "weakref.WeakValueDictionary[Hashable, deque]" = weakref.WeakValueDictionary()
        self.handler_id: Optional[int] = None

    def buffer_for(self, session_id: Hashable) -> deque:
        """Return the buffer for a session, creating it on first use.

        The caller must hold a reference to the returned deque.
        """
        buffer = self._buffers.get(session_id)
        if buffer is None:
            buffer = deque(maxlen=self.maxlen)
            self._buffers[session_id] = buffer
        return buffer

    def __call__(self, message) -> None:
        key = self.session_id()
        buffer = self._buffers.get(key) if key is not None else None
        if buffer is not None:
            buffer.append(message.record["message"])

    def install(self, level: str = "INFO") -> "SessionLogRouter":
        if self.handler_id is None:
            self.handler_id = logger.add(self, level=level, format="{message}")
        return self

    def remove(self) -> None:
        if self.handler_id is not None:
            logger.remove(self.handler_id)
            self.handler_id = None
