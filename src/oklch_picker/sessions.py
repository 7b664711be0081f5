from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable

from .background import BackgroundRenderer
from .result_color import ResultColorEngine

log = logging.getLogger(__name__)


@dataclass
class PickerSession:
    """One picker: its own engine and background, never shared."""

    engine: ResultColorEngine = field(default_factory=ResultColorEngine)
    background: BackgroundRenderer = field(default_factory=BackgroundRenderer)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    last_seen: float = 0.0


class SessionStore:
    """Picker sessions by id, least recently used first.

    At most `max_sessions` are kept, and a session untouched for
    `idle_seconds` is dropped on the next access. ``None`` disables a limit.
    """

    def __init__(
        self,
        max_sessions: int | None = 256,
        idle_seconds: float | None = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_sessions is not None and max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        if idle_seconds is not None and idle_seconds <= 0:
            raise ValueError("idle_seconds must be positive")
        self.max_sessions = max_sessions
        self.idle_seconds = idle_seconds
        self._clock = clock
        # reentrant so eviction can go through discard()
        self._lock = threading.RLock()
        self._sessions: OrderedDict[str, PickerSession] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def get_or_create(self, session_id: str | None) -> tuple[str, PickerSession]:
        with self._lock:
            now = self._clock()
            self._expire(now)
            if session_id and session_id in self._sessions:
                picker = self._sessions[session_id]
                picker.last_seen = now
                self._sessions.move_to_end(session_id)
                return session_id, picker
            new_id = uuid.uuid4().hex
            picker = self._sessions[new_id] = PickerSession(last_seen=now)
            self._trim()
        log.info("new picker session %s", new_id)
        return new_id, picker

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def _expire(self, now: float) -> None:
        if self.idle_seconds is None:
            return
        # oldest first, so stop at the first live one
        for sid, picker in list(self._sessions.items()):
            if now - picker.last_seen < self.idle_seconds:
                break
            log.info("picker session %s expired", sid)
            self.discard(sid)

    def _trim(self) -> None:
        if self.max_sessions is None:
            return
        while len(self._sessions) > self.max_sessions:
            sid = next(iter(self._sessions))
            log.info("picker session %s evicted", sid)
            self.discard(sid)


__all__ = ["PickerSession", "SessionStore"]
