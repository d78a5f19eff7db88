"""Per-session research progress tracking."""
from __future__ import annotations

import threading
import time
from typing import Protocol

from app.config import settings
from app.models.events import ProgressEvent, SessionProgress


class SessionStore(Protocol):
    def begin(self, session_id: str) -> None: ...

    def log(self, session_id: str, step: str, source: str | None = None) -> None: ...

    def complete(self, session_id: str) -> None: ...

    def get(self, session_id: str) -> SessionProgress: ...

    def discard(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """Lock-guarded map of session id to progress log.

    Sessions untouched for longer than ``ttl_seconds`` are evicted on the next
    access. A ttl of 0 keeps every session for the process lifetime.
    """

    def __init__(self, ttl_seconds: int | None = None, clock=time.monotonic):
        ttl = settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.ttl_seconds = max(int(ttl), 0)
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, SessionProgress] = {}
        self._touched: dict[str, float] = {}

    def _evict_expired(self) -> None:
        if not self.ttl_seconds:
            return
        cutoff = self._clock() - self.ttl_seconds
        for session_id in [sid for sid, seen in self._touched.items() if seen < cutoff]:
            self._sessions.pop(session_id, None)
            self._touched.pop(session_id, None)

    def begin(self, session_id: str) -> None:
        with self._lock:
            self._evict_expired()
            self._sessions[session_id] = SessionProgress()
            self._touched[session_id] = self._clock()

    def log(self, session_id: str, step: str, source: str | None = None) -> None:
        with self._lock:
            progress = self._sessions.get(session_id)
            if progress is None:
                return
            progress.events.append(ProgressEvent(step=step, source=source))
            self._touched[session_id] = self._clock()

    def complete(self, session_id: str) -> None:
        with self._lock:
            progress = self._sessions.get(session_id)
            if progress is None:
                return
            progress.complete = True
            self._touched[session_id] = self._clock()

    def get(self, session_id: str) -> SessionProgress:
        with self._lock:
            self._evict_expired()
            progress = self._sessions.get(session_id)
            if progress is None:
                return SessionProgress()
            return SessionProgress(events=list(progress.events), complete=progress.complete)

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
            self._touched.pop(session_id, None)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


_store: InMemorySessionStore | None = None


def get_session_store() -> InMemorySessionStore:
    """Get or create the process-wide session store."""
    global _store
    if _store is None:
        _store = InMemorySessionStore()
    return _store
