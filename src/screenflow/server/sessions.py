"""In-memory session bookkeeping for the HTTP host."""

import logging
import threading

from screenflow.engine.session import ScreenSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Holds the live sessions of one server process.

    Sessions are kept in memory only; they are lost on restart and are not
    shared between workers.
    """

    def __init__(self, max_sessions: int = 1000):
        self.max_sessions = max_sessions
        self._sessions: dict[str, ScreenSession] = {}
        self._lock = threading.Lock()

    def add(self, session: ScreenSession) -> None:
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                # Evict the oldest session (dicts keep insertion order)
                oldest = next(iter(self._sessions))
                del self._sessions[oldest]
                logger.warning(f"Session limit reached, evicted session {oldest}")
            self._sessions[session.session_id] = session
        logger.info(f"Session {session.session_id} created")

    def get(self, session_id: str) -> ScreenSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Session {session_id} removed")
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
