"""Per-session storage of the last accepted submission time."""

from threading import Lock
from typing import Dict, Optional, Protocol


class SessionStore(Protocol):
    def get_last_submission(self, session_id: str) -> Optional[float]: ...

    def record_submission(self, session_id: str, timestamp: float) -> None: ...


class InMemorySessionStore:
    """Process-local store. Each call is locked; a read followed by a write is not atomic."""

    def __init__(self):
        self._last_submission: Dict[str, float] = {}
        self._lock = Lock()

    def get_last_submission(self, session_id: str) -> Optional[float]:
        with self._lock:
            return self._last_submission.get(session_id)

    def record_submission(self, session_id: str, timestamp: float) -> None:
        with self._lock:
            self._last_submission[session_id] = timestamp
