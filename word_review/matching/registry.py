from __future__ import annotations

import threading
import uuid
from collections import OrderedDict

from word_review.matching.session import MatchSession


class MatchSessionRegistry:
    """Live match sessions keyed by an opaque id, oldest evicted first."""

    def __init__(self, max_sessions: int = 256) -> None:
        self.max_sessions = max(1, max_sessions)
        self.lock = threading.RLock()
        self._sessions: OrderedDict[str, MatchSession] = OrderedDict()

    def create(self, session: MatchSession) -> str:
        session_id = uuid.uuid4().hex
        with self.lock:
            self._sessions[session_id] = session
            while len(self._sessions) > self.max_sessions:
                self._sessions.popitem(last=False)
        return session_id

    def get(self, session_id: str) -> MatchSession | None:
        with self.lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        with self.lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self.lock:
            return len(self._sessions)
