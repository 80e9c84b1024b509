import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

@dataclass
class Session:
    session_id: str
    user_id: str
    created_at: datetime
    last_access: datetime

class SessionStore:
    """In-memory login sessions with idle-time eviction.

    A session expires once ``ttl`` has passed since its last access.
    Expired sessions are invisible to ``get`` and removed by ``purge_expired``.
    """

    def __init__(self, ttl: timedelta = timedelta(hours=24),
                 clock: Optional[Callable[[], datetime]] = None):
        self.ttl = ttl
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, user_id: str) -> str:
        now = self.clock()
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = Session(session_id, user_id, now, now)
        return session_id

    def _expired(self, session: Session, now: datetime) -> bool:
        return now - session.last_access > self.ttl

    def get(self, session_id: str) -> Optional[Session]:
        """Live session for the id; refreshes its last access"""
        session = self._sessions.get(session_id)
        if session is None:
            return None

        now = self.clock()
        if self._expired(session, now):
            del self._sessions[session_id]
            return None

        session.last_access = now
        return session

    def destroy(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        now = self.clock()
        expired = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)
