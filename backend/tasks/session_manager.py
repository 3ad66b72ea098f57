"""
Session Manager - In-Memory Matching Session Registry

Keeps one MatchingSession per client session id:
- Thread-safe registry
- Session creation, lookup and deletion
- Expiry of idle sessions (used by the cleanup task)
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional
import threading
import logging

from ..core.session import DEFAULT_BATCH_SIZE, MatchingSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """No session registered under the given id"""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session {self.session_id} not found"


class SessionManager:
    """
    Registry of matching sessions

    Registry access is guarded by one lock; each session carries its own
    lock for batch processing.
    """

    def __init__(self, default_batch_size: int = DEFAULT_BATCH_SIZE):
        self._sessions: Dict[str, MatchingSession] = {}
        self._lock = threading.Lock()
        self.default_batch_size = default_batch_size

    def create_session(self, batch_size: Optional[int] = None) -> MatchingSession:
        """
        Create and register a new session

        Args:
            batch_size: Optional batch size (defaults to the manager's)

        Returns:
            The new MatchingSession
        """
        session = MatchingSession(batch_size=batch_size or self.default_batch_size)

        with self._lock:
            self._sessions[session.session_id] = session

        logger.info(f"Created session {session.session_id} (batch size {session.batch_size})")
        return session

    def get_session(self, session_id: str) -> MatchingSession:
        """
        Get a session by id

        Raises:
            SessionNotFoundError: If the id is unknown
        """
        with self._lock:
            session = self._sessions.get(session_id)

        if session is None:
            raise SessionNotFoundError(session_id)

        session.touch()
        return session

    def delete_session(self, session_id: str):
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(session_id)
            del self._sessions[session_id]

        logger.info(f"Deleted session {session_id}")

    def list_sessions(self) -> List[MatchingSession]:
        with self._lock:
            return list(self._sessions.values())

    def expire_idle_sessions(self, max_idle: timedelta, now: Optional[datetime] = None) -> int:
        """
        Remove sessions not used within max_idle

        Returns:
            Number of sessions removed
        """
        cutoff = (now or datetime.now()) - max_idle

        with self._lock:
            expired = [
                session_id for session_id, session in self._sessions.items()
                if session.updated_at < cutoff
            ]
            for session_id in expired:
                del self._sessions[session_id]

        if expired:
            logger.info(f"Expired {len(expired)} idle sessions")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global session manager instance
session_manager = SessionManager()
