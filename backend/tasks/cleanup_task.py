"""
Automatic Session Cleanup Task

Periodically removes matching sessions that have been idle longer than the
configured time-to-live, releasing their reference indexes and results.
"""

import logging
from datetime import timedelta
from typing import Optional
import threading

from .session_manager import SessionManager, session_manager as default_session_manager

logger = logging.getLogger(__name__)


class SessionCleanupTask:
    """Background task for automatic session cleanup"""

    def __init__(
        self,
        manager: Optional[SessionManager] = None,
        session_ttl_hours: int = 24,
        check_interval_minutes: int = 30
    ):
        """
        Initialize cleanup task

        Args:
            manager: Session manager to clean (defaults to the global one)
            session_ttl_hours: Remove sessions idle longer than this (hours)
            check_interval_minutes: Run cleanup every N minutes
        """
        self.manager = manager or default_session_manager
        self.session_ttl_hours = session_ttl_hours
        self.check_interval_minutes = check_interval_minutes
        self.running = False
        self.thread = None
        self._stop_event = threading.Event()

    def start(self):
        """Start background cleanup task"""
        if self.running:
            logger.warning("Cleanup task already running")
            return

        self.running = True
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._run_loop, daemon=True)
        self.thread.start()
        logger.info(f"🧹 Started session cleanup task (runs every {self.check_interval_minutes}min)")

    def stop(self):
        """Stop background cleanup task"""
        self.running = False
        self._stop_event.set()
        if self.thread:
            self.thread.join(timeout=5)
        logger.info("🛑 Stopped session cleanup task")

    def _run_loop(self):
        """Main loop for periodic cleanup"""
        while self.running:
            try:
                self.cleanup()
            except Exception as e:
                logger.error(f"❌ Cleanup task error: {e}")

            if self._stop_event.wait(self.check_interval_minutes * 60):
                break

    def cleanup(self) -> dict:
        """
        Remove idle sessions

        Returns:
            Dict with cleanup statistics
        """
        removed = self.manager.expire_idle_sessions(timedelta(hours=self.session_ttl_hours))
        stats = {
            'sessions_deleted': removed,
            'sessions_remaining': len(self.manager),
        }

        if removed:
            logger.info(f"🧹 Cleanup complete: {stats}")

        return stats
