"""
Session Clock
Issues unique, date-time encoded session identifiers
"""

import threading
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SESSION_ID_FORMAT = '%Y-%m-%d_%H-%M-%S'


class SessionClock:
    """
    Thread-safe clock for session identity

    Guarantees for every id handed out by one clock instance:
    - Second granularity, local time, formatted as YYYY-MM-DD_HH-MM-SS
    - Strictly increasing (no duplicates within a process run), even when
      two sessions begin within the same wall-clock second
    """

    def __init__(self, now: Optional[Callable[[], datetime]] = None):
        """
        Args:
            now: Time source, defaults to datetime.now (injectable for tests)
        """
        self._now = now or datetime.now
        self._lock = threading.Lock()
        self._last_issued: Optional[datetime] = None
        self._call_count = 0

        logger.info("Session clock initialized")

    def now(self) -> datetime:
        """
        Get the creation time for a new session

        Returns:
            datetime: Current local time truncated to the second, bumped
            past the previously issued time if the clock has not advanced
        """
        with self._lock:
            current = self._now().replace(microsecond=0)

            if self._last_issued and current <= self._last_issued:
                current = self._last_issued + timedelta(seconds=1)
                logger.debug("Adjusted session time to keep ids unique")

            self._last_issued = current
            self._call_count += 1

            return current

    def new_session_id(self) -> tuple:
        """
        Allocate a fresh session id

        Returns:
            (session_id, created_at)
        """
        created_at = self.now()
        return created_at.strftime(SESSION_ID_FORMAT), created_at

    def reset(self):
        """Reset clock state (useful for testing)"""
        with self._lock:
            self._last_issued = None
            self._call_count = 0
            logger.info("Session clock reset")

    def get_stats(self) -> dict:
        with self._lock:
            return {
                'total_calls': self._call_count,
                'last_issued': self._last_issued.isoformat() if self._last_issued else None,
            }

    def __repr__(self):
        return f"<SessionClock(calls={self._call_count})>"
