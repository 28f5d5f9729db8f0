"""
TrackOrb Session Recorder
Accumulates decoded samples for one recording session
"""

import logging
import threading
from typing import List, Optional, TYPE_CHECKING

from ...errors import NotRecording, RecorderBusy, WriteFailure
from ...models import Sample, Session, STATE_RECORDING, STATE_STOPPED

if TYPE_CHECKING:
    from ...coordinator.clock import SessionClock
    from ...storage.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)


class SessionRecorder:
    """
    Session recorder - owned, append-only sample buffer

    Lifecycle: begin() -> append()* -> end(). Samples are kept in arrival
    order; nothing is re-sorted by timestamp. On end() the buffer is handed
    to the ArtifactStore as the raw artifact and cleared.
    """

    def __init__(self, store: 'ArtifactStore', clock: 'SessionClock'):
        """
        Args:
            store: Artifact store that receives the raw artifact on end()
            clock: Session clock used to allocate session ids
        """
        self.store = store
        self.clock = clock

        self._lock = threading.Lock()
        self._session: Optional[Session] = None
        self._buffer: List[Sample] = []

        self.sessions_recorded = 0

    @property
    def is_recording(self) -> bool:
        with self._lock:
            return self._session is not None

    @property
    def current_session(self) -> Optional[Session]:
        with self._lock:
            return self._session

    def begin(self) -> Session:
        """
        Allocate a fresh session and start recording

        Returns:
            The new Session in state 'recording'

        Raises:
            RecorderBusy if a session is already recording
        """
        with self._lock:
            if self._session is not None:
                raise RecorderBusy(f"Session {self._session.session_id} is still recording")

            session_id, created_at = self.clock.new_session_id()
            session = Session(session_id=session_id, created_at=created_at)
            self._session = session
            self._buffer = []

        logger.info(f"✓ Recording started: {session.name}")
        return session

    def append(self, sample: Sample):
        """
        Append one sample to the active session

        Raises:
            NotRecording if no session is active (the sample is discarded)
        """
        with self._lock:
            if self._session is None:
                raise NotRecording("append() called with no active session")
            self._buffer.append(sample)

    def end(self) -> Session:
        """
        Stop recording and persist the raw artifact

        An empty session still produces a header-only raw artifact.

        Returns:
            The Session in state 'stopped' with its samples frozen

        Raises:
            NotRecording if no session is active
            WriteFailure if the raw artifact could not be written; the
            session is still stopped and the buffer cleared, and the
            error's `session` carries the samples for a retry
        """
        with self._lock:
            if self._session is None:
                raise NotRecording("end() called with no active session")
            session = self._session
            session.samples = tuple(self._buffer)
            session.state = STATE_STOPPED
            self._session = None
            self._buffer = []

        logger.info(f"Recording stopped: {session.name} ({session.sample_count} samples)")

        try:
            self.store.write_raw(session.name, session.samples)
        except WriteFailure as e:
            logger.error(f"✗ Could not persist raw artifact for {session.name}: {e}")
            e.session = session
            raise

        self.sessions_recorded += 1
        logger.info(f"✓ Raw artifact written: {session.name}")
        return session

    def snapshot(self) -> List[Sample]:
        """Copy of the in-progress sequence (empty when not recording)."""
        with self._lock:
            return list(self._buffer)

    def get_status(self) -> dict:
        """
        Return the current recorder state.

        Returns:
            Dict with state, active session name and buffered sample count.
        """
        with self._lock:
            return {
                'state': STATE_RECORDING if self._session else 'idle',
                'session': self._session.name if self._session else None,
                'buffered_samples': len(self._buffer),
                'sessions_recorded': self.sessions_recorded,
            }

    def __repr__(self):
        status = "recording" if self.is_recording else "idle"
        return f"<SessionRecorder(status={status})>"
