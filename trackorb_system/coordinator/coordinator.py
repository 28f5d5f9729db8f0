"""
Recording Coordinator
Message channel between the BLE link and the session recorder
"""

import logging
import queue
import threading
from typing import Optional, Union, TYPE_CHECKING

from ..errors import MalformedSample, NotRecording, RecorderBusy
from ..models import Session
from ..sensors.orb.collector import SessionRecorder
from ..sensors.orb.config import OrbConfig
from ..sensors.orb.decoder import decode_payload
from .clock import SessionClock

if TYPE_CHECKING:
    from ..storage.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)

Payload = Union[bytes, bytearray, str]


class RecordingCoordinator:
    """
    Feeds asynchronously arriving notification payloads into the recorder

    Responsibilities:
    - Accept payloads from any thread without blocking the link (submit)
    - Decode them on a single consumer thread, in arrival order
    - Drop malformed payloads without interrupting the stream
    - Stop accepting payloads when the link goes away (link_lost)
    - Drive the recorder lifecycle (start_session / stop_session)
    """

    def __init__(
            self,
            store: 'ArtifactStore',
            config: Optional[OrbConfig] = None,
            clock: Optional[SessionClock] = None
    ):
        """
        Args:
            store: Artifact store for raw artifacts
            config: TrackOrb configuration (channel size, payload encoding)
            clock: Session clock; a private one is created if omitted
        """
        self.config = config if config else OrbConfig.for_session()
        self.clock = clock if clock else SessionClock()
        self.recorder = SessionRecorder(store, self.clock)

        self.channel: queue.Queue = queue.Queue(maxsize=self.config.channel_capacity)

        # State management
        self._intake_open = False
        self._intake_lock = threading.Lock()
        self.consumer_thread: Optional[threading.Thread] = None
        self.stop_event = threading.Event()

        self._reset_counters()

        logger.info(f"Recording coordinator initialized ({self.config.payload_encoding} payloads)")

    def _reset_counters(self):
        self.received_count = 0
        self.decoded_count = 0
        self.malformed_count = 0
        self.dropped_count = 0
        self.rejected_count = 0

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def start_session(self) -> Session:
        """
        Begin a recording session and start consuming the channel

        Returns:
            The new Session in state 'recording'

        Raises:
            RecorderBusy if a session is active or the previous consumer
            thread has not finished
        """
        if self.consumer_thread and self.consumer_thread.is_alive():
            self.consumer_thread.join(timeout=self.config.drain_timeout)
            if self.consumer_thread.is_alive():
                raise RecorderBusy("Previous consumer thread is still draining the channel")
        self.consumer_thread = None

        session = self.recorder.begin()

        self._drain_stale()
        self._reset_counters()
        self.stop_event.clear()

        self.consumer_thread = threading.Thread(
            target=self._consume_loop,
            name="TrackOrb-Consumer-Thread",
            daemon=True
        )
        self.consumer_thread.start()

        with self._intake_lock:
            self._intake_open = True

        logger.info(f"✓ Session {session.name} accepting notifications")
        return session

    def submit(self, payload: Payload) -> bool:
        """
        Queue one notification payload (safe to call from any thread)

        Returns:
            True if queued; False if intake is closed or the channel is full
        """
        with self._intake_lock:
            if not self._intake_open:
                self.rejected_count += 1
                return False
            self.received_count += 1

            try:
                self.channel.put_nowait(payload)
                return True
            except queue.Full:
                self.dropped_count += 1
                logger.warning("⚠ Notification channel full, payload dropped")
                return False

    def link_lost(self):
        """
        Stop accepting payloads after a disconnect

        Payloads already queued are still consumed and remain part of the
        session when stop_session() is called.
        """
        with self._intake_lock:
            was_open = self._intake_open
            self._intake_open = False
        if was_open:
            logger.warning("⚠ Link lost, no further samples will be recorded")

    def stop_session(self) -> Session:
        """
        Close intake, drain the channel and persist the raw artifact

        Returns:
            The stopped Session

        Raises:
            NotRecording if no session is active
            WriteFailure if the raw artifact could not be written
        """
        if not self.recorder.is_recording:
            raise NotRecording("stop_session() called with no active session")

        self.link_lost()

        self.stop_event.set()
        if self.consumer_thread and self.consumer_thread.is_alive():
            self.consumer_thread.join(timeout=self.config.drain_timeout)
            if self.consumer_thread.is_alive():
                # Reference kept; start_session() waits for it before starting another
                logger.error("✗ Consumer thread did not finish draining in time")

        session = self.recorder.end()
        logger.info(
            f"✓ Session {session.name} stopped: {self.decoded_count} samples, "
            f"{self.malformed_count} malformed, {self.dropped_count} dropped"
        )
        return session

    def get_status(self) -> dict:
        """
        Return coordinator and recorder state.

        Returns:
            Dict with intake state, channel depth, counters and recorder status.
        """
        return {
            'intake_open': self._intake_open,
            'queued': self.channel.qsize(),
            'received': self.received_count,
            'decoded': self.decoded_count,
            'malformed': self.malformed_count,
            'dropped': self.dropped_count,
            'rejected': self.rejected_count,
            'clock_stats': self.clock.get_stats(),
            'recorder': self.recorder.get_status(),
        }

    # -----------------------------------------------------------------------
    # Internal methods
    # -----------------------------------------------------------------------

    def _consume_loop(self):
        """
        Main consumer loop, runs in a background thread.

        Exits once stop has been requested and the channel is empty, so
        every payload queued before stop_session() is recorded.
        """
        logger.debug("Consumer loop started")

        while True:
            try:
                payload = self.channel.get(timeout=self.config.poll_interval)
            except queue.Empty:
                if self.stop_event.is_set():
                    break
                continue

            try:
                self._handle(payload)
            finally:
                self.channel.task_done()

        logger.debug("Consumer loop stopped")

    def _handle(self, payload: Payload):
        try:
            sample = decode_payload(payload, self.config.payload_encoding)
        except MalformedSample as e:
            self.malformed_count += 1
            logger.debug(f"Dropped malformed payload: {e}")
            return

        try:
            self.recorder.append(sample)
        except NotRecording:
            self.dropped_count += 1
            logger.debug("Dropped sample decoded after recording ended")
            return

        self.decoded_count += 1

    def _drain_stale(self):
        """Discard payloads left over from a previous session."""
        stale = 0
        while True:
            try:
                self.channel.get_nowait()
            except queue.Empty:
                break
            self.channel.task_done()
            stale += 1
        if stale:
            logger.warning(f"⚠ Discarded {stale} stale payloads")

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - persist any active session"""
        if self.recorder.is_recording:
            self.stop_session()

    def __repr__(self):
        return f"<RecordingCoordinator(recording={self.recorder.is_recording})>"
