"""
TrackOrb System - Processing Pipeline
======================================
Central module that turns stored raw recordings into processed artifacts.

Usage:
    store = ArtifactStore('data')
    pipeline = ProcessingPipeline(store)
    result = pipeline.process_session('imu_data_2025-03-01_14-05-09')
    if result.ok:
        show(result.summary)

Stages per session (synchronous, one batch pass each):
    read raw -> calibrate -> condition -> kinematics + spin -> merge
    -> aggregate -> write conditioned -> write calculated

Failure policy:
    Any read or write failure, including an invalid name, aborts that
    session only and is returned as a failed ProcessingResult naming the
    session and the stage. Nothing is raised to the caller. Any previous
    calculated artifact is removed before the derived artifacts are
    rewritten, so a failed run leaves the session 'stopped' and
    process_pending() picks it up again.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .errors import ArtifactNotFound, TrackOrbError, WriteFailure
from .models import Session, SessionSummary, STATE_PROCESSED
from .sensors.orb.config import OrbConfig
from .sensors.orb.metrics import summarize
from .sensors.orb.processor import OrbProcessor
from .storage.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Stage labels reported in failed results
# ---------------------------------------------------------------------------
STAGE_READ_RAW = 'read_raw'
STAGE_PROCESS = 'process'
STAGE_WRITE_CONDITIONED = 'write_conditioned'
STAGE_WRITE_CALCULATED = 'write_calculated'


@dataclass
class ProcessingResult:
    """Outcome of processing one session."""
    session_name: str
    ok: bool
    summary: SessionSummary = field(default_factory=SessionSummary.no_data)
    stage: Optional[str] = None
    error: Optional[TrackOrbError] = None
    raw_count: int = 0
    invalid_time_deltas: int = 0

    def __repr__(self):
        if self.ok:
            return f"<ProcessingResult({self.session_name}, ok, points={self.summary.data_points})>"
        return f"<ProcessingResult({self.session_name}, failed at {self.stage}: {self.error})>"


class ProcessingPipeline:
    """
    Owns offline processing of TrackOrb sessions.

    Responsibilities:
      - Read a raw artifact and run the OrbProcessor over it
      - Persist the conditioned and calculated artifacts
      - Report every outcome as a ProcessingResult
      - Find and process sessions that have no calculated artifact yet
    """

    def __init__(self, store: ArtifactStore, config: Optional[OrbConfig] = None):
        """
        Args:
            store  : Artifact store holding the raw recordings
            config : Processing parameters (calibration window, alpha, damping)
        """
        self.store = store
        self.config = config if config else OrbConfig()
        self.processor = OrbProcessor(self.config)

        logger.info(f"ProcessingPipeline created for {store.root_dir}")

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def process_session(self, session: Union[Session, str]) -> ProcessingResult:
        """
        Process one stored session end to end.

        Args:
            session: A stopped Session or its raw artifact name. A Session
                     object is marked 'processed' on success.

        Returns:
            ProcessingResult; never raises for missing or unwritable artifacts
        """
        name = session.name if isinstance(session, Session) else session
        logger.info(f"Processing session {name}")

        if not self.store.is_session_name(name):
            return self._handle_failure(name, STAGE_READ_RAW, ArtifactNotFound(name, STAGE_READ_RAW))

        stage = STAGE_READ_RAW
        try:
            raw = self.store.read_raw(name)
            if not raw:
                logger.warning(f"⚠ {name} has no decodable samples")

            stage = STAGE_PROCESS
            processed = self.processor.process(raw)

            stage = STAGE_WRITE_CONDITIONED
            # Until the new calculated artifact is published the session must read as pending
            self.store.discard_calculated(name)
            self.store.write_conditioned(name, processed.conditioned)

            stage = STAGE_WRITE_CALCULATED
            self.store.write_calculated(name, processed.calculated)

        except (ArtifactNotFound, WriteFailure) as e:
            return self._handle_failure(name, stage, e)

        if isinstance(session, Session):
            session.state = STATE_PROCESSED

        logger.info(f"✓ {name} processed ({len(raw)} samples)")
        return ProcessingResult(
            session_name=name,
            ok=True,
            summary=processed.summary,
            raw_count=len(raw),
            invalid_time_deltas=len(processed.invalid_deltas),
        )

    def process_pending(self) -> List[ProcessingResult]:
        """
        Process every stored session that has no calculated artifact.

        Returns:
            One ProcessingResult per session attempted, in name order
        """
        pending = [s.name for s in self.store.list_sessions() if not s.has_calculated]
        logger.info(f"{len(pending)} sessions pending processing")

        results = [self.process_session(name) for name in pending]

        failed = [r.session_name for r in results if not r.ok]
        logger.info(
            f"Pending run finished. processed: {len(results) - len(failed)} | "
            f"failed: {failed or 'none'}"
        )
        return results

    def summarize_session(self, session_name: str) -> SessionSummary:
        """
        Recompute the summary of an already processed session.

        Raises:
            ArtifactNotFound if the session has no calculated artifact
        """
        return summarize(self.store.read_calculated(session_name))

    def get_status(self) -> dict:
        """
        Return a summary of stored sessions for logging / UI display.
        """
        listings = self.store.list_sessions()
        return {
            'data_dir'  : str(self.store.root_dir),
            'sessions'  : len(listings),
            'processed' : sum(1 for s in listings if s.has_calculated),
            'pending'   : [s.name for s in listings if not s.has_calculated],
        }

    # -----------------------------------------------------------------------
    # Private: failure handling
    # -----------------------------------------------------------------------

    def _handle_failure(self, name: str, stage: str, exc: TrackOrbError) -> ProcessingResult:
        """
        Log a failed run and turn it into a result.
        The session stays 'stopped' since it has no calculated artifact.
        """
        logger.warning(
            f"⚠ {name} failed at {stage}, skipping. "
            f"Error: {exc}"
        )
        return ProcessingResult(session_name=name, ok=False, stage=stage, error=exc)

    def __repr__(self):
        return f"<ProcessingPipeline(store={self.store.root_dir})>"
