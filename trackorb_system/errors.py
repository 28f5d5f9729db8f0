"""
TrackOrb Error Taxonomy

Per-record errors (MalformedSample, NotRecording, InvalidTimeDelta) are
recovered where they occur. Sequence-level errors (ArtifactNotFound,
WriteFailure) abort processing of one session and are reported back to the
caller by the ProcessingPipeline as a failed result.
"""

from typing import Optional


class TrackOrbError(Exception):
    """Base class for all errors raised by trackorb_system."""


class MalformedSample(TrackOrbError, ValueError):
    """A payload or artifact row that does not decode to exactly 10 finite numbers."""

    def __init__(self, reason: str, raw: Optional[str] = None):
        self.reason = reason
        self.raw = raw
        message = reason if raw is None else f"{reason}: {raw!r}"
        super().__init__(message)


class NotRecording(TrackOrbError):
    """append() or end() called while no session is recording."""


class RecorderBusy(TrackOrbError):
    """begin() called while a session is already recording."""


class InvalidTimeDelta(TrackOrbError):
    """
    Non-positive time step between two consecutive samples.

    Recorded by the kinematic integrator rather than raised.
    """

    def __init__(self, index: int, dt: float):
        self.index = index
        self.dt = dt
        super().__init__(f"dt={dt} at sample {index}")


class ArtifactNotFound(TrackOrbError, FileNotFoundError):
    """The requested raw artifact does not exist."""

    def __init__(self, session_name: str, stage: str = 'read_raw'):
        self.session_name = session_name
        self.stage = stage
        super().__init__(f"No raw artifact for session '{session_name}' ({stage})")


class WriteFailure(TrackOrbError, OSError):
    """
    An artifact could not be persisted; nothing partial was published.

    When the raw write of a stopped session fails, `session` holds that
    Session with its samples so the caller can retry the write.
    """

    def __init__(self, session_name: str, stage: str, reason: str, session=None):
        self.session_name = session_name
        self.stage = stage
        self.reason = reason
        self.session = session
        super().__init__(f"Failed to write {stage} artifact for '{session_name}': {reason}")


class LinkError(TrackOrbError):
    """The BLE link could not be established."""
