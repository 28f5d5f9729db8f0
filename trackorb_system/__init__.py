"""
TrackOrb System
Acquisition-to-metrics pipeline for the TrackOrb sensor ball

Components:
- Recording: RecordingCoordinator + SessionRecorder buffer BLE notifications
  into sessions and persist the raw artifact on stop
- Processing: ProcessingPipeline runs calibration, low-pass filtering,
  kinematic integration and spin analysis over a stored recording
- Storage: ArtifactStore keeps raw, conditioned and calculated CSV artifacts

Usage:
    store = ArtifactStore('data')
    coordinator = RecordingCoordinator(store)
    session = coordinator.start_session()
    coordinator.submit(payload)          # from the BLE notification callback
    session = coordinator.stop_session()

    result = ProcessingPipeline(store).process_session(session)
"""

from .coordinator import RecordingCoordinator, SessionClock
from .errors import (
    TrackOrbError,
    MalformedSample,
    NotRecording,
    RecorderBusy,
    InvalidTimeDelta,
    ArtifactNotFound,
    WriteFailure,
    LinkError,
)
from .models import (
    Sample,
    CalculatedSample,
    Offset,
    Session,
    SessionListing,
    SessionSummary,
)
from .pipeline import ProcessingPipeline, ProcessingResult
from .sensors.orb import OrbConfig, OrbProcessor, SessionRecorder
from .storage import ArtifactStore

__all__ = [
    # Recording
    'RecordingCoordinator',
    'SessionClock',
    'SessionRecorder',

    # Processing
    'ProcessingPipeline',
    'ProcessingResult',
    'OrbProcessor',
    'OrbConfig',

    # Storage
    'ArtifactStore',

    # Models
    'Sample',
    'CalculatedSample',
    'Offset',
    'Session',
    'SessionListing',
    'SessionSummary',

    # Errors
    'TrackOrbError',
    'MalformedSample',
    'NotRecording',
    'RecorderBusy',
    'InvalidTimeDelta',
    'ArtifactNotFound',
    'WriteFailure',
    'LinkError',
]

__version__ = '1.0.0'
