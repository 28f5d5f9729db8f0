"""
TrackOrb Sensors

Available Sensors:
- Orb: ESP32 + BNO08x ball streaming orientation, acceleration and angular
  rate over BLE

Recording is raw only; calibration, filtering and metric computation run
after the session from the stored raw artifact.
"""

from .orb import OrbLink, OrbProcessor, OrbConfig, SessionRecorder

__all__ = [
    'OrbLink',
    'OrbProcessor',
    'OrbConfig',
    'SessionRecorder',
]

__version__ = '1.0.0'
