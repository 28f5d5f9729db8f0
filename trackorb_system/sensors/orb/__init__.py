"""
TrackOrb Sensor Module
10-field orientation / motion samples with spin analysis

Architecture:
- Decoder: base64 or text CSV notification payload -> Sample
- Collector: SessionRecorder, append-only buffer per recording session
- Link: bleak adapter forwarding notifications to the coordinator
- Processor: calibration, low-pass filter, kinematics, spin, summary

Post-processing capabilities:
- Calibration offset from the first 1000 samples
- Exponential low-pass filtering (alpha 0.1)
- Damped trapezoidal velocity and distance integration
- Spin rate in RPM and off/leg/top-spin classification
- Session summary statistics

Usage:
    # Post-session processing
    processor = OrbProcessor()
    processed = processor.process(store.read_raw(session_name))
    print(processed.summary)
"""

from .collector import SessionRecorder
from .config import OrbConfig
from .decoder import decode_payload, parse_record
from .link import OrbLink
from .processor import OrbProcessor, ProcessedSession

__all__ = [
    'SessionRecorder',
    'OrbConfig',
    'decode_payload',
    'parse_record',
    'OrbLink',
    'OrbProcessor',
    'ProcessedSession',
]

__version__ = '1.0.0'
