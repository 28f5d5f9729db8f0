"""
TrackOrb Recording Coordinator
Turns asynchronously arriving BLE notifications into recorded sessions
"""

from .clock import SessionClock
from .coordinator import RecordingCoordinator

__all__ = [
    'SessionClock',
    'RecordingCoordinator',
]

__version__ = '1.0.0'
