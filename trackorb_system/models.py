"""
TrackOrb Data Models
Sample, calibration offset, session and summary value types
"""

from dataclasses import dataclass, field, fields, asdict
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import MalformedSample


# ---------------------------------------------------------------------------
# Field order on the wire and in every artifact
# ---------------------------------------------------------------------------
SAMPLE_FIELDS = (
    'timestamp',
    'yaw', 'pitch', 'roll',
    'accel_x', 'accel_y', 'accel_z',
    'gyro_x', 'gyro_y', 'gyro_z',
)

# Axes that carry a calibration offset (everything except the timestamp)
OFFSET_AXES = SAMPLE_FIELDS[1:]

ORIENTATION_AXES = ('yaw', 'pitch', 'roll')
ACCEL_AXES = ('accel_x', 'accel_y', 'accel_z')
GYRO_AXES = ('gyro_x', 'gyro_y', 'gyro_z')

# ---------------------------------------------------------------------------
# Spin direction labels, written verbatim into calculated artifacts
# ---------------------------------------------------------------------------
SPIN_NONE = 'no-spin'
SPIN_OFF = 'Off-spin'
SPIN_LEG = 'Leg-spin'
SPIN_TOP = 'Top-spin'

SPIN_DIRECTIONS = (SPIN_NONE, SPIN_OFF, SPIN_LEG, SPIN_TOP)

# Returned as the dominant direction when there is nothing to aggregate
SPIN_UNKNOWN = 'N/A'

# ---------------------------------------------------------------------------
# Session states
# ---------------------------------------------------------------------------
STATE_RECORDING = 'recording'
STATE_STOPPED = 'stopped'
STATE_PROCESSED = 'processed'

RAW_PREFIX = 'imu_data_'


@dataclass(frozen=True)
class Sample:
    """One timestamped orientation + acceleration + angular rate reading."""
    timestamp: float
    yaw: float         # degrees
    pitch: float       # degrees
    roll: float        # degrees
    accel_x: float     # m/s²
    accel_y: float
    accel_z: float
    gyro_x: float      # angular rate, units consistent within a session
    gyro_y: float
    gyro_z: float

    @classmethod
    def from_values(cls, values: Iterable[float]) -> 'Sample':
        """
        Build a sample from 10 scalars in wire order.

        Raises:
            MalformedSample if the value count is not exactly 10.
        """
        values = tuple(values)
        if len(values) != len(SAMPLE_FIELDS):
            raise MalformedSample(
                f"expected {len(SAMPLE_FIELDS)} fields, got {len(values)}"
            )
        return cls(*(float(v) for v in values))

    def as_tuple(self) -> Tuple[float, ...]:
        return tuple(getattr(self, name) for name in SAMPLE_FIELDS)


@dataclass(frozen=True)
class CalculatedSample(Sample):
    """A conditioned sample plus its derived kinematic and spin metrics."""
    total_acceleration: float
    velocity_x: float
    velocity_y: float
    velocity_z: float
    speed: float
    total_distance: float
    spin_rate: float
    spin_direction: str


CALCULATED_FIELDS = tuple(f.name for f in fields(CalculatedSample))


@dataclass(frozen=True)
class Offset:
    """Per-axis calibration bias, computed once per raw sequence."""
    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    accel_x: float = 0.0
    accel_y: float = 0.0
    accel_z: float = 0.0
    gyro_x: float = 0.0
    gyro_y: float = 0.0
    gyro_z: float = 0.0

    @classmethod
    def zero(cls) -> 'Offset':
        return cls()

    def as_tuple(self) -> Tuple[float, ...]:
        return tuple(getattr(self, name) for name in OFFSET_AXES)


@dataclass
class Session:
    """
    One recording session.

    The sample sequence is only appended to by the SessionRecorder while
    recording; once stopped it is frozen into a tuple.
    """
    session_id: str
    created_at: datetime
    state: str = STATE_RECORDING
    samples: Tuple[Sample, ...] = field(default_factory=tuple, repr=False)

    @property
    def name(self) -> str:
        """Raw artifact name for this session."""
        return raw_name_for(self.session_id)

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def __repr__(self):
        return (
            f"<Session(name={self.name}, state={self.state}, "
            f"samples={self.sample_count})>"
        )


@dataclass(frozen=True)
class SessionListing:
    """A raw artifact found in the store and whether it has been processed."""
    name: str
    has_calculated: bool

    @property
    def state(self) -> str:
        return STATE_PROCESSED if self.has_calculated else STATE_STOPPED


@dataclass(frozen=True)
class SessionSummary:
    """Summary statistics reduced from a calculated sequence."""
    data_points: int
    max_speed: float
    avg_speed: float
    total_distance: float
    max_spin_rate: float
    avg_spin_rate: float
    dominant_spin_direction: str
    max_total_acceleration: float
    max_gyro_magnitude: float

    @classmethod
    def no_data(cls) -> 'SessionSummary':
        """The well-defined result for an empty sequence."""
        return cls(
            data_points=0,
            max_speed=0.0,
            avg_speed=0.0,
            total_distance=0.0,
            max_spin_rate=0.0,
            avg_spin_rate=0.0,
            dominant_spin_direction=SPIN_UNKNOWN,
            max_total_acceleration=0.0,
            max_gyro_magnitude=0.0,
        )

    @property
    def has_data(self) -> bool:
        return self.data_points > 0

    def as_dict(self) -> dict:
        return asdict(self)


def raw_name_for(session_id: str) -> str:
    """Map a session id to its raw artifact name."""
    return f"{RAW_PREFIX}{session_id}"


def session_id_from_name(name: str) -> Optional[str]:
    """Inverse of raw_name_for(); None if the name is not a raw artifact name."""
    if not name.startswith(RAW_PREFIX):
        return None
    return name[len(RAW_PREFIX):]


def samples_to_array(samples: Sequence[Sample]) -> np.ndarray:
    """Stack samples into an (N, 10) float array in wire order."""
    if len(samples) == 0:
        return np.zeros((0, len(SAMPLE_FIELDS)))
    return np.array([s.as_tuple() for s in samples], dtype=float)


def array_to_samples(data: np.ndarray) -> List[Sample]:
    """Inverse of samples_to_array()."""
    return [Sample(*(float(v) for v in row)) for row in data]
