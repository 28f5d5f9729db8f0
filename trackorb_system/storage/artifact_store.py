"""
TrackOrb Artifact Store
CSV persistence for raw, conditioned and calculated session artifacts

Directory layout (one flat directory per store):
    data/
    ├── imu_data_2025-03-01_14-05-09.csv               raw (write-once)
    ├── processed_imu_data_2025-03-01_14-05-09.csv     conditioned
    └── calculated_imu_data_2025-03-01_14-05-09.csv    calculated

A raw artifact counts as processed iff its calculated artifact exists.
Every write goes to a temporary file in the same directory and is published
with os.replace(), so a failed write never leaves a truncated artifact under
a valid name.
"""

import contextlib
import csv
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from ..errors import ArtifactNotFound, MalformedSample, WriteFailure
from ..models import (
    CalculatedSample,
    Sample,
    SessionListing,
    RAW_PREFIX,
    SAMPLE_FIELDS,
)
from ..sensors.orb.decoder import parse_record

logger = logging.getLogger(__name__)

EXTENSION = '.csv'
CONDITIONED_PREFIX = 'processed_'
CALCULATED_PREFIX = 'calculated_'

# mkstemp creates owner-only files; published artifacts are world-readable
ARTIFACT_MODE = 0o644

STAGE_RAW = 'raw'
STAGE_CONDITIONED = 'conditioned'
STAGE_CALCULATED = 'calculated'

RAW_HEADER = [
    'timestamp', 'yaw', 'pitch', 'roll',
    'accelX', 'accelY', 'accelZ',
    'gyroX', 'gyroY', 'gyroZ',
]

CALCULATED_HEADER = RAW_HEADER + [
    'totalAcceleration',
    'velocityX', 'velocityY', 'velocityZ',
    'speed', 'totalDistance',
    'spinRate', 'spinDirection',
]

# Decimal places per column, in header order
RAW_PRECISION = (6, 4, 4, 4, 2, 2, 2, 2, 2, 2)
CALCULATED_PRECISION = RAW_PRECISION + (2, 4, 4, 4, 4, 4, 2)


def _format_sample(sample: Sample) -> List[str]:
    return [f"{value:.{places}f}" for value, places in zip(sample.as_tuple(), RAW_PRECISION)]


def _format_calculated(point: CalculatedSample) -> List[str]:
    derived = (
        point.total_acceleration,
        point.velocity_x, point.velocity_y, point.velocity_z,
        point.speed, point.total_distance,
        point.spin_rate,
    )
    row = _format_sample(point)
    row += [f"{value:.{places}f}" for value, places in zip(derived, CALCULATED_PRECISION[len(RAW_PRECISION):])]
    row.append(point.spin_direction)
    return row


class ArtifactStore:
    """
    Artifact store for TrackOrb sessions

    All methods take the raw artifact name (imu_data_<session-id>) as the
    session name. Raw artifacts are write-once; conditioned and calculated
    artifacts are replaced whole on reprocessing.

    Usage:
        store = ArtifactStore('data')
        store.write_raw(session.name, session.samples)
        samples = store.read_raw(session.name)
        ...
        for listing in store.list_sessions():
            print(listing.name, listing.state)
    """

    def __init__(self, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Artifact store at {self.root_dir}")

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def raw_path(self, session_name: str) -> Path:
        self._check_name(session_name)
        return self.root_dir / f"{session_name}{EXTENSION}"

    def conditioned_path(self, session_name: str) -> Path:
        self._check_name(session_name)
        return self.root_dir / f"{CONDITIONED_PREFIX}{session_name}{EXTENSION}"

    def calculated_path(self, session_name: str) -> Path:
        self._check_name(session_name)
        return self.root_dir / f"{CALCULATED_PREFIX}{session_name}{EXTENSION}"

    @staticmethod
    def is_session_name(session_name: str) -> bool:
        """True if the name is a well-formed raw artifact name."""
        return (session_name.startswith(RAW_PREFIX)
                and len(session_name) > len(RAW_PREFIX)
                and os.sep not in session_name
                and '/' not in session_name)

    @classmethod
    def _check_name(cls, session_name: str):
        if not cls.is_session_name(session_name):
            raise ValueError(f"Not a raw artifact name: {session_name!r}")

    # ------------------------------------------------------------------
    # Raw artifacts
    # ------------------------------------------------------------------

    def write_raw(self, session_name: str, samples: Sequence[Sample]):
        """
        Persist the raw sample sequence of a stopped session

        Raises:
            WriteFailure if the raw artifact already exists or cannot be written
        """
        path = self.raw_path(session_name)
        if path.exists():
            raise WriteFailure(session_name, STAGE_RAW, "raw artifact already exists")

        self._publish(path, RAW_HEADER, (_format_sample(s) for s in samples),
                      session_name, STAGE_RAW)
        logger.debug(f"Wrote {len(samples)} raw rows to {path.name}")

    def read_raw(self, session_name: str) -> List[Sample]:
        """
        Read a raw artifact

        Rows that do not decode to 10 finite numbers are dropped.

        Raises:
            ArtifactNotFound if no raw artifact exists for the session
        """
        path = self.raw_path(session_name)
        if not path.exists():
            raise ArtifactNotFound(session_name, 'read_raw')
        return self._read_samples(path)

    def has_raw(self, session_name: str) -> bool:
        return self.raw_path(session_name).exists()

    # ------------------------------------------------------------------
    # Derived artifacts
    # ------------------------------------------------------------------

    def write_conditioned(self, session_name: str, samples: Sequence[Sample]):
        """
        Replace the conditioned artifact of a session

        Raises:
            ArtifactNotFound if the session has no raw artifact
            WriteFailure if the artifact cannot be written
        """
        self._require_raw(session_name, 'write_conditioned')
        self._publish(self.conditioned_path(session_name), RAW_HEADER,
                      (_format_sample(s) for s in samples),
                      session_name, STAGE_CONDITIONED)

    def read_conditioned(self, session_name: str) -> List[Sample]:
        path = self.conditioned_path(session_name)
        if not path.exists():
            raise ArtifactNotFound(session_name, 'read_conditioned')
        return self._read_samples(path)

    def write_calculated(self, session_name: str, points: Sequence[CalculatedSample]):
        """
        Replace the calculated artifact of a session

        Raises:
            ArtifactNotFound if the session has no raw artifact
            WriteFailure if the artifact cannot be written
        """
        self._require_raw(session_name, 'write_calculated')
        self._publish(self.calculated_path(session_name), CALCULATED_HEADER,
                      (_format_calculated(p) for p in points),
                      session_name, STAGE_CALCULATED)

    def read_calculated(self, session_name: str) -> List[CalculatedSample]:
        """Read a calculated artifact back into CalculatedSample rows."""
        path = self.calculated_path(session_name)
        if not path.exists():
            raise ArtifactNotFound(session_name, 'read_calculated')

        points = []
        dropped = 0
        with open(path, newline='') as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for row in reader:
                if not row:
                    continue
                try:
                    points.append(self._parse_calculated(row))
                except (MalformedSample, ValueError):
                    dropped += 1
        if dropped:
            logger.warning(f"⚠ Dropped {dropped} malformed rows from {path.name}")
        return points

    def has_calculated(self, session_name: str) -> bool:
        return self.calculated_path(session_name).exists()

    def discard_calculated(self, session_name: str):
        """
        Remove the calculated artifact so the session reads as not processed

        Raises:
            WriteFailure if an existing artifact cannot be removed
        """
        path = self.calculated_path(session_name)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error(f"✗ Failed to remove {path.name}: {e}")
            raise WriteFailure(session_name, STAGE_CALCULATED, str(e)) from e
        logger.debug(f"Discarded {path.name}")

    # ------------------------------------------------------------------
    # Listing and removal
    # ------------------------------------------------------------------

    def list_sessions(self) -> List[SessionListing]:
        """
        Enumerate raw artifacts and whether each has been processed

        Returns:
            Listings sorted by name (which sorts by creation time)
        """
        listings = []
        for path in sorted(self.root_dir.glob(f"{RAW_PREFIX}*{EXTENSION}")):
            name = path.name[:-len(EXTENSION)]
            listings.append(SessionListing(name=name, has_calculated=self.has_calculated(name)))
        logger.debug(f"Found {len(listings)} sessions in {self.root_dir}")
        return listings

    def delete_session(self, session_name: str):
        """
        Remove a raw artifact together with its derived artifacts

        Derived artifacts go first so none is ever left without its raw.

        Raises:
            ArtifactNotFound if the session has no raw artifact
        """
        self._require_raw(session_name, 'delete')
        for path in (self.calculated_path(session_name),
                     self.conditioned_path(session_name),
                     self.raw_path(session_name)):
            with contextlib.suppress(FileNotFoundError):
                path.unlink()
        logger.info(f"Deleted session {session_name}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_raw(self, session_name: str, stage: str):
        if not self.has_raw(session_name):
            raise ArtifactNotFound(session_name, stage)

    def _publish(self, path: Path, header: List[str], rows: Iterable[List[str]],
                 session_name: str, stage: str):
        """Write header + rows to a temp file, then atomically move it into place."""
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix='.tmp', dir=self.root_dir
            )
            with os.fdopen(fd, 'w', newline='') as f:
                writer = csv.writer(f, lineterminator='\n')
                writer.writerow(header)
                writer.writerows(rows)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, ARTIFACT_MODE)
            os.replace(tmp_path, path)
        except (OSError, csv.Error, ValueError) as e:
            if tmp_path:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_path)
            logger.error(f"✗ Failed to write {path.name}: {e}")
            raise WriteFailure(session_name, stage, str(e)) from e

    def _read_samples(self, path: Path) -> List[Sample]:
        samples = []
        dropped = 0
        with open(path, newline='') as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for row in reader:
                if not row:
                    continue
                try:
                    samples.append(parse_record(','.join(row)))
                except MalformedSample as e:
                    dropped += 1
                    logger.debug(f"Skipping row in {path.name}: {e}")
        if dropped:
            logger.warning(f"⚠ Dropped {dropped} malformed rows from {path.name}")
        return samples

    @staticmethod
    def _parse_calculated(row: List[str]) -> CalculatedSample:
        if len(row) != len(CALCULATED_HEADER):
            raise MalformedSample(f"expected {len(CALCULATED_HEADER)} values, got {len(row)}")
        sample = parse_record(','.join(row[:len(SAMPLE_FIELDS)]))
        derived = [float(v) for v in row[len(SAMPLE_FIELDS):-1]]
        direction = row[-1].strip()
        if not direction:
            raise MalformedSample("missing spin direction")
        return CalculatedSample(*sample.as_tuple(), *derived, direction)

    def __repr__(self):
        return f"<ArtifactStore(root={self.root_dir})>"
