"""Common test fixtures for trackorb_system tests."""

import base64
from datetime import datetime

import pytest

from trackorb_system.coordinator.clock import SessionClock
from trackorb_system.models import Sample
from trackorb_system.storage.artifact_store import ArtifactStore


def make_sample(timestamp=0.0, yaw=0.0, pitch=0.0, roll=0.0,
                accel=(0.0, 0.0, 0.0), gyro=(0.0, 0.0, 0.0)) -> Sample:
    """Build a Sample without spelling out all 10 fields."""
    return Sample(timestamp, yaw, pitch, roll, *accel, *gyro)


def encode_record(values) -> bytes:
    """Base64 payload for a record, as the ball sends it."""
    text = ','.join(str(v) for v in values)
    return base64.b64encode(text.encode('ascii'))


class FixedTime:
    """Callable time source that always returns the same instant."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def __call__(self) -> datetime:
        return self.instant


@pytest.fixture
def store(tmp_path):
    """Artifact store in a per-test temporary directory."""
    return ArtifactStore(tmp_path / 'data')


@pytest.fixture
def fixed_clock():
    """Session clock frozen at 2025-03-01 14:05:09."""
    return SessionClock(now=FixedTime(datetime(2025, 3, 1, 14, 5, 9, 123456)))


@pytest.fixture
def sample_factory():
    return make_sample


@pytest.fixture
def stored_session(store):
    """A raw artifact with three moving samples."""
    name = 'imu_data_2025-03-01_14-05-09'
    store.write_raw(name, [
        make_sample(0.0, yaw=1.0, accel=(1.0, 0.0, 0.0), gyro=(1.0, 0.0, 0.0)),
        make_sample(1.0, yaw=1.0, accel=(2.0, 0.0, 0.0), gyro=(0.0, 2.0, 0.0)),
        make_sample(2.0, yaw=1.0, accel=(3.0, 0.0, 0.0), gyro=(0.0, 0.0, 3.0)),
    ])
    return name
