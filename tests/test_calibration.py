"""Tests for calibration offset estimation."""

import pytest

from trackorb_system.models import Offset
from trackorb_system.sensors.orb.calibration import estimate_offset

from tests.conftest import make_sample


def test_empty_sequence_gives_zero_offset():
    assert estimate_offset([]) == Offset.zero()


def test_mean_over_short_sequence():
    samples = [
        make_sample(0.0, yaw=1.0, accel=(2.0, 0.0, 9.0), gyro=(0.5, 0.0, 0.0)),
        make_sample(1.0, yaw=3.0, accel=(4.0, 0.0, 11.0), gyro=(1.5, 0.0, 0.0)),
    ]
    offset = estimate_offset(samples)
    assert offset.yaw == pytest.approx(2.0)
    assert offset.accel_x == pytest.approx(3.0)
    assert offset.accel_z == pytest.approx(10.0)
    assert offset.gyro_x == pytest.approx(1.0)
    assert offset.pitch == 0.0


def test_only_leading_window_counts():
    samples = [make_sample(float(i), accel=(1.0, 0.0, 0.0)) for i in range(1000)]
    samples += [make_sample(float(i), accel=(100.0, 0.0, 0.0)) for i in range(1000, 1500)]
    assert estimate_offset(samples).accel_x == pytest.approx(1.0)


def test_custom_window():
    samples = [make_sample(0.0, roll=2.0), make_sample(1.0, roll=4.0), make_sample(2.0, roll=9.0)]
    assert estimate_offset(samples, window=2).roll == pytest.approx(3.0)
