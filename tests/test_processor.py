"""Tests for the OrbProcessor stage chain."""

import numpy as np
import pytest

from trackorb_system.models import Offset, SessionSummary, SPIN_NONE
from trackorb_system.sensors.orb.config import OrbConfig
from trackorb_system.sensors.orb.processor import OrbProcessor

from tests.conftest import make_sample


@pytest.fixture
def three_samples():
    return [make_sample(float(t), accel=(1.0, 0.0, 0.0)) for t in range(3)]


def test_uncalibrated_scenario(three_samples):
    # A zero-length calibration window keeps the offset at zero
    processed = OrbProcessor(OrbConfig(calibration_window=0)).process(three_samples)
    calculated = processed.calculated

    assert processed.offset == Offset.zero()
    assert [p.velocity_x for p in calculated] == pytest.approx([0.0, 0.9, 1.71])
    assert [p.total_distance for p in calculated] == pytest.approx([0.0, 0.45, 1.755])
    assert all(p.speed == pytest.approx(abs(p.velocity_x)) for p in calculated)
    assert [p.spin_rate for p in calculated] == [0.0, 0.0, 0.0]
    assert [p.spin_direction for p in calculated] == [SPIN_NONE] * 3

    summary = processed.summary
    assert summary.data_points == 3
    assert summary.max_speed == pytest.approx(calculated[2].speed)
    assert summary.avg_speed == pytest.approx(np.mean([p.speed for p in calculated]))
    assert summary.total_distance == pytest.approx(calculated[2].total_distance)
    assert summary.dominant_spin_direction == SPIN_NONE


def test_calibration_removes_constant_bias(three_samples):
    processed = OrbProcessor().process(three_samples)

    assert processed.offset.accel_x == pytest.approx(1.0)
    assert all(abs(s.accel_x) < 1e-12 for s in processed.conditioned)
    assert all(p.speed < 1e-12 for p in processed.calculated)


def test_output_aligned_with_input():
    raw = [make_sample(t, yaw=1.0, accel=(0.5, 0.0, 0.0)) for t in (0.0, 1.0, 1.0, 0.5, 2.0)]
    processed = OrbProcessor().process(raw)

    assert len(processed.conditioned) == len(raw)
    assert len(processed.calculated) == len(raw)
    assert [p.timestamp for p in processed.calculated] == [s.timestamp for s in raw]
    assert [d.index for d in processed.invalid_deltas] == [2, 3]


def test_empty_input():
    processed = OrbProcessor().process([])
    assert processed.conditioned == []
    assert processed.calculated == []
    assert processed.summary == SessionSummary.no_data()
