"""Tests for velocity and distance integration."""

import numpy as np
import pytest

from trackorb_system.errors import InvalidTimeDelta
from trackorb_system.sensors.orb.kinematics import integrate

from tests.conftest import make_sample


def constant_accel(times):
    return [make_sample(t, accel=(1.0, 0.0, 0.0)) for t in times]


def test_three_sample_scenario():
    result = integrate(constant_accel([0.0, 1.0, 2.0]))

    np.testing.assert_allclose(result.velocity[:, 0], [0.0, 0.9, 1.71])
    np.testing.assert_allclose(result.velocity[:, 1:], 0.0)
    np.testing.assert_allclose(result.speed, [0.0, 0.9, 1.71])
    np.testing.assert_allclose(result.total_distance, [0.0, 0.45, 1.755])
    np.testing.assert_allclose(result.total_acceleration, [1.0, 1.0, 1.0])
    assert result.invalid_deltas == []


def test_first_sample_is_at_rest():
    result = integrate(constant_accel([3.0]))
    assert result.speed[0] == 0.0
    assert result.total_distance[0] == 0.0


def test_empty_input():
    result = integrate([])
    assert len(result) == 0
    assert result.velocity.shape == (0, 3)


def test_zero_dt_carries_forward():
    result = integrate(constant_accel([0.0, 1.0, 1.0, 2.0]))

    assert len(result) == 4
    assert result.velocity[2, 0] == pytest.approx(result.velocity[1, 0])
    assert result.total_distance[2] == pytest.approx(result.total_distance[1])

    assert len(result.invalid_deltas) == 1
    bad = result.invalid_deltas[0]
    assert isinstance(bad, InvalidTimeDelta)
    assert bad.index == 2
    assert bad.dt == 0.0


def test_negative_dt_recorded():
    result = integrate(constant_accel([0.0, 2.0, 1.0]))
    assert [d.index for d in result.invalid_deltas] == [2]
    assert result.invalid_deltas[0].dt == pytest.approx(-1.0)
    assert np.all(np.isfinite(result.velocity))


def test_damping_bleeds_velocity_without_acceleration():
    samples = constant_accel([0.0, 1.0])
    samples += [make_sample(float(t)) for t in range(2, 40)]
    result = integrate(samples)
    # Once acceleration stops, every step multiplies velocity by the damping factor
    assert np.all(np.diff(result.speed[2:]) < 0)
    assert result.speed[-1] < 0.1 * result.speed[2]


@pytest.mark.parametrize('seed', [0, 1, 2, 3])
def test_distance_never_decreases(seed):
    rng = np.random.default_rng(seed)
    times = np.cumsum(rng.uniform(0.001, 0.1, size=300))
    accel = rng.normal(scale=3.0, size=(300, 3))
    samples = [make_sample(t, accel=tuple(a)) for t, a in zip(times, accel)]

    result = integrate(samples)

    assert np.all(np.diff(result.total_distance) >= 0)
    assert np.all(result.speed >= 0)
    np.testing.assert_allclose(result.speed, np.linalg.norm(result.velocity, axis=1))
