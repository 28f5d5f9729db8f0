"""
TrackOrb Kinematic Integrator
Velocity, speed and cumulative distance from conditioned acceleration
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from ...errors import InvalidTimeDelta
from ...models import Sample, samples_to_array

logger = logging.getLogger(__name__)

DEFAULT_DAMPING = 0.9

_TIME = 0
_ACCEL = slice(4, 7)


@dataclass
class KinematicsResult:
    """Per-sample kinematics, aligned index for index with the input."""
    velocity: np.ndarray            # (N, 3)
    speed: np.ndarray               # (N,)
    total_distance: np.ndarray      # (N,)
    total_acceleration: np.ndarray  # (N,)
    invalid_deltas: List[InvalidTimeDelta] = field(default_factory=list)

    def __len__(self):
        return len(self.speed)


def integrate(samples: Sequence[Sample], damping: float = DEFAULT_DAMPING) -> KinematicsResult:
    """
    Integrate conditioned acceleration into velocity and distance

    Velocity uses damped trapezoids over acceleration; the damping factor
    multiplies the whole accumulated sum, not just the new increment:

        v[i] = damping * (v[i-1] + (a[i] + a[i-1]) / 2 * dt)

    Distance accumulates the norm of trapezoids over velocity:

        d[i] = d[i-1] + ||(v[i] + v[i-1]) / 2 * dt||

    A step with dt <= 0 is not integrated. The previous velocity and
    distance are carried forward so the output stays aligned with the
    samples, and the step is recorded as an InvalidTimeDelta.

    Args:
        samples: Conditioned samples in arrival order
        damping: Velocity bleed factor applied every valid step

    Returns:
        KinematicsResult with one entry per input sample
    """
    data = samples_to_array(samples)
    n = len(data)

    times = data[:, _TIME]
    accel = data[:, _ACCEL]

    velocity = np.zeros((n, 3))
    distance = np.zeros(n)
    invalid: List[InvalidTimeDelta] = []

    for i in range(1, n):
        dt = times[i] - times[i - 1]
        if dt <= 0:
            invalid.append(InvalidTimeDelta(i, float(dt)))
            velocity[i] = velocity[i - 1]
            distance[i] = distance[i - 1]
            continue

        velocity[i] = damping * (velocity[i - 1] + (accel[i] + accel[i - 1]) / 2 * dt)

        step = (velocity[i] + velocity[i - 1]) / 2 * dt
        distance[i] = distance[i - 1] + np.linalg.norm(step)

    if invalid:
        logger.warning(
            f"⚠ {len(invalid)} non-positive time steps carried forward "
            f"(first at sample {invalid[0].index}, dt={invalid[0].dt})"
        )

    return KinematicsResult(
        velocity=velocity,
        speed=np.linalg.norm(velocity, axis=1),
        total_distance=distance,
        total_acceleration=np.linalg.norm(accel, axis=1),
        invalid_deltas=invalid,
    )
