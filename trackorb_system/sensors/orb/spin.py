"""
TrackOrb Spin Analyzer
Spin rate (RPM) and coarse spin direction per sample
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from ...models import Sample, SPIN_NONE, SPIN_OFF, SPIN_LEG, SPIN_TOP


@dataclass
class SpinResult:
    rates: List[float]
    directions: List[str]

    def __len__(self):
        return len(self.rates)


def spin_rate(gyro_x: float, gyro_y: float, gyro_z: float) -> float:
    """Angular rate vector norm converted to revolutions per minute, 2 dp."""
    rad_per_sec = math.sqrt(gyro_x * gyro_x + gyro_y * gyro_y + gyro_z * gyro_z)
    rpm = rad_per_sec * 60 / (2 * math.pi)
    return round(rpm, 2)


def spin_direction(sample: Sample) -> str:
    """
    Classify the spin of a single sample

    'no-spin' when yaw, pitch and roll are all exactly zero. Otherwise the
    gyro axis with the strictly largest magnitude wins: X is off-spin, Y is
    leg-spin. Z dominance and any tie both map to top-spin.
    """
    if sample.yaw == 0 and sample.pitch == 0 and sample.roll == 0:
        return SPIN_NONE

    gx, gy, gz = abs(sample.gyro_x), abs(sample.gyro_y), abs(sample.gyro_z)
    if gx > gy and gx > gz:
        return SPIN_OFF
    if gy > gx and gy > gz:
        return SPIN_LEG
    return SPIN_TOP


def analyze(samples: Sequence[Sample]) -> SpinResult:
    """Spin rate and direction for every sample, independently."""
    return SpinResult(
        rates=[spin_rate(s.gyro_x, s.gyro_y, s.gyro_z) for s in samples],
        directions=[spin_direction(s) for s in samples],
    )
