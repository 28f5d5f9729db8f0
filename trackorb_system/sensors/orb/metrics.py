"""
TrackOrb Metrics Aggregator
Reduces a calculated sequence to session summary statistics
"""

import logging
from typing import Dict, Sequence

import numpy as np

from ...models import CalculatedSample, SessionSummary, SPIN_UNKNOWN

logger = logging.getLogger(__name__)


def dominant_direction(directions: Sequence[str]) -> str:
    """
    Most frequent spin direction

    Single left-to-right pass; on equal counts the label that reached the
    highest count first is kept.
    """
    counts: Dict[str, int] = {}
    dominant = SPIN_UNKNOWN
    best = 0
    for direction in directions:
        counts[direction] = counts.get(direction, 0) + 1
        if counts[direction] > best:
            best = counts[direction]
            dominant = direction
    return dominant


def summarize(calculated: Sequence[CalculatedSample]) -> SessionSummary:
    """
    Compute session statistics

    Args:
        calculated: Fully processed samples in order

    Returns:
        SessionSummary, or SessionSummary.no_data() for an empty sequence
    """
    if len(calculated) == 0:
        logger.info("No calculated samples, returning empty summary")
        return SessionSummary.no_data()

    speeds = np.array([p.speed for p in calculated])
    spin_rates = np.array([p.spin_rate for p in calculated])
    total_accel = np.array([p.total_acceleration for p in calculated])
    gyro = np.array([(p.gyro_x, p.gyro_y, p.gyro_z) for p in calculated])

    return SessionSummary(
        data_points=len(calculated),
        max_speed=float(np.max(speeds)),
        avg_speed=float(np.mean(speeds)),
        # Distance is cumulative, so the last value is the total
        total_distance=float(calculated[-1].total_distance),
        max_spin_rate=float(np.max(spin_rates)),
        avg_spin_rate=float(np.mean(spin_rates)),
        dominant_spin_direction=dominant_direction([p.spin_direction for p in calculated]),
        max_total_acceleration=float(np.max(total_accel)),
        max_gyro_magnitude=float(np.max(np.linalg.norm(gyro, axis=1))),
    )
