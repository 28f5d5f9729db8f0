"""
TrackOrb Calibration Estimator
Per-axis bias from the leading window of a raw recording
"""

import logging
from typing import Sequence

import numpy as np

from ...models import Offset, Sample, samples_to_array

logger = logging.getLogger(__name__)

DEFAULT_CALIBRATION_WINDOW = 1000


def estimate_offset(samples: Sequence[Sample], window: int = DEFAULT_CALIBRATION_WINDOW) -> Offset:
    """
    Estimate the calibration offset for a raw sequence

    The ball is assumed to be at rest for the first samples of a session, so
    the mean of each axis over the first min(window, N) samples is taken as
    its bias. An empty sequence yields a zero offset so the pipeline stays
    total.

    Args:
        samples: Raw samples in arrival order
        window: Maximum number of leading samples to average

    Returns:
        Offset for the 9 non-time axes
    """
    k = min(window, len(samples))
    if k == 0:
        logger.warning("No samples to calibrate from, using zero offset")
        return Offset.zero()

    data = samples_to_array(samples[:k])
    means = np.mean(data[:, 1:], axis=0)

    offset = Offset(*(float(m) for m in means))
    logger.debug(f"Calibration offset from {k} samples: {offset}")
    return offset
