"""
TrackOrb Signal Conditioner
Offset removal followed by a causal exponential low-pass filter
"""

import logging
from typing import List, Sequence

import numpy as np
from scipy import signal

from ...models import Offset, Sample, samples_to_array, array_to_samples

logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 0.1


def remove_offset(samples: Sequence[Sample], offset: Offset) -> List[Sample]:
    """
    Subtract the calibration offset from every axis

    The timestamp passes through unmodified.
    """
    data = samples_to_array(samples)
    if len(data):
        data[:, 1:] -= np.asarray(offset.as_tuple())
    return array_to_samples(data)


def low_pass(samples: Sequence[Sample], alpha: float = DEFAULT_ALPHA) -> List[Sample]:
    """
    Apply the exponential smoothing filter to every axis

    y[0] = x[0]
    y[i] = alpha * x[i] + (1 - alpha) * y[i-1]

    This is a feedback filter on its own output, run strictly in arrival
    order. It is evaluated with lfilter, seeded so the first output equals
    the first input.

    Args:
        samples: Offset-removed samples
        alpha: Smoothing factor in (0, 1]

    Returns:
        Filtered samples with timestamps untouched
    """
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")

    data = samples_to_array(samples)
    if len(data) < 2:
        return array_to_samples(data)

    decay = 1.0 - alpha
    b = [alpha]
    a = [1.0, -decay]

    axes = data[:, 1:]
    # Initial filter state carries y[0] into the first step
    zi = decay * axes[0:1, :]
    filtered, _ = signal.lfilter(b, a, axes[1:, :], axis=0, zi=zi)

    out = data.copy()
    out[1:, 1:] = filtered
    return array_to_samples(out)


def condition(samples: Sequence[Sample], offset: Offset, alpha: float = DEFAULT_ALPHA) -> List[Sample]:
    """Offset removal then low-pass filtering, in that order."""
    conditioned = low_pass(remove_offset(samples, offset), alpha)
    logger.debug(f"Conditioned {len(conditioned)} samples (alpha={alpha})")
    return conditioned
