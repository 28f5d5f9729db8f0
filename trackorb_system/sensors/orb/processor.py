"""
TrackOrb Signal Processor
Offline calibration, conditioning, kinematics and spin analysis
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ...errors import InvalidTimeDelta
from ...models import CalculatedSample, Offset, Sample, SessionSummary
from . import calibration, filters, kinematics, metrics, spin
from .config import OrbConfig

logger = logging.getLogger(__name__)


@dataclass
class ProcessedSession:
    """Everything derived from one raw sequence."""
    offset: Offset
    conditioned: List[Sample]
    calculated: List[CalculatedSample]
    summary: SessionSummary
    invalid_deltas: List[InvalidTimeDelta] = field(default_factory=list)


class OrbProcessor:
    """
    Signal processing for TrackOrb recordings

    Post-session processing, one batch pass per stage:
    - Calibration offset from the leading window
    - Offset removal and exponential low-pass filtering
    - Damped trapezoidal integration to velocity and distance
    - Spin rate and direction per sample
    - Summary statistics

    Kinematics and spin both read the conditioned sequence and are merged
    per sample into CalculatedSample rows.
    """

    def __init__(self, config: Optional[OrbConfig] = None):
        """
        Initialize TrackOrb processor

        Args:
            config: TrackOrb configuration
        """
        self.config = config if config else OrbConfig()

        logger.info("TrackOrb Processor initialized")
        logger.info(f"  Calibration window: {self.config.calibration_window} samples")
        logger.info(f"  Low-pass alpha: {self.config.lowpass_alpha}, "
                    f"velocity damping: {self.config.velocity_damping}")

    def process(self, raw: Sequence[Sample]) -> ProcessedSession:
        """
        Run every processing stage over a raw sequence

        Args:
            raw: Decoded raw samples in arrival order

        Returns:
            ProcessedSession; an empty input gives empty sequences and a
            no-data summary
        """
        offset = calibration.estimate_offset(raw, self.config.calibration_window)
        conditioned = filters.condition(raw, offset, self.config.lowpass_alpha)

        motion = kinematics.integrate(conditioned, self.config.velocity_damping)
        spins = spin.analyze(conditioned)

        calculated = self._merge(conditioned, motion, spins)
        summary = metrics.summarize(calculated)

        logger.info(f"Processed {len(calculated)} samples: "
                    f"max speed={summary.max_speed:.2f}, "
                    f"distance={summary.total_distance:.2f}, "
                    f"dominant spin={summary.dominant_spin_direction}")

        return ProcessedSession(
            offset=offset,
            conditioned=conditioned,
            calculated=calculated,
            summary=summary,
            invalid_deltas=motion.invalid_deltas,
        )

    def _merge(
            self,
            conditioned: Sequence[Sample],
            motion: kinematics.KinematicsResult,
            spins: spin.SpinResult
    ) -> List[CalculatedSample]:
        """
        Combine conditioned samples with their kinematics and spin metrics

        All three inputs are index aligned; a length mismatch is a bug.
        """
        if not (len(conditioned) == len(motion) == len(spins)):
            raise RuntimeError(
                f"Stage outputs out of step: {len(conditioned)} samples, "
                f"{len(motion)} kinematics, {len(spins)} spin"
            )

        calculated = []
        for i, sample in enumerate(conditioned):
            vx, vy, vz = motion.velocity[i]
            calculated.append(CalculatedSample(
                *sample.as_tuple(),
                total_acceleration=float(motion.total_acceleration[i]),
                velocity_x=float(vx),
                velocity_y=float(vy),
                velocity_z=float(vz),
                speed=float(motion.speed[i]),
                total_distance=float(motion.total_distance[i]),
                spin_rate=spins.rates[i],
                spin_direction=spins.directions[i],
            ))
        return calculated
