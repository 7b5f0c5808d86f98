"""Real-time step detection module."""

import logging
import math
from typing import Optional

from .config import PedometerConfig
from .models import StepEvent


logger = logging.getLogger(__name__)


class StepDetector:
    """
    Two-state step detector driven by filtered gyro, acceleration and pressure.

    A step starts (Down -> Up) only when rotation rate, acceleration and the
    pressure change all cross their thresholds together and enough time has
    passed since the previous step. Shaking the device without walking
    moves the first two but not the pressure estimate, so it is not counted.
    The cycle ends (Up -> Down) when the rotation rate falls back below its
    threshold.
    """

    def __init__(self, config: PedometerConfig):
        """
        Initialize the step detector.

        Args:
            config: Session configuration (thresholds in rad/s, m/s^2, ms, hPa)
        """
        self.config = config
        self.is_step_up = False
        self.last_step_timestamp: Optional[float] = None
        self.step_count = 0

    def process(
        self,
        gyro: float,
        acc: float,
        pressure: float,
        previous_pressure: Optional[float],
        timestamp: float,
    ) -> Optional[StepEvent]:
        """
        Advance the state machine by one sample.

        Args:
            gyro: Filtered rotation-rate magnitude
            acc: Filtered acceleration magnitude
            pressure: Filtered pressure estimate
            previous_pressure: Filtered pressure estimate of the previous sample
            timestamp: Sample timestamp (ms)

        Returns:
            A StepEvent when a new step is accepted, otherwise None
        """
        if not self.is_step_up:
            elapsed = self._time_since_last_step(timestamp)
            if (
                gyro > self.config.gyro_threshold
                and acc > self.config.acc_threshold
                and self._is_time_threshold_met(elapsed)
                and self._is_cadence_reasonable(elapsed)
                and self._is_pressure_change_significant(pressure, previous_pressure)
            ):
                return self._accept_step(gyro, acc, pressure, timestamp)
        elif gyro < self.config.gyro_threshold:
            self.is_step_up = False
            logger.debug("Step cycle closed at %.0f ms (gyro %.3f)", timestamp, gyro)

        return None

    def _accept_step(self, gyro: float, acc: float, pressure: float, timestamp: float) -> StepEvent:
        interval = None
        if self.last_step_timestamp is not None:
            interval = timestamp - self.last_step_timestamp

        self.is_step_up = True
        self.last_step_timestamp = timestamp
        self.step_count += 1

        return StepEvent(
            timestamp=timestamp,
            step_number=self.step_count,
            gyro=gyro,
            acc=acc,
            pressure=pressure,
            interval=interval,
        )

    def _time_since_last_step(self, timestamp: float) -> float:
        """Elapsed ms since the last accepted step (inf before the first one)."""
        if self.last_step_timestamp is None:
            return math.inf
        return timestamp - self.last_step_timestamp

    def _is_time_threshold_met(self, elapsed: float) -> bool:
        return elapsed > self.config.time_threshold

    def _is_cadence_reasonable(self, elapsed: float) -> bool:
        """Reject intervals implying a step rate above max_step_frequency."""
        if elapsed <= 0:
            return False
        return 1000.0 / elapsed < self.config.max_step_frequency

    def _is_pressure_change_significant(
        self, pressure: float, previous_pressure: Optional[float]
    ) -> bool:
        if previous_pressure is None:
            return False
        return abs(pressure - previous_pressure) > self.config.pressure_threshold
