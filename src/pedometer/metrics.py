"""Distance, speed and calorie estimation from step events."""

from collections import deque
from dataclasses import replace
from typing import Deque, Optional

from .config import PedometerConfig
from .models import PedestrianMetrics, StepEvent


# (minimum steps per cadence window, stride as a multiple of height)
STRIDE_TABLE = (
    (8, 1.2),
    (6, 1.0),
    (5, 1 / 1.2),
    (4, 1 / 2),
    (3, 1 / 3),
    (2, 1 / 4),
)
SLOWEST_STRIDE_FACTOR = 1 / 5


def stride_factor(steps_per_window: int) -> float:
    """Stride length as a fraction of height for a cadence band."""
    for min_steps, factor in STRIDE_TABLE:
        if steps_per_window >= min_steps:
            return factor
    return SLOWEST_STRIDE_FACTOR


def stride_length(steps_per_window: int, height_m: float) -> float:
    """Stride length (m) for a cadence band and height in metres."""
    return stride_factor(steps_per_window) * height_m


class MetricsAggregator:
    """
    Turns step events into cumulative pedestrian metrics.

    Distance grows by the stride in effect when each step happened, so a
    cadence change never rewrites the distance already covered.
    """

    def __init__(self, config: PedometerConfig, start_time: Optional[float] = None):
        """
        Args:
            config: Session configuration
            start_time: Session start (ms); defaults to the first step timestamp
        """
        self.config = config
        self.start_time = start_time
        self.metrics = PedestrianMetrics()
        self._window: Deque[float] = deque()

    def cadence(self, timestamp: float) -> int:
        """Number of steps within the trailing cadence window at `timestamp`."""
        cutoff = timestamp - self.config.cadence_window
        while self._window and self._window[0] <= cutoff:
            self._window.popleft()
        return len(self._window)

    def on_step(self, event: StepEvent) -> PedestrianMetrics:
        """Apply one step event and return the new metrics snapshot."""
        if self.start_time is None:
            self.start_time = event.timestamp

        self._window.append(event.timestamp)
        steps_per_window = self.cadence(event.timestamp)
        stride = stride_length(steps_per_window, self.config.height_m)

        current = self.metrics
        distance = current.distance + stride
        speed = current.speed
        calories = current.calories

        elapsed = (event.timestamp - self.start_time) / 1000.0
        if elapsed > 0:
            speed = distance / elapsed
            calories = speed * self.config.calories_per_meter_per_second

        self.metrics = replace(
            current,
            steps=current.steps + 1,
            distance=distance,
            speed=speed,
            calories=calories,
            cadence=steps_per_window,
            stride=stride,
        )
        return self.metrics

    def set_elevation_gain(self, elevation_gain: float) -> PedestrianMetrics:
        """Record the tracker's cumulative elevation gain in the snapshot."""
        if elevation_gain > self.metrics.elevation_gain:
            self.metrics = replace(self.metrics, elevation_gain=elevation_gain)
        return self.metrics
