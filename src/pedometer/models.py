"""Data models for sensor samples, step events and pedestrian metrics."""

import math
from dataclasses import dataclass
from typing import Optional, Tuple


Vector3 = Tuple[float, float, float]


def _is_complete_vector(vector: Optional[Vector3]) -> bool:
    if vector is None or len(vector) != 3:
        return False
    try:
        return all(math.isfinite(c) for c in vector)
    except TypeError:
        return False


@dataclass(frozen=True)
class SensorSample:
    """Single motion sample with timestamp and the three sensor vectors."""
    timestamp: float  # ms, monotonic clock
    rotation_rate: Optional[Vector3] = None  # rad/s
    acceleration: Optional[Vector3] = None  # m/s^2, gravity removed
    acceleration_including_gravity: Optional[Vector3] = None  # m/s^2

    @property
    def is_complete(self) -> bool:
        """True when every vector is present and finite."""
        if self.timestamp is None or not math.isfinite(self.timestamp):
            return False
        return (
            _is_complete_vector(self.rotation_rate)
            and _is_complete_vector(self.acceleration)
            and _is_complete_vector(self.acceleration_including_gravity)
        )


@dataclass(frozen=True)
class StepEvent:
    """One detected step."""
    timestamp: float  # ms
    step_number: int
    gyro: float  # filtered rotation-rate magnitude
    acc: float  # filtered acceleration magnitude
    pressure: float  # filtered pressure estimate (hPa)
    interval: Optional[float] = None  # ms since previous step


@dataclass(frozen=True)
class PedestrianMetrics:
    """Snapshot of the accumulated session metrics."""
    steps: int = 0
    distance: float = 0.0  # m
    elevation_gain: float = 0.0  # m
    speed: float = 0.0  # m/s
    calories: float = 0.0
    cadence: int = 0  # steps in the trailing cadence window
    stride: float = 0.0  # m, stride applied to the latest step
