"""Configuration settings for the pedometer pipeline."""

import math
import numbers
from pathlib import Path
from dataclasses import dataclass, fields


class ConfigurationError(ValueError):
    """Raised when a configuration value is outside its valid range."""


@dataclass(frozen=True)
class PedometerConfig:
    """
    Immutable configuration for one pedometer session.

    All values are validated on construction. Reconfiguring means building
    a new config and a new session.
    """

    height: float = 170.0  # cm, base of the stride model
    gyro_threshold: float = 1.5  # rad/s
    acc_threshold: float = 1.2  # m/s^2
    time_threshold: float = 250.0  # ms between accepted steps
    pressure_threshold: float = 0.1  # hPa
    buffer_capacity: int = 10  # samples kept per channel
    smoothing_factor: float = 0.5  # exponential filter alpha
    calories_per_meter_per_second: float = 0.1
    max_step_frequency: float = 5.0  # steps/s, anything faster is a double count
    cadence_window: float = 2000.0  # ms
    event_queue_size: int = 64  # pending events kept for events(), oldest dropped first

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"{f.name} must be finite, got {value!r}")

        if not 0.0 < self.smoothing_factor <= 1.0:
            raise ConfigurationError(
                f"smoothing_factor must be in (0, 1], got {self.smoothing_factor}"
            )
        for name in ('buffer_capacity', 'event_queue_size'):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        for name in ('height', 'max_step_frequency', 'cadence_window'):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")

        for name in (
            'gyro_threshold',
            'acc_threshold',
            'time_threshold',
            'pressure_threshold',
            'calories_per_meter_per_second',
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative, got {getattr(self, name)}")

    @property
    def height_m(self) -> float:
        """Height in metres."""
        return self.height / 100.0


@dataclass
class StreamConfig:
    """Configuration for replaying recorded sessions."""

    DATA_DIR: Path = Path("data/recordings")
    REPORT_EVERY_STEPS: int = 10  # Print progress every N steps
