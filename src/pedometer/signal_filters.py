"""
Signal filtering for streaming sensor channels.

Each channel (gyro magnitude, acceleration magnitude, pressure estimate)
is smoothed with a first-order exponential low-pass filter. The filter
keeps a single running value, so every sample costs O(1) regardless of how
much history has been seen. The ring buffer next to it keeps recent raw
values for windowed statistics and diagnostics only.
"""

from typing import Optional
import numpy as np
from scipy.signal import lfilter

from .config import ConfigurationError
from .ring_buffer import RingBuffer


class ExponentialFilter:
    """
    Real-time exponential smoothing filter.

    y[n] = alpha * x[n] + (1 - alpha) * y[n-1]

    The output is seeded with the first sample instead of zero, which
    avoids a startup transient towards zero.
    """

    def __init__(self, alpha: float):
        """
        Initialize exponential filter.

        Args:
            alpha: Weight of the newest sample, 0 < alpha <= 1 (1 disables smoothing)
        """
        if not 0.0 < alpha <= 1.0:
            raise ConfigurationError(f"Smoothing factor must be in (0, 1], got {alpha}")
        self.alpha = alpha
        self.value: Optional[float] = None

        # Transfer function coefficients for batch filtering
        self._b = np.array([alpha])
        self._a = np.array([1.0, alpha - 1.0])

    def filter_sample(self, sample: float) -> float:
        """
        Filter a single sample in real-time.

        Args:
            sample: Input sample value

        Returns:
            Filtered sample value
        """
        if self.value is None:
            self.value = float(sample)
        else:
            self.value = self.alpha * sample + (1.0 - self.alpha) * self.value
        return self.value

    def filter_batch(self, samples: np.ndarray) -> np.ndarray:
        """
        Filter a batch of samples, continuing from the current state.

        Args:
            samples: Array of input samples

        Returns:
            Array of filtered samples
        """
        samples = np.asarray(samples, dtype=float)
        if samples.size == 0:
            return samples

        # Seeding with the first sample makes y[0] == x[0]
        previous = samples[0] if self.value is None else self.value
        zi = np.array([(1.0 - self.alpha) * previous])
        filtered, _ = lfilter(self._b, self._a, samples, zi=zi)
        self.value = float(filtered[-1])
        return filtered


class SignalChannel:
    """Raw history plus filtered value for one scalar channel."""

    def __init__(self, name: str, capacity: int, alpha: float):
        """
        Initialize a channel.

        Args:
            name: Channel name used in diagnostics ('gyro', 'acc', 'pressure')
            capacity: Ring buffer depth
            alpha: Smoothing factor for the exponential filter
        """
        self.name = name
        self.buffer = RingBuffer(capacity)
        self.filter = ExponentialFilter(alpha)
        self.previous_filtered: Optional[float] = None

    def update(self, raw_value: float) -> float:
        """Push a raw magnitude and return the new filtered value."""
        self.previous_filtered = self.filter.value
        self.buffer.push(raw_value)
        return self.filter.filter_sample(raw_value)

    @property
    def filtered(self) -> Optional[float]:
        return self.filter.value

    @property
    def delta(self) -> Optional[float]:
        """Change of the filtered value over the last update."""
        if self.filtered is None or self.previous_filtered is None:
            return None
        return self.filtered - self.previous_filtered

    def recent(self, relative_index: int = 0) -> float:
        """Raw value `relative_index` samples ago (NaN if not available)."""
        return self.buffer.get(relative_index)

    def window_mean(self) -> float:
        """Mean of the raw history currently held (NaN when empty)."""
        values = self.buffer.values()
        if values.size == 0:
            return float('nan')
        return float(np.mean(values))

    def get_info(self) -> dict:
        """
        Get channel state for display.

        Returns:
            Dictionary with latest raw value, filtered value and history depth
        """
        return {
            'name': self.name,
            'raw': self.recent(0),
            'filtered': self.filtered,
            'previous_filtered': self.previous_filtered,
            'window_mean': self.window_mean(),
            'history': len(self.buffer),
            'capacity': self.buffer.capacity,
        }
