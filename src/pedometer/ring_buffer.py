"""Fixed-capacity ring buffer for scalar channel history."""

import numpy as np

from .config import ConfigurationError


class RingBuffer:
    """
    Circular history of the most recent scalar samples.

    Storage is a preallocated numpy array, so pushing never allocates.
    Slots that have not been written yet hold NaN, which readers must treat
    as "not enough history" rather than a signal value.
    """

    def __init__(self, capacity: int):
        """
        Initialize ring buffer.

        Args:
            capacity: Number of samples to keep
        """
        if capacity <= 0:
            raise ConfigurationError(f"Ring buffer capacity must be positive, got {capacity}")
        self.capacity = int(capacity)
        self._data = np.full(self.capacity, np.nan)
        self._head = 0  # next slot to write
        self._count = 0

    def push(self, value: float) -> None:
        """Append a value, overwriting the oldest one once full."""
        self._data[self._head] = value
        self._head = (self._head + 1) % self.capacity
        if self._count < self.capacity:
            self._count += 1

    def get(self, relative_index: int = 0) -> float:
        """
        Return the value `relative_index` pushes behind the latest one.

        Args:
            relative_index: 0 for the most recent value, 1 for the one before...
                Taken modulo capacity, so any integer is accepted.

        Returns:
            The stored value, or NaN if that slot was never written
        """
        idx = (self._head - 1 - relative_index) % self.capacity
        return float(self._data[idx])

    def values(self) -> np.ndarray:
        """Filled values, oldest first (copy)."""
        if self._count < self.capacity:
            return self._data[:self._count].copy()
        return np.roll(self._data, -self._head)

    @property
    def is_full(self) -> bool:
        return self._count == self.capacity

    def __len__(self) -> int:
        return self._count
