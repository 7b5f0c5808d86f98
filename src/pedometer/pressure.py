"""
Pressure estimation from gravity-inclusive acceleration.

There is no barometer in the loop. The magnitude of the gravity-inclusive
acceleration is mapped to an apparent height change and then to pressure
through the exponential atmosphere model. It is a coarse proxy, good
enough as a third motion signal, not a real altitude measurement.
"""

import numpy as np

from .models import Vector3


GRAVITY = 9.81  # m/s^2
METERS_PER_HPA = 8.43  # height change per hPa near sea level
SEA_LEVEL_PRESSURE = 1013.25  # hPa
SCALE_HEIGHT = 7000.0  # m


def magnitude(vector: Vector3) -> float:
    """Euclidean norm of a 3-vector."""
    return float(np.linalg.norm(np.asarray(vector, dtype=float)))


def estimate_pressure(acceleration_including_gravity: Vector3) -> float:
    """
    Estimate atmospheric pressure (hPa) from one gravity-inclusive sample.

    Args:
        acceleration_including_gravity: (x, y, z) in m/s^2

    Returns:
        Estimated pressure in hPa
    """
    m = magnitude(acceleration_including_gravity)
    height_change = (m - GRAVITY) / GRAVITY * METERS_PER_HPA
    return float(SEA_LEVEL_PRESSURE * np.exp(-height_change / SCALE_HEIGHT))


def estimate_pressure_batch(vectors: np.ndarray) -> np.ndarray:
    """
    Vectorised version of estimate_pressure for recorded data.

    Args:
        vectors: Array of shape (N, 3)

    Returns:
        Array of N pressure estimates (hPa)
    """
    vectors = np.asarray(vectors, dtype=float)
    m = np.linalg.norm(vectors, axis=1)
    height_change = (m - GRAVITY) / GRAVITY * METERS_PER_HPA
    return SEA_LEVEL_PRESSURE * np.exp(-height_change / SCALE_HEIGHT)
