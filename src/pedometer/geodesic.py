"""Great-circle distances for checking step-based distance against GPS fixes."""

import numpy as np


EARTH_RADIUS = 6371000.0  # m


def geodesic_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance between two points.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in metres
    """
    phi1, phi2 = np.radians(lat1), np.radians(lat2)
    d_phi = np.radians(lat2 - lat1)
    d_lambda = np.radians(lon2 - lon1)

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    # Rounding can push a slightly past 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(EARTH_RADIUS * c)


def track_distance(latitudes, longitudes, min_segment: float = 1.0) -> float:
    """
    Total length of a GPS track.

    Segments shorter than `min_segment` metres are treated as GPS jitter and
    skipped.

    Args:
        latitudes: Sequence of latitudes in degrees
        longitudes: Sequence of longitudes in degrees
        min_segment: Minimum segment length to count (m)

    Returns:
        Track length in metres
    """
    lats = np.radians(np.asarray(latitudes, dtype=float))
    lons = np.radians(np.asarray(longitudes, dtype=float))
    if lats.shape != lons.shape:
        raise ValueError("latitudes and longitudes must have the same length")
    if lats.size < 2:
        return 0.0

    d_phi = np.diff(lats)
    d_lambda = np.diff(lons)
    a = np.sin(d_phi / 2) ** 2 + np.cos(lats[:-1]) * np.cos(lats[1:]) * np.sin(d_lambda / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    segments = EARTH_RADIUS * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return float(np.sum(segments[segments >= min_segment]))
