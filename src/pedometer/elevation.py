"""Cumulative elevation gain from filtered pressure estimates."""

import logging
from typing import Optional

from .pressure import METERS_PER_HPA


logger = logging.getLogger(__name__)


class ElevationTracker:
    """
    Accumulates climbed elevation from consecutive filtered pressure values.

    Pressure falls with altitude, so a pressure drop counts as a climb.
    Descents are ignored: the result is total climbed elevation, not net
    altitude change.
    """

    def __init__(self, pressure_threshold: float):
        """
        Args:
            pressure_threshold: Minimum |delta p| (hPa) treated as a real change
        """
        self.pressure_threshold = pressure_threshold
        self.last_pressure: Optional[float] = None
        self.elevation_gain = 0.0

    def update(self, pressure: float) -> float:
        """
        Feed the latest filtered pressure.

        Returns:
            The elevation added by this update (0.0 when nothing was added)
        """
        gained = 0.0
        if self.last_pressure is not None:
            pressure_change = pressure - self.last_pressure
            if abs(pressure_change) > self.pressure_threshold:
                elevation_change = pressure_change * -METERS_PER_HPA
                if elevation_change > 0:
                    gained = elevation_change
                    self.elevation_gain += gained
                    logger.debug(
                        "Elevation +%.2f m (dp=%.3f hPa), total %.2f m",
                        gained, pressure_change, self.elevation_gain,
                    )
        self.last_pressure = pressure
        return gained
