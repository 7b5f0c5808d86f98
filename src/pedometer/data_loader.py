"""Loading and replay of recorded sensor sessions."""

import logging
import math
import time
import numpy as np
import polars as pl
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .config import PedometerConfig
from .models import SensorSample
from .pressure import GRAVITY, METERS_PER_HPA, SCALE_HEIGHT, SEA_LEVEL_PRESSURE
from .signal_filters import ExponentialFilter


logger = logging.getLogger(__name__)

TIME_COLUMN = 'timestamp'
VECTOR_COLUMNS = {
    'rotation_rate': ('gx', 'gy', 'gz'),
    'acceleration': ('ax', 'ay', 'az'),
    'acceleration_including_gravity': ('agx', 'agy', 'agz'),
}
REQUIRED_COLUMNS = [TIME_COLUMN] + [c for cols in VECTOR_COLUMNS.values() for c in cols]
SUPPORTED_SUFFIXES = ('.parquet', '.csv')
CHANNEL_COLUMNS = ('gyro_magnitude', 'acc_magnitude', 'pressure_estimate')


class RecordingLoader:
    """Handles loading and validation of recorded sensor sessions."""

    def __init__(self, data_dir: Path):
        """
        Initialize the loader.

        Args:
            data_dir: Directory containing .parquet or .csv recordings
        """
        self.data_dir = Path(data_dir)

    def get_available_recordings(self) -> List[str]:
        """
        List recording names (file stems) in the data directory.

        Returns:
            Sorted list of recording names
        """
        if not self.data_dir.exists():
            return []
        names = {
            f.stem for f in self.data_dir.iterdir()
            if f.is_file() and f.suffix in SUPPORTED_SUFFIXES
        }
        return sorted(names)

    def get_file_path(self, name: str) -> Path:
        """
        Resolve a recording name to its file, preferring parquet.

        Raises:
            FileNotFoundError: If no recording with that name exists
        """
        for suffix in SUPPORTED_SUFFIXES:
            path = self.data_dir / f"{name}{suffix}"
            if path.exists():
                return path
        raise FileNotFoundError(f"Recording not found: {name}")

    def load_recording(self, name: str) -> pl.DataFrame:
        """
        Load a recording by name.

        Returns:
            DataFrame sorted by timestamp

        Raises:
            FileNotFoundError: If the recording does not exist
            ValueError: If required columns are missing
        """
        path = self.get_file_path(name)
        if path.suffix == '.parquet':
            df = pl.read_parquet(path)
        else:
            df = pl.read_csv(path)
        validate_recording(df)
        logger.info("Loaded %d samples from %s", len(df), path.name)
        return df.sort(TIME_COLUMN)


def validate_recording(df: pl.DataFrame) -> None:
    """Raise ValueError if the frame lacks any required column."""
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Recording is missing columns: {', '.join(missing)}")


def _vector(row: dict, columns: Tuple[str, str, str]) -> Optional[Tuple[float, float, float]]:
    values = [row[c] for c in columns]
    if any(v is None for v in values):
        return None
    return tuple(float(v) for v in values)


def _timestamp(value) -> float:
    return math.nan if value is None else float(value)


def iter_samples(df: pl.DataFrame) -> Iterator[SensorSample]:
    """
    Yield one SensorSample per row.

    A null in any component of a vector makes that vector missing, and a
    null timestamp becomes NaN, so the session drops the sample as incomplete.
    """
    validate_recording(df)
    for row in df.select(REQUIRED_COLUMNS).iter_rows(named=True):
        yield SensorSample(
            timestamp=_timestamp(row[TIME_COLUMN]),
            **{field: _vector(row, cols) for field, cols in VECTOR_COLUMNS.items()}
        )


def _norm(columns: Tuple[str, str, str]) -> pl.Expr:
    x, y, z = columns
    return (pl.col(x) ** 2 + pl.col(y) ** 2 + pl.col(z) ** 2).sqrt()


def channel_frame(
    df: pl.DataFrame, smoothing_factor: float = PedometerConfig.smoothing_factor
) -> pl.DataFrame:
    """
    Add the channel columns the pipeline derives from each sample.

    Adds gyro_magnitude, acc_magnitude and pressure_estimate, plus a
    `<column>_filtered` column for each, smoothed the way a session smooths
    them. Useful for inspecting a recording and picking thresholds.

    Args:
        df: Recording with the columns listed in REQUIRED_COLUMNS
        smoothing_factor: Exponential filter alpha for the filtered columns

    Returns:
        DataFrame with the six extra columns. Rows a session would drop as
        incomplete get null filtered values and do not advance the filters.
    """
    validate_recording(df)
    height_change = (
        (_norm(VECTOR_COLUMNS['acceleration_including_gravity']) - GRAVITY)
        / GRAVITY * METERS_PER_HPA
    )
    frame = df.with_columns(
        _norm(VECTOR_COLUMNS['rotation_rate']).alias('gyro_magnitude'),
        _norm(VECTOR_COLUMNS['acceleration']).alias('acc_magnitude'),
        (SEA_LEVEL_PRESSURE * (-height_change / SCALE_HEIGHT).exp()).alias('pressure_estimate'),
    )

    complete = frame.select(
        pl.all_horizontal(
            pl.col(TIME_COLUMN).cast(pl.Float64).is_finite(),
            *[pl.col(c).is_finite() for c in CHANNEL_COLUMNS],
        ).fill_null(False)
    ).to_series().to_numpy()

    filtered_columns = []
    for column in CHANNEL_COLUMNS:
        values = frame[column].to_numpy()
        filtered = np.full(len(frame), np.nan)
        filtered[complete] = ExponentialFilter(smoothing_factor).filter_batch(values[complete])
        filtered_columns.append(pl.Series(f"{column}_filtered", filtered).fill_nan(None))
    return frame.with_columns(filtered_columns)


class RecordingReplay:
    """Sample source that pushes a recorded session to its subscribers."""

    def __init__(self, df: pl.DataFrame):
        """
        Args:
            df: Recording with the columns listed in REQUIRED_COLUMNS
        """
        validate_recording(df)
        self.df = df
        self._subscribers = []

    def subscribe(self, callback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def play(self, speed: Optional[float] = None) -> int:
        """
        Push every sample to the current subscribers.

        Args:
            speed: Playback speed multiplier (1 = real-time). None replays
                as fast as possible.

        Returns:
            Number of samples delivered
        """
        delivered = 0
        previous_time = None
        for sample in iter_samples(self.df):
            if not self._subscribers:
                logger.info("No subscribers left, stopping replay")
                break

            if speed and previous_time is not None:
                delay = (sample.timestamp - previous_time) / 1000.0 / speed
                if delay > 0:
                    time.sleep(delay)
            if math.isfinite(sample.timestamp):
                previous_time = sample.timestamp

            for callback in list(self._subscribers):
                callback(sample)
            delivered += 1
        return delivered
