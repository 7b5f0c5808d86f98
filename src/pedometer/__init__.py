"""Streaming pedometer: step detection and pedestrian metrics from motion sensors."""

from .config import ConfigurationError, PedometerConfig, StreamConfig
from .models import SensorSample, StepEvent, PedestrianMetrics
from .ring_buffer import RingBuffer
from .signal_filters import ExponentialFilter, SignalChannel
from .pressure import estimate_pressure, estimate_pressure_batch, magnitude
from .step_detector import StepDetector
from .elevation import ElevationTracker
from .metrics import MetricsAggregator, stride_factor, stride_length
from .geodesic import geodesic_distance, track_distance
from .session import PedometerSession, SampleSource
from .data_loader import (
    RecordingLoader,
    RecordingReplay,
    iter_samples,
    channel_frame,
)


__all__ = [
    'ConfigurationError',
    'PedometerConfig',
    'StreamConfig',
    'SensorSample',
    'StepEvent',
    'PedestrianMetrics',
    'RingBuffer',
    'ExponentialFilter',
    'SignalChannel',
    'estimate_pressure',
    'estimate_pressure_batch',
    'magnitude',
    'StepDetector',
    'ElevationTracker',
    'MetricsAggregator',
    'stride_factor',
    'stride_length',
    'geodesic_distance',
    'track_distance',
    'PedometerSession',
    'SampleSource',
    'RecordingLoader',
    'RecordingReplay',
    'iter_samples',
    'channel_frame',
]
