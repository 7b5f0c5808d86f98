"""Pedometer session: wires channels, detector, elevation and metrics together."""

import logging
import threading
from collections import deque
from typing import Callable, Deque, Dict, Iterator, List, Optional, Protocol

from .config import PedometerConfig
from .elevation import ElevationTracker
from .metrics import MetricsAggregator
from .models import PedestrianMetrics, SensorSample, StepEvent
from .pressure import estimate_pressure, magnitude
from .signal_filters import SignalChannel
from .step_detector import StepDetector


logger = logging.getLogger(__name__)

SampleCallback = Callable[[SensorSample], object]
StepListener = Callable[[StepEvent], object]


class SampleSource(Protocol):
    """Anything that can push SensorSamples to a callback."""

    def subscribe(self, callback: SampleCallback) -> None:
        ...

    def unsubscribe(self, callback: SampleCallback) -> None:
        ...


class PedometerSession:
    """
    One pedometer session over a stream of sensor samples.

    Samples are processed synchronously and completely before the next one
    is accepted. All state changes and queries go through a single lock, so
    a sensor thread can feed samples while another thread reads metrics.
    """

    def __init__(self, config: Optional[PedometerConfig] = None):
        """
        Initialize the session.

        Args:
            config: Session configuration, defaults to PedometerConfig()
        """
        self.config = config or PedometerConfig()
        capacity = self.config.buffer_capacity
        alpha = self.config.smoothing_factor

        self.channels = {
            'gyro': SignalChannel('gyro', capacity, alpha),
            'acc': SignalChannel('acc', capacity, alpha),
            'pressure': SignalChannel('pressure', capacity, alpha),
        }
        self.detector = StepDetector(self.config)
        self.elevation = ElevationTracker(self.config.pressure_threshold)
        self.aggregator = MetricsAggregator(self.config)

        self._lock = threading.Lock()
        self._listeners: List[StepListener] = []
        self._pending: Deque[StepEvent] = deque(maxlen=self.config.event_queue_size)
        self._source: Optional[SampleSource] = None
        self.samples_processed = 0
        self.samples_dropped = 0

    # === Sample source lifecycle ===

    def start(self, source: SampleSource) -> None:
        """Subscribe to a sample source. Starting twice on the same source is a no-op."""
        if self._source is source:
            return
        if self._source is not None:
            raise RuntimeError("Session is already attached to a sample source")
        source.subscribe(self.process_sample)
        self._source = source
        logger.info("Pedometer session started")

    def stop(self) -> None:
        """Unsubscribe from the current source. Metrics are kept."""
        if self._source is None:
            return
        self._source.unsubscribe(self.process_sample)
        self._source = None
        logger.info(
            "Pedometer session stopped after %d samples (%d dropped)",
            self.samples_processed, self.samples_dropped,
        )

    @property
    def is_running(self) -> bool:
        return self._source is not None

    # === Processing ===

    def process_sample(self, sample: SensorSample) -> Optional[StepEvent]:
        """
        Process one sample.

        Args:
            sample: Sensor sample; incomplete samples are dropped without
                touching any state

        Returns:
            The StepEvent accepted on this sample, if any
        """
        if not sample.is_complete:
            with self._lock:
                self.samples_dropped += 1
            logger.debug("Dropping incomplete sample at %s", sample.timestamp)
            return None

        gyro_raw = magnitude(sample.rotation_rate)
        acc_raw = magnitude(sample.acceleration)
        pressure_raw = estimate_pressure(sample.acceleration_including_gravity)

        with self._lock:
            if self.aggregator.start_time is None:
                self.aggregator.start_time = sample.timestamp
            self.samples_processed += 1

            gyro = self.channels['gyro'].update(gyro_raw)
            acc = self.channels['acc'].update(acc_raw)
            pressure_channel = self.channels['pressure']
            pressure = pressure_channel.update(pressure_raw)
            previous_pressure = pressure_channel.previous_filtered

            if self.elevation.update(pressure) > 0:
                self.aggregator.set_elevation_gain(self.elevation.elevation_gain)

            event = self.detector.process(
                gyro, acc, pressure, previous_pressure, sample.timestamp
            )
            if event is None:
                return None

            metrics = self.aggregator.on_step(event)
            self._pending.append(event)
            listeners = list(self._listeners)

        logger.info(
            "Step %d at %.0f ms | distance %.2f m | cadence %d/2s",
            metrics.steps, event.timestamp, metrics.distance, metrics.cadence,
        )
        for listener in listeners:
            listener(event)
        return event

    # === Step notifications ===

    def add_listener(self, listener: StepListener) -> None:
        """Call `listener(event)` synchronously for every accepted step."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: StepListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def events(self) -> Iterator[StepEvent]:
        """
        Yield pending step events in arrival order.

        Each event is yielded once; the generator stops when the queue is
        empty and picks up nothing that arrives after that.
        """
        while True:
            with self._lock:
                if not self._pending:
                    return
                event = self._pending.popleft()
            yield event

    # === Queries ===

    def get_metrics(self) -> PedestrianMetrics:
        with self._lock:
            return self.aggregator.metrics

    def get_steps(self) -> int:
        return self.get_metrics().steps

    def get_distance(self) -> float:
        return self.get_metrics().distance

    def get_elevation_gain(self) -> float:
        return self.get_metrics().elevation_gain

    def get_speed(self) -> float:
        return self.get_metrics().speed

    def get_calories(self) -> float:
        return self.get_metrics().calories

    def get_channel_info(self) -> Dict[str, dict]:
        """Current raw/filtered state of every channel."""
        with self._lock:
            return {name: channel.get_info() for name, channel in self.channels.items()}
