"""Tests for the ring buffer, channel filter and pressure estimator."""

import math

import numpy as np
import pytest

from pedometer import (
    ConfigurationError,
    ExponentialFilter,
    RingBuffer,
    SignalChannel,
    estimate_pressure,
    estimate_pressure_batch,
)


def test_ring_buffer_empty_reads_nan():
    buffer = RingBuffer(4)
    assert len(buffer) == 0
    assert math.isnan(buffer.get(0))
    assert buffer.values().size == 0


def test_ring_buffer_keeps_last_capacity_values():
    """After capacity + k pushes only the newest `capacity` values remain."""
    capacity = 5
    for k in (0, 1, 3, 12):
        buffer = RingBuffer(capacity)
        pushed = list(range(capacity + k))
        for value in pushed:
            buffer.push(value)

        assert len(buffer) == capacity
        assert buffer.is_full
        assert buffer.get(0) == pushed[-1]
        assert buffer.values().tolist() == pushed[-capacity:]


def test_ring_buffer_relative_indexing_wraps():
    buffer = RingBuffer(3)
    for value in (1.0, 2.0, 3.0, 4.0):
        buffer.push(value)

    assert buffer.get(0) == 4.0
    assert buffer.get(1) == 3.0
    assert buffer.get(2) == 2.0
    assert buffer.get(3) == 4.0  # modulo capacity
    assert buffer.get(-1) == 2.0


def test_ring_buffer_partial_history():
    buffer = RingBuffer(10)
    buffer.push(7.0)
    buffer.push(8.0)

    assert len(buffer) == 2
    assert not buffer.is_full
    assert buffer.get(1) == 7.0
    assert math.isnan(buffer.get(2))


def test_ring_buffer_rejects_bad_capacity():
    with pytest.raises(ConfigurationError):
        RingBuffer(0)


def test_filter_seeds_with_first_sample():
    f = ExponentialFilter(0.1)
    assert f.value is None
    assert f.filter_sample(9.81) == pytest.approx(9.81)


def test_filter_converges_to_constant_input():
    """Error after n samples is (1 - alpha)^n of the initial gap."""
    alpha = 0.5
    f = ExponentialFilter(alpha)
    f.filter_sample(0.0)
    for _ in range(30):
        value = f.filter_sample(5.0)

    assert value == pytest.approx(5.0, abs=5.0 * (1 - alpha) ** 30 + 1e-12)
    assert abs(value - 5.0) < 1e-6


def test_filter_alpha_one_passes_through():
    f = ExponentialFilter(1.0)
    assert [f.filter_sample(x) for x in (1.0, 4.0, -2.0)] == [1.0, 4.0, -2.0]


def test_filter_batch_matches_sample_by_sample():
    rng = np.random.default_rng(42)
    signal = rng.normal(size=200)

    streaming = ExponentialFilter(0.3)
    expected = np.array([streaming.filter_sample(x) for x in signal])

    batch = ExponentialFilter(0.3)
    first = batch.filter_batch(signal[:50])
    rest = batch.filter_batch(signal[50:])

    np.testing.assert_allclose(np.concatenate([first, rest]), expected)
    assert batch.value == pytest.approx(streaming.value)


@pytest.mark.parametrize("alpha", [0.0, -0.2, 1.01])
def test_filter_rejects_bad_alpha(alpha):
    with pytest.raises(ConfigurationError):
        ExponentialFilter(alpha)


def test_signal_channel_tracks_previous_and_delta():
    channel = SignalChannel('pressure', capacity=3, alpha=1.0)
    assert channel.delta is None

    channel.update(1013.25)
    assert channel.previous_filtered is None
    assert channel.delta is None

    channel.update(1012.25)
    assert channel.previous_filtered == pytest.approx(1013.25)
    assert channel.delta == pytest.approx(-1.0)
    assert channel.recent(0) == 1012.25
    assert channel.window_mean() == pytest.approx(1012.75)

    info = channel.get_info()
    assert info['history'] == 2
    assert info['capacity'] == 3


def test_pressure_at_rest_is_sea_level():
    assert estimate_pressure((0.0, 0.0, 9.81)) == pytest.approx(1013.25)


def test_pressure_falls_with_larger_magnitude():
    rest = estimate_pressure((0.0, 0.0, 9.81))
    jolt = estimate_pressure((0.0, 3.0, 14.0))
    assert jolt < rest


def test_pressure_batch_matches_scalar():
    vectors = np.array([[0.0, 0.0, 9.81], [1.0, 2.0, 12.0], [0.0, 0.0, 0.0]])
    expected = [estimate_pressure(v) for v in vectors]
    np.testing.assert_allclose(estimate_pressure_batch(vectors), expected)
