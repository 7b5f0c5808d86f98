"""
Replay a recorded sensor session through the pedometer and print the metrics.

Usage:
    python stream_pedometer.py RECORDING [--data-dir DIR] [--speed X] [--height CM]
"""
import argparse
import logging
from pathlib import Path

from pedometer import (
    PedometerConfig,
    PedometerSession,
    RecordingLoader,
    RecordingReplay,
    StreamConfig,
)


def main():
    stream_config = StreamConfig()

    parser = argparse.ArgumentParser(description="Replay a recorded session through the pedometer")
    parser.add_argument("recording", help="Recording name (file stem in the data directory)")
    parser.add_argument("--data-dir", type=Path, default=stream_config.DATA_DIR)
    parser.add_argument("--speed", type=float, default=None,
                        help="Playback speed multiplier (default: as fast as possible)")
    parser.add_argument("--height", type=float, default=PedometerConfig.height, help="Height in cm")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    loader = RecordingLoader(args.data_dir)
    df = loader.load_recording(args.recording)

    session = PedometerSession(PedometerConfig(height=args.height))
    replay = RecordingReplay(df)

    def report(event):
        if event.step_number % stream_config.REPORT_EVERY_STEPS == 0:
            metrics = session.get_metrics()
            print(f"Steps: {metrics.steps}, Distance: {metrics.distance:.2f}m, "
                  f"Elevation Gain: {metrics.elevation_gain:.2f}m")

    session.add_listener(report)
    session.start(replay)
    delivered = replay.play(speed=args.speed)
    session.stop()

    metrics = session.get_metrics()
    print("=" * 60)
    print(f"Replayed {delivered} samples from {args.recording}")
    print(f"  Steps:          {metrics.steps}")
    print(f"  Distance:       {metrics.distance:.2f} m")
    print(f"  Elevation gain: {metrics.elevation_gain:.2f} m")
    print(f"  Speed:          {metrics.speed:.2f} m/s")
    print(f"  Calories:       {metrics.calories:.3f}")
    print("=" * 60)


if __name__ == "__main__":
    main()
