"""
Replay recorded hand landmarks through the gesture pipeline.

A recording is JSON Lines, one frame per line::

    {"t": 0.033, "landmarks": [[x, y, z], ...], "handedness": "Right"}

``landmarks`` may be null or empty for frames without a visible hand.
"""
import argparse
import asyncio
import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .config import load_config
from .controller_mock import MockController
from .controls import ZoomLevel
from .pipeline import GesturePipeline, dispatch
from .types import ControllerProto, SwipeCommand, ZoomCommand

logger = logging.getLogger(__name__)


@dataclass
class RecordedFrame:
    """One line of a landmark recording."""
    t: float
    landmarks: Optional[List[Any]]
    handedness: Optional[str] = None


def load_recording(path: str) -> List[RecordedFrame]:
    """
    Load a JSON Lines landmark recording.

    Lines that cannot be parsed are logged and kept as "no hand" frames so
    the timeline stays intact. A line without "t" is placed 1/30 s after the
    previous frame.

    Raises:
        FileNotFoundError: If the recording does not exist
    """
    recording_path = Path(path)
    if not recording_path.exists():
        raise FileNotFoundError(f"Recording not found: {recording_path}")

    frames: List[RecordedFrame] = []
    last_t = 0.0
    with open(recording_path, 'r') as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
                t = float(data.get("t", last_t + 1 / 30))
                frame = RecordedFrame(t=t, landmarks=data.get("landmarks"), handedness=data.get("handedness"))
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"⚠️  Skipping malformed line {line_no}: {e}")
                frame = RecordedFrame(t=last_t + 1 / 30, landmarks=None)
            frames.append(frame)
            last_t = frame.t
    return frames


async def replay(frames: Iterable[RecordedFrame], pipeline: GesturePipeline,
                 controller: ControllerProto) -> Dict[str, Any]:
    """
    Run recorded frames through the pipeline and dispatch their events.

    Returns:
        Summary with frame count, stable gesture counts, swipes and final zoom level
    """
    zoom = ZoomLevel(pipeline.cfg.controls.zoom_min, pipeline.cfg.controls.zoom_max)
    gestures: Counter = Counter()
    swipes: List[str] = []
    count = 0

    for recorded in frames:
        result = pipeline.process_frame(recorded.landmarks, t_now=recorded.t, handedness=recorded.handedness)
        count += 1
        gestures[result.gesture] += 1
        for event in result.events:
            if isinstance(event, ZoomCommand):
                zoom.apply(event.delta)
            elif isinstance(event, SwipeCommand):
                swipes.append(event.direction)
        await dispatch(result, controller)

    logger.info(f"✅ Replayed {count} frames")
    return {
        "frames": count,
        "gestures": dict(gestures),
        "swipes": swipes,
        "zoom": round(zoom.value, 4),
    }


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay recorded hand landmarks through the gesture pipeline.")
    parser.add_argument("recording", help="JSON Lines landmark recording")
    parser.add_argument("--config", default=None, help="YAML config file (defaults to the packaged config)")
    parser.add_argument("--verbose", action="store_true", help="Log per-frame state changes")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = load_config(args.config)
    frames = load_recording(args.recording)
    return await replay(frames, GesturePipeline(cfg), MockController(verbose=args.verbose))


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the replay driver."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        summary = asyncio.run(_run(args))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
