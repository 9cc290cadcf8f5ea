"""
Per-frame gesture pipeline: smoothing, features, classification, debouncing, controls.
"""
import logging
import time
from typing import Any, Optional

from .classifier import GestureClassifier
from .config import Cfg, default_config, validate_config
from .controls import ControlMapper
from .features import extract_features
from .smoothing import LandmarkSmoother
from .stabilizer import GestureStabilizer
from .types import ControllerProto, Frame, FrameResult, PositionCommand, SwipeCommand, ZoomCommand

logger = logging.getLogger(__name__)


class GesturePipeline:
    """
    Main pipeline that turns raw hand landmarks into a stable gesture and control events.

    One instance owns all persistent state (filter bank, stabilizer, control
    baselines). It is not thread-safe: frame sources must not share an
    instance without external locking.
    """

    def __init__(self, cfg: Optional[Cfg] = None):
        """Initialize the pipeline with configuration."""
        self.cfg = validate_config(cfg or default_config())
        self.smoother = LandmarkSmoother(self.cfg.smoother)
        self.classifier = GestureClassifier(self.cfg.classifier)
        self.stabilizer = GestureStabilizer(self.cfg.stabilizer)
        self.controls = ControlMapper(self.cfg.controls)
        self._tracking = False

    @property
    def gesture(self) -> str:
        """Current stable gesture."""
        return self.stabilizer.current

    def process_frame(self, landmarks: Any, t_now: Optional[float] = None,
                      handedness: Optional[str] = None) -> FrameResult:
        """
        Process one frame of landmarks.

        Args:
            landmarks: 21 hand landmarks (see Frame.from_landmarks), or None if no hand detected
            t_now: Current timestamp in seconds (defaults to time.monotonic())
            handedness: Optional "left" / "right" label; does not affect classification

        Returns:
            FrameResult with the stable gesture, its confidence and any control events
        """
        if t_now is None:
            t_now = time.monotonic()

        frame = Frame.from_landmarks(landmarks, handedness)
        if frame is None:
            if self._tracking:
                logger.debug("Hand lost, resetting pipeline state")
            self.reset()
            return FrameResult(gesture="none", confidence=0.0)

        if not self._tracking:
            logger.debug("Hand acquired")
        self._tracking = True

        smoothed = self.smoother.smooth(frame)
        features = extract_features(smoothed, self.cfg.features)
        raw_gesture, raw_confidence = self.classifier.classify(features)
        gesture, confidence = self.stabilizer.update(raw_gesture, raw_confidence)
        events = self.controls.update(gesture, features, smoothed, t_now)

        return FrameResult(
            gesture=gesture,
            confidence=confidence,
            raw_gesture=raw_gesture,
            raw_confidence=raw_confidence,
            events=events,
            handedness=frame.handedness,
            features=features
        )

    def reset(self) -> None:
        """Reset all persistent state, as on hand loss."""
        self.smoother.reset()
        self.stabilizer.reset()
        self.controls.reset()
        self._tracking = False


async def dispatch(result: FrameResult, controller: ControllerProto) -> int:
    """
    Forward the control events of one frame to a controller.

    Returns:
        Number of events dispatched
    """
    for event in result.events:
        if isinstance(event, ZoomCommand):
            await controller.zoom(event.delta)
        elif isinstance(event, PositionCommand):
            await controller.move(event.x, event.y)
        elif isinstance(event, SwipeCommand):
            await controller.swipe(event.direction)
    return len(result.events)
