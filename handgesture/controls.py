"""
Control mapping: turns the stable gesture into zoom, position and swipe commands.
"""
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from .config import ControlsConfig
from .filters import ScalarKalman
from .features import WRIST
from .types import ControlEvent, FeatureSet, Frame, PositionCommand, SwipeCommand, ZoomCommand

logger = logging.getLogger(__name__)

NEUTRAL_POSITION = 0.5


@dataclass
class VelocitySample:
    """Wrist x position at a specific time."""
    timestamp: float
    value: float


class VelocityTracker:
    """Bounded window of timestamped samples with an end-to-end velocity."""

    def __init__(self, capacity: int = 5, min_dt_s: float = 0.01):
        self.min_dt_s = min_dt_s
        self.samples: Deque[VelocitySample] = deque(maxlen=capacity)

    def add(self, value: float, timestamp: float) -> None:
        self.samples.append(VelocitySample(timestamp=timestamp, value=value))

    def velocity(self) -> float:
        """Units per second between the oldest and newest sample; 0.0 if undefined."""
        if len(self.samples) < 2:
            return 0.0
        first, last = self.samples[0], self.samples[-1]
        dt = last.timestamp - first.timestamp
        if dt < self.min_dt_s:
            return 0.0
        return (last.value - first.value) / dt

    def reset(self) -> None:
        self.samples.clear()


class ControlMapper:
    """
    Derives continuous and discrete control output from the stable gesture.

    Features:
    - Pinch: smoothed zoom delta from the change in normalized pinch distance
    - Open palm: smoothed wrist position
    - Open palm: left/right swipe from wrist velocity, with a cooldown
    """

    def __init__(self, cfg: Optional[ControlsConfig] = None):
        self.cfg = cfg or ControlsConfig()
        zf, pf = self.cfg.zoom_filter, self.cfg.position_filter
        self.zoom_filter = ScalarKalman(zf.process_noise, zf.measurement_noise, 0.0)
        self.hand_x_filter = ScalarKalman(pf.process_noise, pf.measurement_noise, NEUTRAL_POSITION)
        self.hand_y_filter = ScalarKalman(pf.process_noise, pf.measurement_noise, NEUTRAL_POSITION)
        self.wrist_velocity = VelocityTracker(self.cfg.swipe_window, self.cfg.min_velocity_dt_s)
        self.last_pinch = 0.0
        self.cooldown_until = float("-inf")

    def update(self, gesture: str, features: Optional[FeatureSet], frame: Optional[Frame],
               t_now: float) -> List[ControlEvent]:
        """
        Process one frame and return the commands it produces.

        Args:
            gesture: Stable gesture label
            features: Feature set of the frame (None if unavailable)
            frame: Smoothed landmarks of the frame (None if no hand)
            t_now: Current timestamp in seconds

        Returns:
            Zero or more commands, each tagged with ``gesture``
        """
        events: List[ControlEvent] = []

        if gesture == "pinch":
            zoom = self._update_zoom(features)
            if zoom is not None:
                events.append(zoom)
        else:
            self._reset_zoom()

        if gesture == "open" and frame is not None:
            wrist = frame[WRIST]
            events.append(PositionCommand(
                x=self.hand_x_filter(wrist.x),
                y=self.hand_y_filter(wrist.y),
                gesture=gesture
            ))
            swipe = self._update_swipe(wrist.x, t_now)
            if swipe is not None:
                events.append(swipe)
        else:
            self._reset_position()

        return events

    def _update_zoom(self, features: Optional[FeatureSet]) -> Optional[ZoomCommand]:
        if features is None:
            return None

        pinch = features.normalized_pinch
        command = None
        # No baseline on the first pinch frame, so entering pinch never jumps
        if self.last_pinch > 0:
            delta = (pinch - self.last_pinch) * self.cfg.zoom_sensitivity
            smoothed = self.zoom_filter(delta)
            if abs(smoothed) > self.cfg.zoom_epsilon:
                command = ZoomCommand(delta=smoothed, gesture="pinch")
        self.last_pinch = pinch
        return command

    def _update_swipe(self, wrist_x: float, t_now: float) -> Optional[SwipeCommand]:
        self.wrist_velocity.add(wrist_x, t_now)
        velocity = self.wrist_velocity.velocity()

        if t_now <= self.cooldown_until:
            return None
        if abs(velocity) <= self.cfg.swipe_velocity_threshold:
            return None

        direction = "right" if velocity > 0 else "left"
        self.cooldown_until = t_now + (self.cfg.swipe_cooldown_ms / 1000.0)
        self.wrist_velocity.reset()
        logger.info(f"👋 Swipe {direction} (v={velocity:.2f}/s)")
        return SwipeCommand(direction=direction, gesture="open")

    def _reset_zoom(self) -> None:
        self.last_pinch = 0.0
        self.zoom_filter.reset(0.0)

    def _reset_position(self) -> None:
        self.hand_x_filter.reset(NEUTRAL_POSITION)
        self.hand_y_filter.reset(NEUTRAL_POSITION)
        self.wrist_velocity.reset()

    def reset(self) -> None:
        """Clear every baseline, filter and window, including the swipe cooldown."""
        self._reset_zoom()
        self._reset_position()
        self.cooldown_until = float("-inf")


class ZoomLevel:
    """Accumulates advisory zoom deltas into an absolute, clamped zoom level."""

    def __init__(self, minimum: float = 0.5, maximum: float = 3.0, initial: float = 1.0):
        self.minimum = minimum
        self.maximum = maximum
        self.value = max(minimum, min(maximum, initial))

    def apply(self, delta: float) -> float:
        self.value = max(self.minimum, min(self.maximum, self.value + delta))
        return self.value
