"""
Type definitions for hand gesture recognition system.
"""
import math
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Protocol, Tuple, Union, runtime_checkable

import numpy as np

NUM_LANDMARKS = 21
# Normalized and pixel coordinates both sit far below this
MAX_COORDINATE = 1e6

GestureLabel = Literal["none", "pinch", "point", "open", "fist", "grab"]
Direction = Literal["left", "right"]
Handedness = Literal["left", "right"]

GESTURE_LABELS: Tuple[str, ...] = ("none", "pinch", "point", "open", "fist", "grab")


def normalize_label(label: str) -> str:
    """Map a gesture label onto its canonical name ("grab" is a synonym for "fist")."""
    label = (label or "none").lower()
    if label not in GESTURE_LABELS:
        raise ValueError(f"Unknown gesture label: {label!r}")
    return "fist" if label == "grab" else label


@dataclass(frozen=True)
class LandmarkPoint:
    """One tracked hand point in normalized camera space."""
    x: float
    y: float
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Frame:
    """The 21 landmarks of one detected hand plus optional handedness."""
    points: Tuple[LandmarkPoint, ...]
    handedness: Optional[Handedness] = None

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, idx: int) -> LandmarkPoint:
        return self.points[idx]

    @property
    def is_complete(self) -> bool:
        return len(self.points) == NUM_LANDMARKS

    def as_array(self):
        """Return the landmarks as a (N, 3) numpy array."""
        return np.array([p.as_tuple() for p in self.points], dtype=float)

    @classmethod
    def from_landmarks(cls, landmarks: Any, handedness: Optional[str] = None) -> Optional["Frame"]:
        """
        Build a frame from loosely typed landmark input.

        Accepts a Frame, or a sequence of LandmarkPoints, (x, y) / (x, y, z)
        sequences or array rows, mappings with x/y/z keys, or objects with
        x/y/z attributes (e.g. MediaPipe landmark lists).

        Returns:
            A complete Frame, or None when the input is absent, has the wrong
            number of points, or holds unparsable, non-finite or out-of-range
            coordinates.
        """
        if landmarks is None:
            return None
        if isinstance(landmarks, Frame):
            if handedness is not None:
                landmarks = Frame(landmarks.points, normalize_handedness(handedness))
            return landmarks if landmarks.is_complete else None

        # MediaPipe NormalizedLandmarkList wraps the points in .landmark
        landmarks = getattr(landmarks, "landmark", landmarks)
        try:
            raw_points = list(landmarks)
        except TypeError:
            return None
        if len(raw_points) != NUM_LANDMARKS:
            return None

        points = []
        for raw in raw_points:
            point = _coerce_point(raw)
            if point is None:
                return None
            points.append(point)
        return cls(tuple(points), normalize_handedness(handedness))


def normalize_handedness(value: Optional[str]) -> Optional[Handedness]:
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value if value in ("left", "right") else None


def _coerce_point(raw: Any) -> Optional[LandmarkPoint]:
    if isinstance(raw, LandmarkPoint):
        coords = raw.as_tuple()
    elif isinstance(raw, dict):
        coords = (raw.get("x"), raw.get("y"), raw.get("z", 0.0))
    elif isinstance(raw, (list, tuple, np.ndarray)):
        if len(raw) == 2:
            coords = (raw[0], raw[1], 0.0)
        elif len(raw) == 3:
            coords = tuple(raw)
        else:
            return None
    elif hasattr(raw, "x") and hasattr(raw, "y"):
        coords = (raw.x, raw.y, getattr(raw, "z", 0.0))
    else:
        return None

    x, y, z = coords
    try:
        x, y = float(x), float(y)
        z = float(z) if z is not None else 0.0
    except (TypeError, ValueError, OverflowError):
        return None
    if not all(math.isfinite(c) and abs(c) <= MAX_COORDINATE for c in (x, y, z)):
        return None
    return LandmarkPoint(x, y, z)


@dataclass(frozen=True)
class FeatureSet:
    """Scale-invariant geometry derived from one smoothed frame."""
    palm_size: float
    normalized_pinch: float
    index_curl: float
    middle_curl: float
    ring_curl: float
    pinky_curl: float
    index_extended: bool
    middle_extended: bool
    ring_extended: bool
    pinky_extended: bool
    thumb_extended: bool

    @property
    def extended_count(self) -> int:
        """Number of extended fingers, thumb excluded."""
        return sum((self.index_extended, self.middle_extended, self.ring_extended, self.pinky_extended))


@dataclass
class ZoomCommand:
    """Advisory zoom change; positive when the pinched fingers move apart."""
    delta: float
    gesture: str = "pinch"


@dataclass
class PositionCommand:
    """Smoothed hand position in normalized space."""
    x: float
    y: float
    gesture: str = "open"


@dataclass
class SwipeCommand:
    """Discrete horizontal swipe."""
    direction: Direction
    gesture: str = "open"


ControlEvent = Union[ZoomCommand, PositionCommand, SwipeCommand]


@dataclass
class FrameResult:
    """Output of the pipeline for one frame."""
    gesture: str
    confidence: float
    raw_gesture: str = "none"
    raw_confidence: float = 0.0
    events: List[ControlEvent] = field(default_factory=list)
    handedness: Optional[Handedness] = None
    features: Optional[FeatureSet] = None


@runtime_checkable
class ControllerProto(Protocol):
    """Abstract protocol for consumers that act on control events."""

    async def zoom(self, delta: float) -> None:
        """Apply a zoom delta."""
        ...

    async def move(self, x: float, y: float) -> None:
        """Move / rotate to a normalized hand position."""
        ...

    async def swipe(self, direction: Literal["left", "right"]) -> None:
        """Handle a swipe in the given direction."""
        ...
