"""
Geometric hand features computed from smoothed landmarks.
"""
import math
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import FeatureConfig
from .types import Frame, FeatureSet

# MediaPipe landmark indices
WRIST = 0
THUMB_CMC, THUMB_MCP, THUMB_IP, THUMB_TIP = 1, 2, 3, 4
INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20

# (base, middle, tip) triads used for curl angles
INDEX = (INDEX_MCP, INDEX_PIP, INDEX_TIP)
MIDDLE = (MIDDLE_MCP, MIDDLE_PIP, MIDDLE_TIP)
RING = (RING_MCP, RING_PIP, RING_TIP)
PINKY = (PINKY_MCP, PINKY_PIP, PINKY_TIP)

MIN_PALM_SIZE = 1e-9


def distance_2d(a: Sequence[float], b: Sequence[float]) -> float:
    """Distance between two points in the image plane (z ignored)."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def distance_3d(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two points including depth."""
    return float(np.linalg.norm(np.asarray(a[:3], dtype=float) - np.asarray(b[:3], dtype=float)))


def joint_angle(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> float:
    """
    Angle at joint b formed by a and c, via the law of cosines.

    Args:
        a: Base joint
        b: Middle joint (the vertex)
        c: Tip

    Returns:
        Angle in radians; pi for a straight finger, 0.0 when a segment has zero length
    """
    ab = distance_2d(a, b)
    bc = distance_2d(b, c)
    ac = distance_2d(a, c)
    if ab == 0 or bc == 0:
        return 0.0
    cosine = (ab * ab + bc * bc - ac * ac) / (2 * ab * bc)
    return math.acos(max(-1.0, min(1.0, cosine)))


def palm_size(points: np.ndarray) -> float:
    """
    Calculate the palm size used to normalize every other distance.

    Args:
        points: (21, 3) landmark array

    Returns:
        Wrist to middle-finger base distance
    """
    return distance_2d(points[WRIST], points[MIDDLE_MCP])


def _curl(points: np.ndarray, triad: Tuple[int, int, int]) -> float:
    base, middle, tip = triad
    return joint_angle(points[base], points[middle], points[tip])


def extract_features(frame: Frame, cfg: Optional[FeatureConfig] = None) -> Optional[FeatureSet]:
    """
    Compute the scale-invariant feature set of one frame.

    Args:
        frame: Smoothed 21-point frame
        cfg: Feature thresholds (defaults if None)

    Returns:
        FeatureSet, or None when the palm size is degenerate (zero or not finite)
    """
    cfg = cfg or FeatureConfig()
    points = frame.as_array()

    size = palm_size(points)
    if not math.isfinite(size) or size < MIN_PALM_SIZE:
        return None

    curls = [_curl(points, triad) for triad in (INDEX, MIDDLE, RING, PINKY)]
    extended = [curl > cfg.curl_threshold for curl in curls]

    thumb_extended = distance_2d(points[THUMB_TIP], points[WRIST]) > size * cfg.thumb_extension_ratio
    normalized_pinch = distance_3d(points[THUMB_TIP], points[INDEX_TIP]) / size

    return FeatureSet(
        palm_size=size,
        normalized_pinch=normalized_pinch,
        index_curl=curls[0],
        middle_curl=curls[1],
        ring_curl=curls[2],
        pinky_curl=curls[3],
        index_extended=extended[0],
        middle_extended=extended[1],
        ring_extended=extended[2],
        pinky_extended=extended[3],
        thumb_extended=thumb_extended,
    )
