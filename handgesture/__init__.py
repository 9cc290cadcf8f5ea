"""
Hand Gesture Core

Turns a per-frame stream of 21-point hand landmarks into a stable gesture
label (pinch, point, open, fist) and control events (zoom, position, swipe).
"""

__version__ = "0.1.0"

from .types import (
    LandmarkPoint,
    Frame,
    FeatureSet,
    FrameResult,
    ZoomCommand,
    PositionCommand,
    SwipeCommand,
    ControllerProto,
    normalize_label,
)
from .config import load_config, default_config, validate_config, Cfg, ConfigError
from .controller_mock import MockController
from .features import extract_features
from .classifier import GestureClassifier, Rule, build_rules
from .stabilizer import GestureStabilizer
from .controls import ControlMapper, ZoomLevel
from .smoothing import LandmarkSmoother
from .pipeline import GesturePipeline, dispatch

__all__ = [
    "LandmarkPoint",
    "Frame",
    "FeatureSet",
    "FrameResult",
    "ZoomCommand",
    "PositionCommand",
    "SwipeCommand",
    "ControllerProto",
    "normalize_label",
    "load_config",
    "default_config",
    "validate_config",
    "Cfg",
    "ConfigError",
    "MockController",
    "extract_features",
    "GestureClassifier",
    "Rule",
    "build_rules",
    "GestureStabilizer",
    "ControlMapper",
    "ZoomLevel",
    "LandmarkSmoother",
    "GesturePipeline",
    "dispatch",
]
