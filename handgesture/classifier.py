"""
Rule-based gesture classification over extracted hand features.
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .config import ClassifierConfig
from .types import GESTURE_LABELS, FeatureSet


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class Rule:
    """One entry of the ordered rule list: a predicate and the confidence it assigns."""
    label: str
    predicate: Callable[[FeatureSet], bool]
    confidence: Callable[[FeatureSet], float]

    def __post_init__(self):
        if self.label not in GESTURE_LABELS:
            raise ValueError(f"Rule label must be one of {GESTURE_LABELS}, got {self.label!r}")

    def matches(self, features: FeatureSet) -> bool:
        return self.predicate(features)


def build_rules(cfg: Optional[ClassifierConfig] = None) -> List[Rule]:
    """
    Build the ordered rule list. First match wins.

    Pinch goes first: a pinching hand can also pass the "no finger extended"
    test. Open and fist are mutually exclusive and act as the defaults.
    """
    cfg = cfg or ClassifierConfig()

    def is_pinch(f: FeatureSet) -> bool:
        return f.normalized_pinch < cfg.pinch_threshold and not f.middle_extended and not f.ring_extended

    def is_point(f: FeatureSet) -> bool:
        return f.index_extended and not (f.middle_extended or f.ring_extended or f.pinky_extended)

    def is_open(f: FeatureSet) -> bool:
        return f.extended_count >= cfg.open_min_fingers and f.thumb_extended

    def is_fist(f: FeatureSet) -> bool:
        return f.extended_count == 0 and not f.thumb_extended

    return [
        Rule("pinch", is_pinch,
             lambda f: clamp01((cfg.pinch_threshold - f.normalized_pinch) / cfg.pinch_confidence_span)),
        Rule("point", is_point, lambda f: cfg.point_confidence),
        Rule("open", is_open, lambda f: cfg.open_confidence),
        Rule("fist", is_fist, lambda f: cfg.fist_confidence),
    ]


class GestureClassifier:
    """Maps a feature set to a raw per-frame gesture label and confidence."""

    def __init__(self, cfg: Optional[ClassifierConfig] = None, rules: Optional[List[Rule]] = None):
        self.cfg = cfg or ClassifierConfig()
        self.rules = rules if rules is not None else build_rules(self.cfg)

    def classify(self, features: Optional[FeatureSet]) -> Tuple[str, float]:
        """
        Evaluate the rules top to bottom.

        Args:
            features: Current feature set, or None when features are unavailable

        Returns:
            (label, confidence); ("none", 0.0) when no rule matches
        """
        if features is None:
            return "none", 0.0
        for rule in self.rules:
            if rule.matches(features):
                return rule.label, clamp01(rule.confidence(features))
        return "none", 0.0
