"""
Frame-debouncing state machine for raw gesture labels.

States:
    Idle                                 - stable gesture is "none", nothing pending
    Confirmed(label)                     - stable gesture is ``label``, nothing pending
    Pending(current, candidate, count, exits)
                                         - ``current`` is still reported while
                                           ``candidate`` has been seen ``count``
                                           frames in a row; ``exits`` counts
                                           candidate changes since ``current``
                                           was last confirmed

Entering a gesture needs ``entry_frames`` agreeing frames. Falling back to
"none" only needs ``exit_frames`` candidate changes ending on a raw "none".
"""
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .config import StabilizerConfig
from .types import normalize_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Confirmed:
    label: str


@dataclass(frozen=True)
class Pending:
    current: str
    candidate: str
    count: int
    exits: int


StabilizerState = Union[Idle, Confirmed, Pending]

IDLE = Idle()


def _confirmed(label: str) -> StabilizerState:
    return IDLE if label == "none" else Confirmed(label)


def current_label(state: StabilizerState) -> str:
    """Stable gesture reported in ``state``."""
    if isinstance(state, Confirmed):
        return state.label
    if isinstance(state, Pending):
        return state.current
    return "none"


def _unpack(state: StabilizerState) -> Tuple[str, str, Optional[int], int]:
    # (current, candidate, count, exits); a confirmed label is its own candidate
    if isinstance(state, Pending):
        return state.current, state.candidate, state.count, state.exits
    label = current_label(state)
    return label, label, None, 0


def transition(state: StabilizerState, raw: str, entry_frames: int, exit_frames: int) -> StabilizerState:
    """
    Advance the state machine by one raw label.

    Args:
        state: Current state
        raw: Raw label for this frame
        entry_frames: Agreeing frames required to switch to a new gesture
        exit_frames: Candidate changes after which a raw "none" drops the gesture

    Returns:
        The next state
    """
    raw = normalize_label(raw)
    current, candidate, count, exits = _unpack(state)

    if raw == current:
        return _confirmed(current)

    if raw != candidate:
        candidate, count, exits = raw, 1, exits + 1
    else:
        count = (count or 0) + 1

    if count >= entry_frames:
        return _confirmed(candidate)

    if exits >= exit_frames and current != "none" and raw == "none":
        return IDLE

    return Pending(current, candidate, count, exits)


class GestureStabilizer:
    """Holds the debouncing state and the confidence of the stable gesture."""

    def __init__(self, cfg: Optional[StabilizerConfig] = None):
        self.cfg = cfg or StabilizerConfig()
        self.state: StabilizerState = IDLE
        self.confidence = 0.0

    @property
    def current(self) -> str:
        return current_label(self.state)

    def update(self, raw: str, raw_confidence: float = 0.0) -> Tuple[str, float]:
        """
        Feed one raw label.

        Returns:
            (stable label, stable confidence)
        """
        previous = self.current
        self.state = transition(self.state, raw, self.cfg.entry_frames, self.cfg.exit_frames)
        stable = self.current

        if stable != previous:
            logger.debug(f"Stable gesture {previous} -> {stable}")

        if stable == "none":
            self.confidence = 0.0
        elif normalize_label(raw) == stable:
            self.confidence = raw_confidence
        return stable, self.confidence

    def reset(self) -> None:
        """Force the stable gesture back to none and discard all counters."""
        self.state = IDLE
        self.confidence = 0.0
