"""
Test cases for the gesture debouncing state machine.
"""
import unittest

from handgesture.classifier import GestureClassifier
from handgesture.config import StabilizerConfig
from handgesture.features import extract_features
from handgesture.stabilizer import (
    IDLE,
    Confirmed,
    GestureStabilizer,
    Idle,
    Pending,
    current_label,
    transition,
)
from handgesture.types import Frame

from tests.hands import make_hand


def run(stabilizer, labels):
    return [stabilizer.update(label)[0] for label in labels]


class TestTransition(unittest.TestCase):
    """Test the pure transition function."""

    def test_idle_stays_idle(self):
        self.assertIsInstance(transition(IDLE, "none", 3, 2), Idle)

    def test_new_candidate(self):
        state = transition(IDLE, "open", 3, 2)
        self.assertEqual(state, Pending(current="none", candidate="open", count=1, exits=1))
        self.assertEqual(current_label(state), "none")

    def test_candidate_counts_up_then_confirms(self):
        state = transition(IDLE, "open", 3, 2)
        state = transition(state, "open", 3, 2)
        self.assertEqual(state, Pending("none", "open", 2, 1))
        state = transition(state, "open", 3, 2)
        self.assertEqual(state, Confirmed("open"))

    def test_same_as_current_confirms(self):
        state = Pending(current="open", candidate="fist", count=2, exits=1)
        self.assertEqual(transition(state, "open", 3, 2), Confirmed("open"))

    def test_single_frame_entry(self):
        self.assertEqual(transition(IDLE, "pinch", 1, 1), Confirmed("pinch"))

    def test_fast_exit(self):
        state = Pending(current="open", candidate="fist", count=1, exits=1)
        self.assertIsInstance(transition(state, "none", 4, 2), Idle)

    def test_fast_exit_needs_raw_none(self):
        state = Pending(current="open", candidate="fist", count=1, exits=1)
        self.assertEqual(transition(state, "point", 4, 2), Pending("open", "point", 1, 2))

    def test_grab_is_fist(self):
        self.assertEqual(transition(IDLE, "grab", 1, 1), Confirmed("fist"))


class TestGestureStabilizer(unittest.TestCase):
    """Test label sequences through the stabilizer."""

    def test_initial_state(self):
        stabilizer = GestureStabilizer()
        self.assertEqual(stabilizer.current, "none")
        self.assertEqual(stabilizer.confidence, 0.0)

    def test_single_frame_blip_is_ignored(self):
        """open x5, pinch x1, open x5 stays open once open is entered."""
        stabilizer = GestureStabilizer(StabilizerConfig(entry_frames=3, exit_frames=2))
        out = run(stabilizer, ["open"] * 5 + ["pinch"] + ["open"] * 5)
        self.assertEqual(out[:2], ["none", "none"])
        self.assertTrue(all(label == "open" for label in out[2:]))

    def test_entry_needs_consecutive_frames(self):
        stabilizer = GestureStabilizer(StabilizerConfig(entry_frames=3, exit_frames=2))
        out = run(stabilizer, ["fist", "fist", "point", "fist", "fist", "fist"])
        self.assertEqual(out, ["none", "none", "none", "none", "none", "fist"])

    def test_fast_exit_to_none(self):
        """Two candidate changes ending on none drop the gesture immediately."""
        stabilizer = GestureStabilizer(StabilizerConfig(entry_frames=4, exit_frames=2))
        run(stabilizer, ["open"] * 4)
        self.assertEqual(run(stabilizer, ["fist", "none"]), ["open", "none"])

    def test_slow_exit_to_none(self):
        """A steady none stream takes the full entry count."""
        stabilizer = GestureStabilizer(StabilizerConfig(entry_frames=4, exit_frames=2))
        run(stabilizer, ["open"] * 4)
        self.assertEqual(run(stabilizer, ["none"] * 4), ["open", "open", "open", "none"])

    def test_confidence_held_while_debouncing(self):
        stabilizer = GestureStabilizer(StabilizerConfig(entry_frames=2, exit_frames=2))
        stabilizer.update("point", 0.9)
        self.assertEqual(stabilizer.update("point", 0.9), ("point", 0.9))
        self.assertEqual(stabilizer.update("fist", 0.8), ("point", 0.9))

    def test_reset(self):
        stabilizer = GestureStabilizer(StabilizerConfig(entry_frames=1, exit_frames=1))
        stabilizer.update("open", 0.85)
        stabilizer.reset()
        self.assertIs(stabilizer.state, IDLE)
        self.assertEqual(stabilizer.confidence, 0.0)

    def test_pinch_entry(self):
        """Pinch distances 0.5, 0.3, 0.1 enter pinch from frame 2 with rising confidence."""
        classifier = GestureClassifier()
        stabilizer = GestureStabilizer(StabilizerConfig(entry_frames=1, exit_frames=1))

        raw, stable = [], []
        for d in (0.5, 0.3, 0.1):
            features = extract_features(Frame.from_landmarks(make_hand("pinch", pinch=d)))
            label, confidence = classifier.classify(features)
            raw.append(label)
            stable.append(stabilizer.update(label, confidence))

        self.assertNotEqual(raw[0], "pinch")
        self.assertEqual(raw[1:], ["pinch", "pinch"])
        self.assertEqual([s[0] for s in stable[1:]], ["pinch", "pinch"])
        self.assertAlmostEqual(stable[1][1], 0.5, places=6)
        self.assertGreater(stable[2][1], stable[1][1])


if __name__ == '__main__':
    unittest.main()
