"""
Test cases for the end-to-end gesture pipeline.
"""
import math
import unittest
from types import SimpleNamespace

from handgesture.config import Cfg, ConfigError, StabilizerConfig
from handgesture.controller_mock import MockController
from handgesture.pipeline import GesturePipeline, dispatch
from handgesture.types import ControllerProto, FrameResult, PositionCommand, SwipeCommand, ZoomCommand

from tests.hands import make_hand

FPS = 30.0


def trajectory(pipeline, frames, start_t=0.0):
    return [pipeline.process_frame(f, t_now=start_t + i / FPS).gesture for i, f in enumerate(frames)]


class TestGesturePipeline(unittest.TestCase):
    """Test the pipeline on synthetic landmark streams."""

    def setUp(self):
        self.pipeline = GesturePipeline()

    def test_idle_is_idempotent(self):
        """Repeated no-hand frames always give none/0 and no filter state."""
        for i, landmarks in enumerate([None, [], None, [(0.5, 0.5)] * 20]):
            result = self.pipeline.process_frame(landmarks, t_now=i / FPS)
            self.assertEqual((result.gesture, result.confidence), ("none", 0.0))
            self.assertEqual(result.events, [])
            self.assertIsNone(self.pipeline.smoother.bank)

    def test_constant_pose_enters_after_entry_frames(self):
        out = trajectory(self.pipeline, [make_hand("fist")] * 6)
        self.assertEqual(out, ["none", "none", "none", "fist", "fist", "fist"])

    def test_result_fields(self):
        result = None
        for i in range(4):
            result = self.pipeline.process_frame(make_hand("point"), t_now=i / FPS, handedness="Right")
        self.assertEqual(result.gesture, "point")
        self.assertEqual(result.confidence, 0.9)
        self.assertEqual(result.raw_gesture, "point")
        self.assertEqual(result.handedness, "right")
        self.assertIsNotNone(result.features)

    def test_hand_loss_resets_everything(self):
        trajectory(self.pipeline, [make_hand("open")] * 5)
        result = self.pipeline.process_frame(None, t_now=1.0)
        self.assertEqual(result.gesture, "none")
        self.assertIsNone(self.pipeline.smoother.bank)
        self.assertEqual(self.pipeline.gesture, "none")
        self.assertEqual(self.pipeline.controls.hand_x_filter.value, 0.5)

    def test_round_trip_reset(self):
        """After a no-hand frame, a fresh pose replays exactly like a cold start."""
        history = [make_hand("open", dx=0.01 * i) for i in range(6)]
        history += [make_hand("pinch", pinch=0.2)] * 5 + [make_hand("point")] * 3
        trajectory(self.pipeline, history)
        self.pipeline.process_frame(None, t_now=1.0)

        fresh = [make_hand("fist", dx=0.05)] * 8
        warm = trajectory(self.pipeline, fresh, start_t=2.0)
        cold = trajectory(GesturePipeline(), fresh, start_t=2.0)
        self.assertEqual(warm, cold)

    def test_degenerate_geometry_is_none_without_reset(self):
        collapsed = [(0.5, 0.5, 0.0)] * 21
        result = self.pipeline.process_frame(collapsed, t_now=0.0)
        self.assertEqual(result.raw_gesture, "none")
        self.assertIsNone(result.features)
        self.assertIsNotNone(self.pipeline.smoother.bank)

    def test_malformed_input_does_not_raise(self):
        huge = make_hand("fist")
        huge[3] = (10 ** 400, 0.5, 0.0)
        bad_inputs = ["not a hand", 42, [None] * 21, [("a", "b")] * 21, [(math.nan, 0.5)] * 21, huge]
        for i, bad in enumerate(bad_inputs):
            result = self.pipeline.process_frame(bad, t_now=i / FPS)
            self.assertEqual(result.gesture, "none")

    def test_recovers_after_extreme_frames(self):
        """Absurdly large coordinates do not leave the pipeline stuck on "none"."""
        extreme = [[(1e308, 1e308, 0.0)] * 21, [(-1e308, -1e308, 0.0)] * 21]
        frames = extreme + [make_hand("fist")] * 10
        self.assertEqual(trajectory(self.pipeline, frames)[-1], "fist")

    def test_accepts_attribute_landmarks(self):
        """MediaPipe-style objects with x/y/z attributes are accepted."""
        hand = SimpleNamespace(landmark=[SimpleNamespace(x=x, y=y, z=z) for x, y, z in make_hand("fist")])
        out = [self.pipeline.process_frame(hand, t_now=i / FPS).gesture for i in range(4)]
        self.assertEqual(out[-1], "fist")

    def test_open_swipe(self):
        """An open palm sweeping right emits position updates and rate-limited swipes."""
        frames = [make_hand("open")] * 4 + [make_hand("open", dx=0.05 * i) for i in range(1, 21)]
        swipes, positions = [], 0
        for i, landmarks in enumerate(frames):
            result = self.pipeline.process_frame(landmarks, t_now=i / FPS)
            positions += sum(isinstance(e, PositionCommand) for e in result.events)
            swipes += [(i / FPS, e) for e in result.events if isinstance(e, SwipeCommand)]

        self.assertGreater(positions, 0)
        self.assertTrue(swipes)
        self.assertTrue(all(e.direction == "right" and e.gesture == "open" for _, e in swipes))
        times = [t for t, _ in swipes]
        for a, b in zip(times, times[1:]):
            self.assertGreater(b - a, 0.6)

    def test_pinch_spread_zooms_in(self):
        pipeline = GesturePipeline(Cfg(stabilizer=StabilizerConfig(entry_frames=1, exit_frames=1)))
        frames = [make_hand("pinch", pinch=0.1)] * 3 + [make_hand("pinch", pinch=0.1 + 0.02 * i) for i in range(1, 8)]
        zooms = []
        for i, landmarks in enumerate(frames):
            result = pipeline.process_frame(landmarks, t_now=i / FPS)
            zooms += [e for e in result.events if isinstance(e, ZoomCommand)]
        self.assertTrue(zooms)
        self.assertTrue(all(z.delta > 0 for z in zooms))

    def test_invalid_config_rejected(self):
        with self.assertRaises(ConfigError):
            GesturePipeline(Cfg(stabilizer=StabilizerConfig(entry_frames=0, exit_frames=2)))


class TestDispatch(unittest.IsolatedAsyncioTestCase):
    """Test forwarding events to a controller."""

    async def test_dispatch_to_mock(self):
        controller = MockController(verbose=False)
        self.assertIsInstance(controller, ControllerProto)

        result = FrameResult(gesture="open", confidence=0.85, events=[
            PositionCommand(x=0.4, y=0.6),
            SwipeCommand(direction="left"),
            ZoomCommand(delta=0.1),
        ])
        count = await dispatch(result, controller)

        self.assertEqual(count, 3)
        self.assertEqual(controller.last_position, (0.4, 0.6))
        self.assertEqual(controller.swipes, ["left"])
        self.assertAlmostEqual(controller.zoom_total, 0.1)

    async def test_dispatch_nothing(self):
        controller = MockController(verbose=False)
        self.assertEqual(await dispatch(FrameResult(gesture="none", confidence=0.0), controller), 0)
        self.assertEqual(controller.move_count, 0)


if __name__ == '__main__':
    unittest.main()
