"""
Mock controller implementation for testing gesture commands.
"""
from typing import List, Literal, Tuple


class MockController:
    """Mock controller that prints actions instead of executing them."""

    def __init__(self, verbose: bool = True):
        """Initialize the mock controller."""
        self.verbose = verbose
        self.zoom_count = 0
        self.move_count = 0
        self.swipe_count = 0
        self.zoom_total = 0.0
        self.last_position: Tuple[float, float] = (0.5, 0.5)
        self.swipes: List[str] = []

    async def zoom(self, delta: float) -> None:
        """Print zoom command instead of executing it."""
        self.zoom_count += 1
        self.zoom_total += delta
        if self.verbose:
            print(f"[MockController] Zoom: delta={delta:+.4f} (call #{self.zoom_count})")

    async def move(self, x: float, y: float) -> None:
        """Record the hand position; printing every frame would flood the console."""
        self.move_count += 1
        self.last_position = (x, y)

    async def swipe(self, direction: Literal["left", "right"]) -> None:
        """Print swipe command instead of executing it."""
        self.swipe_count += 1
        self.swipes.append(direction)
        if self.verbose:
            print(f"[MockController] Swipe: direction={direction} (call #{self.swipe_count})")

    def reset_counters(self) -> None:
        """Reset action counters for testing."""
        self.zoom_count = 0
        self.move_count = 0
        self.swipe_count = 0
        self.zoom_total = 0.0
        self.last_position = (0.5, 0.5)
        self.swipes = []

