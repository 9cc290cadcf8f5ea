"""Per-landmark jitter suppression."""
import logging
from typing import Optional

import numpy as np

from .config import SmootherConfig
from .filters import KalmanBank
from .types import Frame, LandmarkPoint

logger = logging.getLogger(__name__)


class LandmarkSmoother:
    """
    Runs one independent Kalman filter per coordinate of every landmark.

    x/y and z have separate noise settings: depth from a monocular model is
    trusted less than the image-plane position. The filter bank is created
    lazily from the first frame it sees and seeded with that frame, so the
    output does not drift in from zero after a reset. An update that overflows
    re-seeds the bank from the current frame.
    """

    def __init__(self, cfg: Optional[SmootherConfig] = None):
        self.cfg = cfg or SmootherConfig()
        self.bank: Optional[KalmanBank] = None

    def _create_bank(self, measured: np.ndarray) -> KalmanBank:
        xy, z = self.cfg.xy, self.cfg.z
        process = np.array([xy.process_noise, xy.process_noise, z.process_noise])
        measurement = np.array([xy.measurement_noise, xy.measurement_noise, z.measurement_noise])
        logger.debug(f"Creating filter bank for {measured.shape[0]} landmarks")
        return KalmanBank(measured.shape, process, measurement, initial=measured)

    def smooth(self, frame: Frame) -> Frame:
        """
        Filter a frame and return a new, smoothed frame.

        Args:
            frame: Raw landmarks for one detected hand

        Returns:
            Frame of the same length and handedness with filtered coordinates
        """
        measured = frame.as_array()
        if self.bank is None or self.bank.shape != measured.shape:
            self.bank = self._create_bank(measured)

        with np.errstate(over="ignore", invalid="ignore"):
            estimate = self.bank.update(measured)
        if not np.all(np.isfinite(estimate)):
            logger.warning("Filter state overflowed, re-seeding from the current frame")
            self.bank = self._create_bank(measured)
            estimate = self.bank.update(measured)
        points = tuple(LandmarkPoint(float(x), float(y), float(z)) for x, y, z in estimate)
        return Frame(points, frame.handedness)

    def reset(self) -> None:
        """Drop all filter state; the next frame re-seeds the bank."""
        self.bank = None
