"""Recursive (Kalman-style) smoothing filters."""
from typing import Tuple, Union

import numpy as np

ArrayLike = Union[float, np.ndarray]


class KalmanBank:
    """
    A block of independent 1-D random-walk Kalman filters, updated together.

    Every element of the state runs::

        p_pred = p + q
        k = p_pred / (p_pred + r)
        x = x + k * (z - x)
        p = (1 - k) * p_pred

    ``process_noise`` and ``measurement_noise`` broadcast against ``shape``,
    so one bank can hold filters with per-axis noise.
    """

    def __init__(self, shape: Tuple[int, ...], process_noise: ArrayLike, measurement_noise: ArrayLike,
                 initial: ArrayLike = 0.0):
        self.shape = tuple(shape)
        self.q = np.broadcast_to(np.asarray(process_noise, dtype=float), self.shape)
        self.r = np.broadcast_to(np.asarray(measurement_noise, dtype=float), self.shape)
        self.estimate = np.zeros(self.shape)
        self.covariance = np.ones(self.shape)
        self.gain = np.zeros(self.shape)
        self.reset(initial)

    def update(self, measurement: ArrayLike) -> np.ndarray:
        """Fold one measurement into every filter and return the new estimates."""
        z = np.asarray(measurement, dtype=float)
        predicted = self.covariance + self.q
        self.gain = predicted / (predicted + self.r)
        self.estimate = self.estimate + self.gain * (z - self.estimate)
        self.covariance = (1.0 - self.gain) * predicted
        return self.estimate.copy()

    def reset(self, value: ArrayLike = 0.0) -> None:
        """Restore estimate ``value`` and unit covariance."""
        self.estimate = np.broadcast_to(np.asarray(value, dtype=float), self.shape).copy()
        self.covariance = np.ones(self.shape)
        self.gain = np.zeros(self.shape)


class ScalarKalman:
    """Single-value Kalman smoother, callable like the cursor smoothers."""

    def __init__(self, process_noise: float = 0.01, measurement_noise: float = 0.1, initial: float = 0.0):
        self._bank = KalmanBank((), process_noise, measurement_noise, initial)

    def __call__(self, measurement: float) -> float:
        return float(self._bank.update(measurement))

    @property
    def value(self) -> float:
        return float(self._bank.estimate)

    @property
    def covariance(self) -> float:
        return float(self._bank.covariance)

    def reset(self, value: float = 0.0) -> None:
        self._bank.reset(value)
