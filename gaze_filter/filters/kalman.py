"""Scalar Kalman filter with a random-walk state model."""
from __future__ import annotations

from ..config.constants import FilterDefaults, ValidationMessages


class Kalman1D:
    """One-dimensional Kalman filter with fixed noise terms.

    Each call performs predict and update in one step::

        P += Q
        K = P / (P + R)
        x += K * (z - x)
        P *= 1 - K

    There is no reset; the filter is meant to run for the whole session.
    """

    def __init__(
        self,
        process_noise: float = FilterDefaults.KALMAN_PROCESS_NOISE,
        measurement_noise: float = FilterDefaults.KALMAN_MEASUREMENT_NOISE,
        initial_estimate: float = 0.0,
        initial_variance: float = FilterDefaults.KALMAN_INITIAL_VARIANCE,
    ) -> None:
        if process_noise <= 0 or measurement_noise <= 0:
            raise ValueError(ValidationMessages.INVALID_NOISE)
        if initial_variance < 0:
            raise ValueError(ValidationMessages.INVALID_VARIANCE)
        self.process_noise = process_noise
        self.measurement_noise = measurement_noise
        self._x = float(initial_estimate)
        self._p = float(initial_variance)

    @property
    def estimate(self) -> float:
        return self._x

    @property
    def variance(self) -> float:
        return self._p

    def next(self, z: float) -> float:
        self._p += self.process_noise
        gain = self._p / (self._p + self.measurement_noise)
        self._x += gain * (z - self._x)
        self._p *= 1.0 - gain
        return self._x
