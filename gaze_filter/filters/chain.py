"""Smoothing chain for normalized detector output (EMA -> Kalman per axis)."""
from __future__ import annotations

from typing import Optional

from ..config import PointFilterConfig
from ..domain.geometry import Point
from .ema import EMAFilter
from .kalman import Kalman1D


class PointFilterChain:
    """Smooth raw normalized samples before they are mapped to the screen.

    The EMA removes high-frequency jitter, then an independent scalar Kalman
    filter per axis (no cross-axis covariance) tracks the EMA output.

    The first call returns the input unchanged and seeds both Kalman
    estimates with it, so there is no warm-up drift from the origin.
    """

    def __init__(self, config: Optional[PointFilterConfig] = None) -> None:
        self.config = config or PointFilterConfig()
        self._ema = EMAFilter(self.config.ema_alpha)
        self._kx: Optional[Kalman1D] = None
        self._ky: Optional[Kalman1D] = None

    def _make_kalman(self, initial: float) -> Kalman1D:
        cfg = self.config
        return Kalman1D(
            process_noise=cfg.kalman_process_noise,
            measurement_noise=cfg.kalman_measurement_noise,
            initial_estimate=initial,
            initial_variance=cfg.kalman_initial_variance,
        )

    def next(self, x: float, y: float) -> Point:
        smoothed = self._ema.next(x, y)
        if self._kx is None or self._ky is None:
            self._kx = self._make_kalman(smoothed.x)
            self._ky = self._make_kalman(smoothed.y)
            return smoothed
        return Point(self._kx.next(smoothed.x), self._ky.next(smoothed.y))
