"""Velocity adaptive smoothing of the published screen position."""
from __future__ import annotations

import math
from typing import Optional

from ..config import AdaptiveSmootherConfig
from ..config.constants import MIN_DELTA_TIME_MS
from ..domain.geometry import Point


class VelocityAdaptiveSmoother:
    """EMA whose blend factor follows the pointer speed.

    Near-stationary gaze gets ``alpha_min`` (heavy smoothing); fast movement
    gets up to ``alpha_max`` so saccades and pursuits are tracked without
    visible lag. Velocity is measured in px/ms against the running point with
    the time delta floored to 1 ms.
    """

    def __init__(self, config: Optional[AdaptiveSmootherConfig] = None) -> None:
        self.config = config or AdaptiveSmootherConfig()
        self._x: Optional[float] = None
        self._y: Optional[float] = None
        self._last_t: float = 0.0

    @property
    def value(self) -> Optional[Point]:
        if self._x is None or self._y is None:
            return None
        return Point(self._x, self._y)

    def reset(self) -> None:
        self._x = None
        self._y = None
        self._last_t = 0.0

    def blend_factor(self, velocity: float) -> float:
        """Linear map of velocity from [v_low, v_high] onto [alpha_min, alpha_max], clamped."""
        cfg = self.config
        fraction = (velocity - cfg.v_low) / (cfg.v_high - cfg.v_low)
        fraction = min(1.0, max(0.0, fraction))
        return cfg.alpha_min + fraction * (cfg.alpha_max - cfg.alpha_min)

    def update(self, point: Point, timestamp: float) -> Point:
        if self._x is None or self._y is None:
            self._x, self._y = float(point.x), float(point.y)
            self._last_t = timestamp
            return Point(self._x, self._y)

        dt = max(MIN_DELTA_TIME_MS, timestamp - self._last_t)
        self._last_t = timestamp

        dx = point.x - self._x
        dy = point.y - self._y
        velocity = math.hypot(dx, dy) / dt
        a = self.blend_factor(velocity)

        self._x += a * dx
        self._y += a * dy
        return Point(self._x, self._y)
