"""Exponential moving average over 2D points."""
from __future__ import annotations

from typing import Optional

from ..config.constants import FilterDefaults, ValidationMessages
from ..domain.geometry import Point


class EMAFilter:
    """Single-pole low-pass filter: out = alpha * in + (1 - alpha) * prev.

    The first sample is returned as-is and becomes the running state.
    """

    def __init__(self, alpha: float = FilterDefaults.EMA_ALPHA) -> None:
        if not 0.0 < alpha <= 1.0:
            raise ValueError(ValidationMessages.INVALID_EMA_ALPHA)
        self.alpha = alpha
        self._last: Optional[Point] = None

    @property
    def value(self) -> Optional[Point]:
        return self._last

    def next(self, x: float, y: float) -> Point:
        if self._last is None:
            self._last = Point(float(x), float(y))
            return self._last
        a = self.alpha
        self._last = Point(
            a * x + (1.0 - a) * self._last.x,
            a * y + (1.0 - a) * self._last.y,
        )
        return self._last
