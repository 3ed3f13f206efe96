"""Geometric value types shared by every pipeline stage.

A :class:`Point` is either in normalized detector space (roughly 0..1) or in
screen pixels depending on where it sits in the pipeline; the type does not
track which, so stages document the space they expect.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict

import numpy as np

from ..config.constants import ValidationMessages


@dataclass(frozen=True)
class Point:
    """2D position."""

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class TimestampedPoint:
    """Point with a monotonic timestamp in milliseconds."""

    x: float
    y: float
    timestamp_ms: float

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class CalibrationSample:
    """One calibration correspondence.

    ``raw`` is the filtered normalized detector point recorded while the user
    looked at the on-screen target ``screen`` (pixels).
    """

    raw: Point
    screen: Point


@dataclass(frozen=True)
class Viewport:
    """Screen area the pointer is mapped into, in pixels."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(ValidationMessages.INVALID_VIEWPORT)

    @property
    def aspect(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class AffineMatrix:
    """2x3 affine map from normalized detector space to screen pixels.

    screen_x = ax * raw_x + bx * raw_y + cx
    screen_y = ay * raw_x + by * raw_y + cy
    """

    ax: float
    bx: float
    cx: float
    ay: float
    by: float
    cy: float

    def apply(self, point: Point) -> Point:
        return Point(
            self.ax * point.x + self.bx * point.y + self.cx,
            self.ay * point.x + self.by * point.y + self.cy,
        )

    def as_array(self) -> np.ndarray:
        return np.array(
            [[self.ax, self.bx, self.cx], [self.ay, self.by, self.cy]], dtype=float
        )

    def inverse(self) -> AffineMatrix:
        """Return the map from screen pixels back to normalized space.

        Raises numpy.linalg.LinAlgError if the linear part is singular.
        """
        linear = np.array([[self.ax, self.bx], [self.ay, self.by]], dtype=float)
        inv = np.linalg.inv(linear)
        offset = -inv @ np.array([self.cx, self.cy], dtype=float)
        return AffineMatrix(
            ax=float(inv[0, 0]),
            bx=float(inv[0, 1]),
            cx=float(offset[0]),
            ay=float(inv[1, 0]),
            by=float(inv[1, 1]),
            cy=float(offset[1]),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "ax": self.ax,
            "bx": self.bx,
            "cx": self.cx,
            "ay": self.ay,
            "by": self.by,
            "cy": self.cy,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> AffineMatrix:
        return cls(**{k: float(data[k]) for k in ("ax", "bx", "cx", "ay", "by", "cy")})
