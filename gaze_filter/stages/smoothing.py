"""Smoothing stages (normalized space and screen space)."""
from __future__ import annotations

from typing import Optional

from .base import FrameContext, IFrameStage
from ..config import AdaptiveSmootherConfig, PointFilterConfig
from ..filters import PointFilterChain, VelocityAdaptiveSmoother


class NormalizedSmoothingStage(IFrameStage):
    """Run the detector sample through the EMA -> Kalman chain."""

    def __init__(self, config: Optional[PointFilterConfig] = None) -> None:
        self.chain = PointFilterChain(config)

    def process(self, frame: FrameContext) -> None:
        frame.normalized = self.chain.next(frame.point.x, frame.point.y)
        frame.point = frame.normalized


class AdaptiveSmoothingStage(IFrameStage):
    """Velocity adaptive smoothing of the accepted screen point."""

    def __init__(self, config: Optional[AdaptiveSmootherConfig] = None) -> None:
        self.smoother = VelocityAdaptiveSmoother(config)

    def process(self, frame: FrameContext) -> None:
        frame.gaze = self.smoother.update(frame.point, frame.timestamp_ms)
        frame.point = frame.gaze

    def reset_screen_space(self) -> None:
        self.smoother.reset()
