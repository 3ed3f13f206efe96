"""Outlier rejection stage."""
from __future__ import annotations

import logging
from typing import Optional

from .base import FrameContext, IFrameStage
from ..config import SaccadeGuardConfig
from ..filters import SaccadeGuard

logger = logging.getLogger(__name__)


class SaccadeGateStage(IFrameStage):
    """Drop mapped points that jump too far; ends the frame on rejection."""

    def __init__(self, config: Optional[SaccadeGuardConfig] = None) -> None:
        self.guard = SaccadeGuard(config)

    def process(self, frame: FrameContext) -> None:
        frame.gated = self.guard.accept(frame.point, frame.timestamp_ms)
        if frame.gated is None:
            logger.debug("Rejected (%.1f, %.1f) at t=%.0f ms", frame.point.x, frame.point.y,
                         frame.timestamp_ms)
        frame.point = frame.gated

    def reset_screen_space(self) -> None:
        self.guard.reset()
