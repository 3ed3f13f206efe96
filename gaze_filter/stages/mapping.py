"""Screen mapping stage."""
from __future__ import annotations

from .base import FrameContext, IFrameStage
from ..mapping import GazeMapper


class ScreenMappingStage(IFrameStage):
    """Project the filtered normalized point into viewport pixels."""

    def __init__(self, mapper: GazeMapper | None = None) -> None:
        self.mapper = mapper or GazeMapper()

    def process(self, frame: FrameContext) -> None:
        frame.mapped = self.mapper.map(
            frame.point, frame.matrix, frame.viewport, frame.source_aspect
        )
        frame.point = frame.mapped
