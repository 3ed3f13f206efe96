"""Per-frame gaze pipeline orchestration."""
from __future__ import annotations

from typing import List, Optional, Protocol

from .config import GazeFilterConfiguration
from .domain.events import FrameResult, FrameStatus
from .domain.geometry import AffineMatrix, Point, Viewport
from .stages import (
    AdaptiveSmoothingStage,
    FrameContext,
    IFrameStage,
    NormalizedSmoothingStage,
    SaccadeGateStage,
    ScreenMappingStage,
)


class IGazePipeline(Protocol):
    """Protocol for running one frame through the gaze pipeline."""

    def run(
        self,
        sample: Optional[Point],
        timestamp_ms: float,
        viewport: Viewport,
        source_aspect: float,
        matrix: Optional[AffineMatrix] = None,
    ) -> FrameResult:
        ...


def default_stages(config: GazeFilterConfiguration) -> List[IFrameStage]:
    return [
        NormalizedSmoothingStage(config.point_filter),
        ScreenMappingStage(),
        SaccadeGateStage(config.saccade_guard),
        AdaptiveSmoothingStage(config.adaptive_smoother),
    ]


class GazePipelineEngine(IGazePipeline):
    """Pipeline of four stages: smooth, map, gate, adaptive smooth.

    Stages run in order until one of them clears the flowing point. A frame
    without a detector sample touches no stage at all, so filter state is
    only ever advanced by real samples.
    """

    def __init__(
        self,
        config: Optional[GazeFilterConfiguration] = None,
        stages: List[IFrameStage] | None = None,
    ) -> None:
        self.config = config or GazeFilterConfiguration()
        self.stages: List[IFrameStage] = stages or default_stages(self.config)

    def reset_screen_space(self) -> None:
        """Reset every stage whose state lives in screen pixels.

        Normalized-space smoothing is kept; it does not depend on the projection.
        """
        for stage in self.stages:
            stage.reset_screen_space()

    def run(
        self,
        sample: Optional[Point],
        timestamp_ms: float,
        viewport: Viewport,
        source_aspect: float,
        matrix: Optional[AffineMatrix] = None,
    ) -> FrameResult:
        if sample is None:
            return FrameResult(timestamp_ms=timestamp_ms, status=FrameStatus.NO_SAMPLE)

        frame = FrameContext(
            timestamp_ms=timestamp_ms,
            point=sample,
            viewport=viewport,
            source_aspect=source_aspect,
            matrix=matrix,
        )
        for stage in self.stages:
            stage.process(frame)
            if frame.point is None:
                break

        status = FrameStatus.PUBLISHED if frame.gaze is not None else FrameStatus.REJECTED
        return FrameResult(
            timestamp_ms=timestamp_ms,
            status=status,
            normalized=frame.normalized,
            mapped=frame.mapped,
            gaze=frame.gaze,
        )
