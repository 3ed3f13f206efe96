"""Base class and per-frame context for each step of the gaze pipeline."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..domain.geometry import AffineMatrix, Point, Viewport


@dataclass
class FrameContext:
    """Mutable state of one frame while it moves through the stages.

    ``point`` is the value flowing between stages; a stage that sets it to
    None ends the frame. The named fields keep each intermediate result.
    """

    timestamp_ms: float
    point: Optional[Point]
    viewport: Viewport
    source_aspect: float
    matrix: Optional[AffineMatrix] = None
    normalized: Optional[Point] = None
    mapped: Optional[Point] = None
    gated: Optional[Point] = None
    gaze: Optional[Point] = None


class IFrameStage(ABC):
    """Abstract per-frame stage.

    Each concrete implementation wraps exactly one pipeline component and
    owns that component's state for the lifetime of the session.
    """

    @abstractmethod
    def process(self, frame: FrameContext) -> None:
        """Update the frame context in-place according to the stage's behaviour."""
        raise NotImplementedError

    def reset_screen_space(self) -> None:
        """Drop state measured in screen pixels. Called when the projection changes."""
