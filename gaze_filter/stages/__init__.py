"""Pipeline stages composing the per-frame gaze filter."""

from .base import FrameContext, IFrameStage
from .smoothing import NormalizedSmoothingStage, AdaptiveSmoothingStage
from .mapping import ScreenMappingStage
from .saccade_gate import SaccadeGateStage

__all__ = [
    "FrameContext",
    "IFrameStage",
    "NormalizedSmoothingStage",
    "ScreenMappingStage",
    "SaccadeGateStage",
    "AdaptiveSmoothingStage",
]
