"""Domain models for gaze samples, calibration data and pipeline results."""

from .geometry import Point, TimestampedPoint, CalibrationSample, Viewport, AffineMatrix
from .events import (
    FrameStatus,
    DwellPhase,
    DwellTriggerEvent,
    DwellState,
    DetectorFrame,
    FrameResult,
)

__all__ = [
    "Point",
    "TimestampedPoint",
    "CalibrationSample",
    "Viewport",
    "AffineMatrix",
    "FrameStatus",
    "DwellPhase",
    "DwellTriggerEvent",
    "DwellState",
    "DetectorFrame",
    "FrameResult",
]
