# gaze_filter/__init__.py
"""
Gaze pointer filter package.

Contains:
- Normalized-space smoothing (EMA + per-axis Kalman)
- Least-squares affine calibration
- Screen mapping, saccade rejection and velocity adaptive smoothing
- Dwell trigger
- Offline replay, simulation, metrics and plotting
"""

from .config import GazeFilterConfiguration
from .domain import (
    Point,
    TimestampedPoint,
    CalibrationSample,
    Viewport,
    AffineMatrix,
    DetectorFrame,
    FrameResult,
    FrameStatus,
    DwellTriggerEvent,
)
from .errors import GazeFilterError, InsufficientSamplesError, LandmarkError
from .filters import PointFilterChain, SaccadeGuard, VelocityAdaptiveSmoother
from .calibration import AffineCalibrator, CalibrationFit, fit_affine
from .mapping import GazeMapper
from .dwell import DwellEngine
from .engine import GazePipelineEngine
from .session import TrackingSession
from .driver import run_tracking, run_tracking_async

__version__ = "0.1.0"
