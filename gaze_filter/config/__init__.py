"""Configuration and constants for the gaze pipeline."""

from .config import (
    PointFilterConfig,
    CalibrationConfig,
    SaccadeGuardConfig,
    AdaptiveSmootherConfig,
    DwellConfig,
    GazeFilterConfiguration,
)
from .constants import (
    FilterDefaults,
    DwellDefaults,
    CalibrationDefaults,
    LandmarkIndices,
    ReplayDefaults,
    ValidationMessages,
    MIN_DELTA_TIME_MS,
)

__all__ = [
    "PointFilterConfig",
    "CalibrationConfig",
    "SaccadeGuardConfig",
    "AdaptiveSmootherConfig",
    "DwellConfig",
    "GazeFilterConfiguration",
    "FilterDefaults",
    "DwellDefaults",
    "CalibrationDefaults",
    "LandmarkIndices",
    "ReplayDefaults",
    "ValidationMessages",
    "MIN_DELTA_TIME_MS",
]
