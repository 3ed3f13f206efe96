"""Stateful per-frame filters used by the gaze pipeline."""

from .ema import EMAFilter
from .kalman import Kalman1D
from .chain import PointFilterChain
from .saccade_guard import SaccadeGuard
from .adaptive import VelocityAdaptiveSmoother

__all__ = [
    "EMAFilter",
    "Kalman1D",
    "PointFilterChain",
    "SaccadeGuard",
    "VelocityAdaptiveSmoother",
]
