"""Per-frame results and dwell events produced by the pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

import numpy as np

from .geometry import Point


class FrameStatus(Enum):
    """Outcome of one pipeline step."""

    PUBLISHED = auto()
    REJECTED = auto()
    NO_SAMPLE = auto()


class DwellPhase(Enum):
    """Reported phase of the dwell state machine."""

    IDLE = auto()
    ARMING = auto()
    REFRACTORY = auto()


@dataclass(frozen=True)
class DwellTriggerEvent:
    """A dwell "click" at a screen position."""

    x: float
    y: float
    timestamp_ms: float


@dataclass(frozen=True)
class DwellState:
    """Snapshot of the dwell engine.

    ``armed_since`` is None while not arming; ``last_fired`` is None until the
    first trigger.
    """

    last_point: Optional[Point]
    last_timestamp: Optional[float]
    armed_since: Optional[float]
    last_fired: Optional[float]


@dataclass
class DetectorFrame:
    """Landmarks delivered by the external detector for one camera frame.

    ``landmarks`` is an (N, 2) or (N, 3) array of normalized image
    coordinates, or None when no face was found.
    """

    timestamp_ms: float
    landmarks: Optional[np.ndarray] = None


@dataclass
class FrameResult:
    """Everything one pipeline step produced.

    Attributes:
        timestamp_ms: Frame timestamp
        status: Whether a gaze point was published
        normalized: Filtered normalized point (None without a detector sample)
        mapped: Screen point before outlier rejection and smoothing
        gaze: Published screen point, None when nothing reliable is available
        trigger: Dwell event fired on this frame, if any
    """

    timestamp_ms: float
    status: FrameStatus
    normalized: Optional[Point] = None
    mapped: Optional[Point] = None
    gaze: Optional[Point] = None
    trigger: Optional[DwellTriggerEvent] = None

    @property
    def published(self) -> bool:
        return self.status == FrameStatus.PUBLISHED
