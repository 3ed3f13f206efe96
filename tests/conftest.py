from __future__ import annotations

from typing import List, Optional

import numpy as np
import pytest

from gaze_filter.calibration import CalibrationFit
from gaze_filter.config import LandmarkIndices
from gaze_filter.domain import DwellTriggerEvent, FrameResult, Viewport
from gaze_filter.io.observers import SessionObserver


def make_landmarks(
    left: tuple[float, float] = (0.45, 0.5),
    right: tuple[float, float] = (0.55, 0.5),
    radius: float = 0.01,
    n_points: int = 478,
    dims: int = 3,
) -> np.ndarray:
    """Face-mesh shaped array whose iris rings are centered on ``left``/``right``."""
    arr = np.full((n_points, dims), 0.5, dtype=float)
    offsets = [(radius, 0.0), (0.0, radius), (-radius, 0.0), (0.0, -radius)]
    for center, ring in ((left, LandmarkIndices.LEFT_IRIS), (right, LandmarkIndices.RIGHT_IRIS)):
        for idx, (dx, dy) in zip(ring, offsets):
            if idx < n_points:
                arr[idx, 0] = center[0] + dx
                arr[idx, 1] = center[1] + dy
    return arr


class RecordingObserver(SessionObserver):
    """Collects every notification for assertions."""

    def __init__(self) -> None:
        self.frames: List[FrameResult] = []
        self.triggers: List[DwellTriggerEvent] = []
        self.calibrations: List[Optional[CalibrationFit]] = []

    def on_frame(self, result: FrameResult) -> None:
        self.frames.append(result)

    def on_trigger(self, event: DwellTriggerEvent) -> None:
        self.triggers.append(event)

    def on_calibration_changed(self, fit: Optional[CalibrationFit]) -> None:
        self.calibrations.append(fit)


@pytest.fixture
def viewport() -> Viewport:
    return Viewport(1600.0, 900.0)


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()
