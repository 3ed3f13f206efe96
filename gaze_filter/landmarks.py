"""Reduce face-mesh landmarks to a single normalized gaze sample."""
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .config.constants import LandmarkIndices
from .domain.geometry import Point
from .errors import LandmarkError


def _as_landmark_array(landmarks) -> np.ndarray:
    arr = np.asarray(landmarks, dtype=float)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise LandmarkError(
            f"Expected an (N, 2) or (N, 3) landmark array, got shape {arr.shape}"
        )
    if arr.shape[0] < LandmarkIndices.MIN_LANDMARKS:
        raise LandmarkError(
            f"Need at least {LandmarkIndices.MIN_LANDMARKS} landmarks for both iris rings, "
            f"got {arr.shape[0]}"
        )
    return arr


def _ring_center(arr: np.ndarray, indices: Sequence[int]) -> Point:
    ring = arr[list(indices), :2]
    cx, cy = ring.mean(axis=0)
    return Point(float(cx), float(cy))


def iris_centers(landmarks) -> Tuple[Point, Point]:
    """Return the (left, right) iris centers as the mean of each iris ring.

    Only the x/y columns are used; a z column, if present, is ignored.

    Raises:
        LandmarkError: the array is not 2D or holds fewer than 477 landmarks.
    """
    arr = _as_landmark_array(landmarks)
    return (
        _ring_center(arr, LandmarkIndices.LEFT_IRIS),
        _ring_center(arr, LandmarkIndices.RIGHT_IRIS),
    )


def gaze_sample(landmarks) -> Point:
    """Midpoint of the two iris centers in normalized image coordinates."""
    left, right = iris_centers(landmarks)
    return Point((left.x + right.x) * 0.5, (left.y + right.y) * 0.5)
