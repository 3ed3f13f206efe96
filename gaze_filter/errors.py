"""Exceptions raised by the gaze pipeline."""
from __future__ import annotations


class GazeFilterError(Exception):
    """Base class for all package errors."""


class InsufficientSamplesError(GazeFilterError, ValueError):
    """Raised when a calibration fit is attempted with too few samples.

    Recoverable: collect more samples and retry. No matrix is produced and
    any previously applied calibration stays in place.
    """

    def __init__(self, required: int, received: int) -> None:
        self.required = required
        self.received = received
        super().__init__(
            f"Need at least {required} calibration samples, got {received}"
        )


class LandmarkError(GazeFilterError, ValueError):
    """Raised when detector landmarks cannot provide both iris rings."""
