"""Calibration fitting."""

from .affine import AffineCalibrator, CalibrationFit, fit_affine

__all__ = ["AffineCalibrator", "CalibrationFit", "fit_affine"]
