# gaze_filter/config/config.py
"""
Configuration classes for the gaze pointer pipeline.

This module defines every tunable parameter of:
  - normalized-space smoothing (EMA + per-axis Kalman)
  - affine calibration fitting
  - screen-space outlier rejection and adaptive smoothing
  - the dwell trigger

Example:
    >>> from gaze_filter.config import GazeFilterConfiguration, DwellConfig
    >>>
    >>> # Defaults everywhere
    >>> cfg = GazeFilterConfiguration()
    >>>
    >>> # Slower dwell, stricter velocity gate
    >>> cfg = GazeFilterConfiguration(
    ...     dwell=DwellConfig(dwell_ms=900.0, velocity_threshold_px_per_ms=0.2)
    ... )
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    CalibrationDefaults,
    DwellDefaults,
    FilterDefaults,
    ReplayDefaults,
    ValidationMessages,
)


@dataclass(frozen=True)
class PointFilterConfig:
    """
    Configuration for the EMA -> Kalman chain on normalized detector output.
    """

    # Weight of the newest sample in the EMA
    ema_alpha: float = FilterDefaults.EMA_ALPHA

    # Scalar Kalman per axis: process noise Q, measurement noise R, initial P
    kalman_process_noise: float = FilterDefaults.KALMAN_PROCESS_NOISE
    kalman_measurement_noise: float = FilterDefaults.KALMAN_MEASUREMENT_NOISE
    kalman_initial_variance: float = FilterDefaults.KALMAN_INITIAL_VARIANCE

    def __post_init__(self) -> None:
        if not 0.0 < self.ema_alpha <= 1.0:
            raise ValueError(ValidationMessages.INVALID_EMA_ALPHA)
        if self.kalman_process_noise <= 0 or self.kalman_measurement_noise <= 0:
            raise ValueError(ValidationMessages.INVALID_NOISE)
        if self.kalman_initial_variance < 0:
            raise ValueError(ValidationMessages.INVALID_VARIANCE)


@dataclass(frozen=True)
class CalibrationConfig:
    """
    Configuration for the least-squares affine calibration.
    """

    # Samples required by the session before a fit is attempted
    min_samples: int = CalibrationDefaults.POLICY_MIN_SAMPLES

    # Added to the Gram determinant so near-collinear layouts stay finite
    regularization: float = CalibrationDefaults.REGULARIZATION

    # Collinearity measure (1 - r^2 of raw x vs raw y) at or below this marks the fit as degenerate
    degenerate_tolerance: float = CalibrationDefaults.DEGENERATE_TOLERANCE

    def __post_init__(self) -> None:
        if self.min_samples < CalibrationDefaults.SOLVER_MIN_SAMPLES:
            raise ValueError(ValidationMessages.INVALID_MIN_SAMPLES)
        if self.regularization < 0:
            raise ValueError(ValidationMessages.INVALID_REGULARIZATION)
        if self.degenerate_tolerance < 0:
            raise ValueError(ValidationMessages.INVALID_TOLERANCE)


@dataclass(frozen=True)
class SaccadeGuardConfig:
    """
    Configuration for the jump/cooldown outlier gate in screen space.
    """

    jump_px: float = FilterDefaults.SACCADE_JUMP_PX
    block_ms: float = FilterDefaults.SACCADE_BLOCK_MS

    # None: a far-away gaze is rejected for as long as it stays far away.
    # Set: after this many ms of continuous rejection the next sample becomes
    # the new reference point and the cooldown is lifted.
    reacquire_ms: Optional[float] = None

    def __post_init__(self) -> None:
        if self.jump_px <= 0:
            raise ValueError(ValidationMessages.INVALID_JUMP)
        if self.block_ms < 0:
            raise ValueError(ValidationMessages.INVALID_BLOCK)
        if self.reacquire_ms is not None and self.reacquire_ms <= 0:
            raise ValueError(ValidationMessages.INVALID_REACQUIRE)


@dataclass(frozen=True)
class AdaptiveSmootherConfig:
    """
    Configuration for the velocity adaptive smoother in screen space.

    Velocities are in px/ms; blend factors are the weight of the new sample.
    """

    alpha_min: float = FilterDefaults.ADAPTIVE_ALPHA_MIN
    alpha_max: float = FilterDefaults.ADAPTIVE_ALPHA_MAX
    v_low: float = FilterDefaults.ADAPTIVE_V_LOW
    v_high: float = FilterDefaults.ADAPTIVE_V_HIGH

    def __post_init__(self) -> None:
        if not 0.0 <= self.alpha_min <= self.alpha_max <= 1.0:
            raise ValueError(ValidationMessages.INVALID_ALPHA_RANGE)
        if not 0.0 <= self.v_low < self.v_high:
            raise ValueError(ValidationMessages.INVALID_VELOCITY_RANGE)


@dataclass(frozen=True)
class DwellConfig:
    """
    Configuration for the velocity-gated dwell trigger.
    """

    dwell_ms: float = DwellDefaults.DWELL_MS

    # Measured on published screen pixels, so it scales with display resolution
    velocity_threshold_px_per_ms: float = DwellDefaults.VELOCITY_THRESHOLD_PX_PER_MS

    # Slow time required before dwell time starts counting
    arm_ms: float = DwellDefaults.ARM_MS

    refractory_ms: float = DwellDefaults.REFRACTORY_MS

    # Sessions skip the dwell engine entirely when False
    enabled: bool = True

    def __post_init__(self) -> None:
        if self.dwell_ms <= 0:
            raise ValueError(ValidationMessages.INVALID_DWELL)
        if self.velocity_threshold_px_per_ms <= 0:
            raise ValueError(ValidationMessages.INVALID_THRESHOLD)
        if self.arm_ms < 0:
            raise ValueError(ValidationMessages.INVALID_ARM)
        if self.refractory_ms < 0:
            raise ValueError(ValidationMessages.INVALID_REFRACTORY)


@dataclass(frozen=True)
class GazeFilterConfiguration:
    """Complete pipeline configuration.

    Attributes:
        point_filter: EMA/Kalman settings for normalized samples
        calibration: Affine fit settings
        saccade_guard: Jump rejection settings
        adaptive_smoother: Velocity adaptive smoothing settings
        dwell: Dwell trigger settings
    """

    point_filter: PointFilterConfig = field(default_factory=PointFilterConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    saccade_guard: SaccadeGuardConfig = field(default_factory=SaccadeGuardConfig)
    adaptive_smoother: AdaptiveSmootherConfig = field(default_factory=AdaptiveSmootherConfig)
    dwell: DwellConfig = field(default_factory=DwellConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "point_filter": asdict(self.point_filter),
            "calibration": asdict(self.calibration),
            "saccade_guard": asdict(self.saccade_guard),
            "adaptive_smoother": asdict(self.adaptive_smoother),
            "dwell": asdict(self.dwell),
        }

    @classmethod
    def for_replay(cls) -> GazeFilterConfiguration:
        """Defaults with saccade re-acquisition enabled for offline recordings."""
        return cls(saccade_guard=SaccadeGuardConfig(reacquire_ms=ReplayDefaults.REACQUIRE_MS))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GazeFilterConfiguration:
        """Load from dictionary; missing sections fall back to defaults."""
        return cls(
            point_filter=PointFilterConfig(**data.get("point_filter", {})),
            calibration=CalibrationConfig(**data.get("calibration", {})),
            saccade_guard=SaccadeGuardConfig(**data.get("saccade_guard", {})),
            adaptive_smoother=AdaptiveSmootherConfig(**data.get("adaptive_smoother", {})),
            dwell=DwellConfig(**data.get("dwell", {})),
        )

    @classmethod
    def from_json(cls, path: str | Path) -> GazeFilterConfiguration:
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_json(self, path: str | Path) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
