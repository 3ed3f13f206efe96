# gaze_filter/config/constants.py
"""Default tuning values and fixed constants for the gaze pipeline."""

from __future__ import annotations


class FilterDefaults:
    """Defaults for the normalized-space and screen-space filters."""

    # EMA on normalized detector output
    EMA_ALPHA: float = 0.2

    # Scalar Kalman per axis
    KALMAN_PROCESS_NOISE: float = 0.05
    KALMAN_MEASUREMENT_NOISE: float = 0.1
    KALMAN_INITIAL_VARIANCE: float = 1.0

    # Saccade guard (screen pixels / ms)
    SACCADE_JUMP_PX: float = 120.0
    SACCADE_BLOCK_MS: float = 90.0

    # Velocity adaptive smoother (blend factor bounds, velocity bounds in px/ms)
    ADAPTIVE_ALPHA_MIN: float = 0.1
    ADAPTIVE_ALPHA_MAX: float = 0.7
    ADAPTIVE_V_LOW: float = 0.03
    ADAPTIVE_V_HIGH: float = 0.5


class DwellDefaults:
    """Defaults for the dwell trigger."""

    DWELL_MS: float = 700.0
    VELOCITY_THRESHOLD_PX_PER_MS: float = 0.30
    ARM_MS: float = 0.0
    REFRACTORY_MS: float = 600.0


class CalibrationDefaults:
    """Defaults for the affine calibration fit."""

    # The solver needs 3 points; sessions ask for one more for robustness.
    SOLVER_MIN_SAMPLES: int = 3
    POLICY_MIN_SAMPLES: int = 4

    # Added to the Gram determinant before inversion
    REGULARIZATION: float = 1e-10

    # 1 - r^2 of the raw calibration points at or below which a fit is reported as degenerate
    DEGENERATE_TOLERANCE: float = 1e-3

    # Target layout as viewport fractions: four corners inset by 10% plus the center
    TARGETS: tuple[tuple[float, float], ...] = (
        (0.1, 0.1),
        (0.9, 0.1),
        (0.5, 0.5),
        (0.1, 0.9),
        (0.9, 0.9),
    )


class LandmarkIndices:
    """Iris ring indices in the 478-point face mesh."""

    LEFT_IRIS: tuple[int, ...] = (468, 469, 470, 471)
    RIGHT_IRIS: tuple[int, ...] = (473, 474, 475, 476)
    MIN_LANDMARKS: int = 477


# Floor for every timestamp delta used in a velocity computation (ms)
MIN_DELTA_TIME_MS: float = 1.0


class ValidationMessages:
    """Standard validation and error messages."""

    INVALID_EMA_ALPHA = "ema_alpha must be in (0, 1]"
    INVALID_NOISE = "Kalman noise terms must be > 0"
    INVALID_VARIANCE = "kalman_initial_variance must be >= 0"
    INVALID_MIN_SAMPLES = "min_samples must be >= 3"
    INVALID_REGULARIZATION = "regularization must be >= 0"
    INVALID_TOLERANCE = "degenerate_tolerance must be >= 0"
    INVALID_JUMP = "jump_px must be > 0"
    INVALID_BLOCK = "block_ms must be >= 0"
    INVALID_REACQUIRE = "reacquire_ms must be > 0 when set"
    INVALID_ALPHA_RANGE = "alpha bounds must satisfy 0 <= alpha_min <= alpha_max <= 1"
    INVALID_VELOCITY_RANGE = "velocity bounds must satisfy 0 <= v_low < v_high"
    INVALID_DWELL = "dwell_ms must be > 0"
    INVALID_THRESHOLD = "velocity_threshold_px_per_ms must be > 0"
    INVALID_ARM = "arm_ms must be >= 0"
    INVALID_REFRACTORY = "refractory_ms must be >= 0"
    INVALID_VIEWPORT = "viewport width and height must be > 0"
    INVALID_ASPECT = "source_aspect must be > 0"
    ENGINE_CONFIG_MISMATCH = "config differs from the configuration of the supplied engine"
    MISSING_RECORDING_COLUMNS = "Recording is missing required columns"
    MISSING_CALIBRATION_COLUMNS = "Calibration table is missing required columns"


class ReplayDefaults:
    """Geometry and guard settings assumed when replaying a recording offline."""

    VIEWPORT_WIDTH: float = 1920.0
    VIEWPORT_HEIGHT: float = 1080.0

    # 640x480 webcam
    SOURCE_ASPECT: float = 4.0 / 3.0

    # Recordings move between targets; the guard takes the new target after this long
    REACQUIRE_MS: float = 150.0
