"""Synthetic detector recordings for tests, demos and tuning.

The simulator works backwards from the screen: the subject looks at a
sequence of targets (viewport fractions), a "true" affine map from
normalized detector space to the screen is inverted to find the detector
sample for each target, and Gaussian jitter, detector glitches and face
dropouts are added on top.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config.constants import CalibrationDefaults
from .domain.geometry import AffineMatrix, CalibrationSample, Point, Viewport


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of a synthetic recording.

    Attributes:
        fixation_ms: How long the subject looks at each target
        frame_interval_ms: Camera frame period (33.3 ms = 30 fps)
        noise_std: Gaussian jitter of the normalized sample
        glitch_rate: Fraction of frames replaced by a random far-away sample
        dropout_rate: Fraction of frames without a face
        seed: RNG seed
    """

    fixation_ms: float = 1500.0
    frame_interval_ms: float = 1000.0 / 30.0
    noise_std: float = 0.002
    glitch_rate: float = 0.0
    dropout_rate: float = 0.0
    seed: Optional[int] = 0


def synthetic_matrix(
    viewport: Viewport,
    raw_x_range: Tuple[float, float] = (0.35, 0.65),
    raw_y_range: Tuple[float, float] = (0.40, 0.60),
) -> AffineMatrix:
    """Affine map sending the given normalized box onto the whole viewport."""
    x0, x1 = raw_x_range
    y0, y1 = raw_y_range
    ax = viewport.width / (x1 - x0)
    by = viewport.height / (y1 - y0)
    return AffineMatrix(ax=ax, bx=0.0, cx=-ax * x0, ay=0.0, by=by, cy=-by * y0)


def simulate_recording(
    viewport: Viewport,
    targets: Sequence[Tuple[float, float]] = CalibrationDefaults.TARGETS,
    matrix: Optional[AffineMatrix] = None,
    config: Optional[SimulationConfig] = None,
) -> pd.DataFrame:
    """Generate a recording of fixations on ``targets``.

    Returns:
        DataFrame with time_ms, norm_x, norm_y (NaN on dropout frames) plus the
        ground-truth screen target target_x_px/target_y_px.
    """
    cfg = config or SimulationConfig()
    matrix = matrix or synthetic_matrix(viewport)
    to_raw = matrix.inverse()
    rng = np.random.default_rng(cfg.seed)

    frames_per_target = max(1, int(round(cfg.fixation_ms / cfg.frame_interval_ms)))
    screen = np.repeat(
        np.array([(fx * viewport.width, fy * viewport.height) for fx, fy in targets], dtype=float),
        frames_per_target,
        axis=0,
    )
    n = len(screen)
    raw = np.array([(p.x, p.y) for p in (to_raw.apply(Point(*s)) for s in screen)], dtype=float)
    raw = raw + rng.normal(0.0, cfg.noise_std, size=raw.shape)

    if cfg.glitch_rate > 0:
        glitch = rng.random(n) < cfg.glitch_rate
        raw[glitch] = rng.uniform(0.0, 1.0, size=(int(glitch.sum()), 2))

    if cfg.dropout_rate > 0:
        dropout = rng.random(n) < cfg.dropout_rate
        raw[dropout] = np.nan

    return pd.DataFrame(
        {
            "time_ms": np.arange(n, dtype=float) * cfg.frame_interval_ms,
            "norm_x": raw[:, 0],
            "norm_y": raw[:, 1],
            "target_x_px": screen[:, 0],
            "target_y_px": screen[:, 1],
        }
    )


def simulate_calibration_samples(
    viewport: Viewport,
    matrix: Optional[AffineMatrix] = None,
    targets: Sequence[Tuple[float, float]] = CalibrationDefaults.TARGETS,
    noise_std: float = 0.0,
    seed: Optional[int] = 0,
) -> List[CalibrationSample]:
    """Calibration correspondences consistent with ``matrix`` (plus optional jitter)."""
    matrix = matrix or synthetic_matrix(viewport)
    to_raw = matrix.inverse()
    rng = np.random.default_rng(seed)

    samples = []
    for fx, fy in targets:
        screen = Point(fx * viewport.width, fy * viewport.height)
        raw = to_raw.apply(screen)
        if noise_std > 0:
            dx, dy = rng.normal(0.0, noise_std, size=2)
            raw = Point(raw.x + float(dx), raw.y + float(dy))
        samples.append(CalibrationSample(raw=raw, screen=screen))
    return samples
