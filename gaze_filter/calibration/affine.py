"""Least-squares affine calibration from (normalized, screen) correspondences.

Both screen axes are regressed on the same design matrix ``[raw_x, raw_y, 1]``
through the normal equations. The 3x3 Gram matrix is inverted with the
explicit adjugate formula; a small regularization term is added to its
determinant so near-collinear target layouts still yield a finite matrix.

Such a matrix may be unreliable, so every fit also reports how close the raw
points are to a line:

    conditioning = det(G) / (N * Mxx * Myy)

where ``Mxx``/``Myy`` are the centered scatter sums of the raw coordinates.
This equals ``1 - r^2`` of raw x against raw y and does not depend on the
scale of the input. A fit whose conditioning is at or below
``CalibrationConfig.degenerate_tolerance`` is flagged and logged.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..config import CalibrationConfig
from ..config.constants import CalibrationDefaults
from ..domain.geometry import AffineMatrix, CalibrationSample
from ..errors import InsufficientSamplesError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationFit:
    """Result of an affine fit plus quality diagnostics."""

    matrix: AffineMatrix
    n_samples: int
    determinant: float
    conditioning: float
    degenerate: bool
    rms_error_px: float


def _as_arrays(samples: Sequence[CalibrationSample]) -> tuple[np.ndarray, np.ndarray]:
    raw = np.array([(s.raw.x, s.raw.y) for s in samples], dtype=float)
    screen = np.array([(s.screen.x, s.screen.y) for s in samples], dtype=float)
    return raw, screen


class AffineCalibrator:
    """Fit the 2x3 affine map used by the gaze mapper.

    The calibrator holds configuration only; every fit is independent and no
    sample data is retained.
    """

    def __init__(self, config: Optional[CalibrationConfig] = None) -> None:
        self.config = config or CalibrationConfig()

    def fit(self, samples: Sequence[CalibrationSample]) -> AffineMatrix:
        """Return the least-squares affine matrix for ``samples``.

        Raises:
            InsufficientSamplesError: fewer than 3 samples were supplied.
        """
        return self.fit_with_diagnostics(samples).matrix

    def fit_with_diagnostics(self, samples: Sequence[CalibrationSample]) -> CalibrationFit:
        n = len(samples)
        if n < CalibrationDefaults.SOLVER_MIN_SAMPLES:
            raise InsufficientSamplesError(CalibrationDefaults.SOLVER_MIN_SAMPLES, n)

        raw, screen = _as_arrays(samples)
        x, y = raw[:, 0], raw[:, 1]
        ux, uy = screen[:, 0], screen[:, 1]

        # Gram matrix [[sxx, sxy, sx], [sxy, syy, sy], [sx, sy, n]]
        sxx = float(np.dot(x, x))
        sxy = float(np.dot(x, y))
        syy = float(np.dot(y, y))
        sx = float(x.sum())
        sy = float(y.sum())
        nn = float(n)

        # Right-hand sides, one per screen axis
        x_ux = float(np.dot(x, ux))
        y_ux = float(np.dot(y, ux))
        s_ux = float(ux.sum())
        x_uy = float(np.dot(x, uy))
        y_uy = float(np.dot(y, uy))
        s_uy = float(uy.sum())

        det_raw = (
            sxx * (syy * nn - sy * sy)
            - sxy * (sxy * nn - sy * sx)
            + sx * (sxy * sy - syy * sx)
        )
        det = det_raw + self.config.regularization

        # Adjugate / det; the Gram matrix is symmetric, so is its inverse
        i00 = (syy * nn - sy * sy) / det
        i01 = (sx * sy - sxy * nn) / det
        i02 = (sxy * sy - syy * sx) / det
        i11 = (sxx * nn - sx * sx) / det
        i12 = (sxy * sx - sxx * sy) / det
        i22 = (sxx * syy - sxy * sxy) / det

        matrix = AffineMatrix(
            ax=i00 * x_ux + i01 * y_ux + i02 * s_ux,
            bx=i01 * x_ux + i11 * y_ux + i12 * s_ux,
            cx=i02 * x_ux + i12 * y_ux + i22 * s_ux,
            ay=i00 * x_uy + i01 * y_uy + i02 * s_uy,
            by=i01 * x_uy + i11 * y_uy + i12 * s_uy,
            cy=i02 * x_uy + i12 * y_uy + i22 * s_uy,
        )

        conditioning = self._conditioning(det_raw, sxx, syy, sx, sy, nn)
        degenerate = conditioning <= self.config.degenerate_tolerance

        predicted = raw @ matrix.as_array()[:, :2].T + matrix.as_array()[:, 2]
        rms = float(np.sqrt(np.mean(np.sum((predicted - screen) ** 2, axis=1))))

        if degenerate:
            logger.warning(
                "Calibration points are nearly collinear (conditioning %.3g <= %.3g); "
                "the fitted mapping may be unreliable",
                conditioning,
                self.config.degenerate_tolerance,
            )
        logger.debug("Affine fit on %d samples: rms=%.2f px, conditioning=%.3g", n, rms, conditioning)

        return CalibrationFit(
            matrix=matrix,
            n_samples=n,
            determinant=det_raw,
            conditioning=conditioning,
            degenerate=degenerate,
            rms_error_px=rms,
        )

    @staticmethod
    def _conditioning(det_raw: float, sxx: float, syy: float, sx: float, sy: float, n: float) -> float:
        mxx = sxx - sx * sx / n
        myy = syy - sy * sy / n
        scale = n * mxx * myy
        if not math.isfinite(scale) or scale <= 0.0:
            return 0.0
        return max(0.0, det_raw / scale)


def fit_affine(
    samples: Sequence[CalibrationSample],
    cfg: Optional[CalibrationConfig] = None,
) -> AffineMatrix:
    return AffineCalibrator(cfg).fit(samples)
