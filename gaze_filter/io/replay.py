# gaze_filter/io/replay.py
"""Offline replay of recorded detector streams.

A recording is a table with one row per camera frame: ``time_ms`` plus the
reduced normalized sample ``norm_x``/``norm_y`` (empty when no face was
found). Replay feeds every row through a fresh TrackingSession, exactly as
the live driver would, and returns one output row per input row.
"""
from __future__ import annotations

import logging
from importlib import import_module
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..calibration import CalibrationFit
from ..config import GazeFilterConfiguration, ReplayDefaults
from ..domain.geometry import CalibrationSample, Point, Viewport
from ..session import TrackingSession
from .tsv import read_tsv, require_calibration_columns, require_recording_columns, write_tsv

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = [
    "time_ms",
    "norm_x",
    "norm_y",
    "filtered_x",
    "filtered_y",
    "mapped_x_px",
    "mapped_y_px",
    "gaze_x_px",
    "gaze_y_px",
    "status",
    "dwell_trigger",
]


def read_calibration_samples(source: str | Path | pd.DataFrame) -> List[CalibrationSample]:
    """Load calibration correspondences (raw_x, raw_y, screen_x, screen_y)."""
    df = source if isinstance(source, pd.DataFrame) else read_tsv(source)
    require_calibration_columns(df)
    return [
        CalibrationSample(
            raw=Point(float(row.raw_x), float(row.raw_y)),
            screen=Point(float(row.screen_x), float(row.screen_y)),
        )
        for row in df.itertuples(index=False)
    ]


def calibration_samples_to_frame(samples: Sequence[CalibrationSample]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "raw_x": [s.raw.x for s in samples],
            "raw_y": [s.raw.y for s in samples],
            "screen_x": [s.screen.x for s in samples],
            "screen_y": [s.screen.y for s in samples],
        }
    )


def _coord(point: Optional[Point], axis: str) -> float:
    if point is None:
        return np.nan
    return getattr(point, axis)


def replay_recording(
    recording: pd.DataFrame,
    config: Optional[GazeFilterConfiguration] = None,
    viewport: Optional[Viewport] = None,
    source_aspect: float = ReplayDefaults.SOURCE_ASPECT,
    calibration_samples: Optional[Sequence[CalibrationSample]] = None,
    observers: Iterable = (),
) -> pd.DataFrame:
    """Run a recording through a fresh session and return per-frame results.

    Args:
        recording: DataFrame with time_ms, norm_x, norm_y
        config: Pipeline configuration; GazeFilterConfiguration.for_replay() if None
        viewport: Target screen; 1920x1080 if None
        source_aspect: Camera aspect ratio used by the uncalibrated projection
        calibration_samples: If given, fitted and applied before the first frame
        observers: SessionObservers registered on the session

    Returns:
        DataFrame with the columns in OUTPUT_COLUMNS
    """
    require_recording_columns(recording)
    viewport = viewport or Viewport(ReplayDefaults.VIEWPORT_WIDTH, ReplayDefaults.VIEWPORT_HEIGHT)
    session = TrackingSession(
        viewport, source_aspect, config=config or GazeFilterConfiguration.for_replay()
    )
    for observer in observers:
        session.register_observer(observer)

    fit: Optional[CalibrationFit] = None
    if calibration_samples is not None:
        fit = session.calibrate(calibration_samples)

    times = recording["time_ms"].to_numpy(dtype=float)
    xs = recording["norm_x"].to_numpy(dtype=float)
    ys = recording["norm_y"].to_numpy(dtype=float)

    rows = []
    for t, nx, ny in zip(times, xs, ys):
        if np.isnan(nx) or np.isnan(ny):
            result = session.process_missing(t)
        else:
            result = session.process_sample(nx, ny, t)
        rows.append(
            (
                t,
                nx,
                ny,
                _coord(result.normalized, "x"),
                _coord(result.normalized, "y"),
                _coord(result.mapped, "x"),
                _coord(result.mapped, "y"),
                _coord(result.gaze, "x"),
                _coord(result.gaze, "y"),
                result.status.name.lower(),
                result.trigger is not None,
            )
        )

    out = pd.DataFrame(rows, columns=OUTPUT_COLUMNS)
    logger.info(
        "Replayed %d frames (%s), %d dwell triggers",
        len(out),
        "calibrated" if fit is not None else "uncalibrated",
        int(out["dwell_trigger"].sum()),
    )
    return out


def replay_file(
    input_path: str | Path,
    output_path: Optional[str | Path] = None,
    config: Optional[GazeFilterConfiguration] = None,
    viewport: Optional[Viewport] = None,
    source_aspect: float = ReplayDefaults.SOURCE_ASPECT,
    calibration_path: Optional[str | Path] = None,
    observers: Iterable = (),
) -> pd.DataFrame:
    """Replay a recording TSV, optionally writing the result as TSV."""
    samples = read_calibration_samples(calibration_path) if calibration_path else None
    out = replay_recording(
        read_tsv(input_path),
        config=config,
        viewport=viewport,
        source_aspect=source_aspect,
        calibration_samples=samples,
        observers=observers,
    )
    if output_path is not None:
        write_tsv(out, output_path)
    return out


def replay_many(
    recordings: Sequence[pd.DataFrame],
    config: Optional[GazeFilterConfiguration] = None,
    viewport: Optional[Viewport] = None,
    source_aspect: float = ReplayDefaults.SOURCE_ASPECT,
    calibration_samples: Optional[Sequence[CalibrationSample]] = None,
    n_jobs: int = 1,
) -> List[pd.DataFrame]:
    """Replay independent recordings, each in its own session.

    Args:
        n_jobs: Number of parallel jobs (-1 = all CPUs, 1 = sequential).
            Anything other than 1 requires joblib.

    Results are returned in input order.
    """
    if n_jobs == 1:
        return [
            replay_recording(df, config, viewport, source_aspect, calibration_samples)
            for df in recordings
        ]

    try:
        joblib = import_module("joblib")
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "joblib is required for parallel replay; install via `pip install joblib`."
        ) from exc

    logger.info("Replaying %d recordings with n_jobs=%d", len(recordings), n_jobs)
    return list(joblib.Parallel(n_jobs=n_jobs)(
        joblib.delayed(replay_recording)(df, config, viewport, source_aspect, calibration_samples)
        for df in recordings
    ))
