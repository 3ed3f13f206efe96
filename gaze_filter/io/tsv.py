# gaze_filter/io/tsv.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from ..config.constants import ValidationMessages

RECORDING_COLUMNS = ("time_ms", "norm_x", "norm_y")
CALIBRATION_COLUMNS = ("raw_x", "raw_y", "screen_x", "screen_y")


def read_tsv(path: str | Path) -> pd.DataFrame:
    """
    Read a tab separated table (recordings, replay output, calibration samples).

    Empty cells become NaN; a recording row with NaN coordinates is a frame
    in which the detector found no face.
    """
    return pd.read_csv(path, sep="\t", low_memory=False)


def write_tsv(df: pd.DataFrame, path: str | Path) -> None:
    """
    Write a DataFrame as TSV without the index.
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, sep="\t", index=False)


def require_columns(df: pd.DataFrame, columns: Iterable[str], message: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{message}: {', '.join(missing)}")


def require_recording_columns(df: pd.DataFrame) -> None:
    require_columns(df, RECORDING_COLUMNS, ValidationMessages.MISSING_RECORDING_COLUMNS)


def require_calibration_columns(df: pd.DataFrame) -> None:
    require_columns(df, CALIBRATION_COLUMNS, ValidationMessages.MISSING_CALIBRATION_COLUMNS)
