# gaze_filter/metrics.py
from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from .io.tsv import require_columns
from .io.replay import OUTPUT_COLUMNS


def _pct(count: int, total: int) -> float:
    return 100.0 * count / total if total > 0 else float("nan")


def compute_replay_metrics(
    df: pd.DataFrame,
    reference: Optional[pd.DataFrame] = None,
) -> Dict[str, Any]:
    """
    Summary statistics of a replay output table, without printing anything.

    With a ``reference`` recording carrying target_x_px/target_y_px (as the
    simulator writes it) the accuracy of the published pointer is included.
    """
    require_columns(df, OUTPUT_COLUMNS, "Replay output is missing required columns")

    n = len(df)
    status = df["status"].astype(str)
    n_pub = int((status == "published").sum())
    n_rej = int((status == "rejected").sum())
    n_none = int((status == "no_sample").sum())

    published = df.loc[status == "published", ["time_ms", "gaze_x_px", "gaze_y_px"]]
    steps = np.hypot(
        np.diff(published["gaze_x_px"].to_numpy(dtype=float)),
        np.diff(published["gaze_y_px"].to_numpy(dtype=float)),
    )

    metrics: Dict[str, Any] = {
        "n_frames": n,
        "n_published": n_pub,
        "n_rejected": n_rej,
        "n_no_sample": n_none,
        "published_pct": _pct(n_pub, n),
        "rejected_pct": _pct(n_rej, n),
        "no_sample_pct": _pct(n_none, n),
        "n_triggers": int(df["dwell_trigger"].astype(bool).sum()),
        "duration_ms": float(df["time_ms"].iloc[-1] - df["time_ms"].iloc[0]) if n > 1 else 0.0,
        "median_step_px": float(np.median(steps)) if len(steps) else float("nan"),
        "p95_step_px": float(np.percentile(steps, 95)) if len(steps) else float("nan"),
    }

    if reference is not None and {"target_x_px", "target_y_px"} <= set(reference.columns):
        if len(reference) != n:
            raise ValueError("Reference recording and replay output differ in length")
        mask = (status == "published").to_numpy()
        err = np.hypot(
            df["gaze_x_px"].to_numpy(dtype=float)[mask] - reference["target_x_px"].to_numpy(dtype=float)[mask],
            df["gaze_y_px"].to_numpy(dtype=float)[mask] - reference["target_y_px"].to_numpy(dtype=float)[mask],
        )
        metrics["mean_error_px"] = float(err.mean()) if len(err) else float("nan")
        metrics["median_error_px"] = float(np.median(err)) if len(err) else float("nan")

    return metrics


def summarize_replay(
    df: pd.DataFrame,
    reference: Optional[pd.DataFrame] = None,
) -> Dict[str, Any]:
    """
    Wrapper: compute the replay metrics and print a short report on stdout.
    """
    metrics = compute_replay_metrics(df, reference)

    print("=== Gaze replay summary ===")
    print(f"Frames: {metrics['n_frames']} ({metrics['duration_ms']:.0f} ms)")
    print(f"  Published:      {metrics['n_published']} ({metrics['published_pct']:.2f}%)")
    print(f"  Rejected:       {metrics['n_rejected']} ({metrics['rejected_pct']:.2f}%)")
    print(f"  Without sample: {metrics['n_no_sample']} ({metrics['no_sample_pct']:.2f}%)")
    print(f"Dwell triggers: {metrics['n_triggers']}")
    print(f"Pointer step (median / p95): {metrics['median_step_px']:.2f} / {metrics['p95_step_px']:.2f} px")
    if "mean_error_px" in metrics:
        print(f"Error vs. target (mean / median): "
              f"{metrics['mean_error_px']:.2f} / {metrics['median_error_px']:.2f} px")
    print("===========================")

    return metrics
