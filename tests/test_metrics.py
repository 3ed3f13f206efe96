import math

import pandas as pd
import pytest

from gaze_filter.domain import Viewport
from gaze_filter.io import replay_recording
from gaze_filter.metrics import compute_replay_metrics, summarize_replay
from gaze_filter.simulation import SimulationConfig, simulate_calibration_samples, simulate_recording


def _replay_frame():
    return pd.DataFrame(
        {
            "time_ms": [0.0, 50.0, 100.0, 150.0],
            "norm_x": [0.5, 0.5, None, 0.9],
            "norm_y": [0.5, 0.5, None, 0.9],
            "filtered_x": [0.5, 0.5, None, 0.6],
            "filtered_y": [0.5, 0.5, None, 0.6],
            "mapped_x_px": [100.0, 103.0, None, 900.0],
            "mapped_y_px": [100.0, 104.0, None, 900.0],
            "gaze_x_px": [100.0, 103.0, None, None],
            "gaze_y_px": [100.0, 104.0, None, None],
            "status": ["published", "published", "no_sample", "rejected"],
            "dwell_trigger": [False, True, False, False],
        }
    )


def test_counts_and_percentages():
    metrics = compute_replay_metrics(_replay_frame())
    assert metrics["n_frames"] == 4
    assert metrics["n_published"] == 2
    assert metrics["n_rejected"] == 1
    assert metrics["n_no_sample"] == 1
    assert metrics["published_pct"] == pytest.approx(50.0)
    assert metrics["n_triggers"] == 1
    assert metrics["duration_ms"] == pytest.approx(150.0)
    assert metrics["median_step_px"] == pytest.approx(5.0)
    assert "mean_error_px" not in metrics


def test_accuracy_against_reference():
    reference = pd.DataFrame({"target_x_px": [100.0, 100.0, 0.0, 0.0], "target_y_px": [100.0, 100.0, 0.0, 0.0]})
    metrics = compute_replay_metrics(_replay_frame(), reference)
    assert metrics["mean_error_px"] == pytest.approx(2.5)


def test_reference_length_mismatch_raises():
    reference = pd.DataFrame({"target_x_px": [0.0], "target_y_px": [0.0]})
    with pytest.raises(ValueError):
        compute_replay_metrics(_replay_frame(), reference)


def test_single_published_frame_has_no_step_statistics():
    df = _replay_frame().iloc[:1]
    metrics = compute_replay_metrics(df)
    assert math.isnan(metrics["median_step_px"])
    assert metrics["duration_ms"] == 0.0


def test_summarize_prints_report(capsys):
    viewport = Viewport(1920.0, 1080.0)
    recording = simulate_recording(viewport, config=SimulationConfig(fixation_ms=900.0))
    out = replay_recording(
        recording, viewport=viewport, calibration_samples=simulate_calibration_samples(viewport)
    )
    metrics = summarize_replay(out, recording)
    printed = capsys.readouterr().out
    assert "Gaze replay summary" in printed
    assert metrics["n_frames"] == len(recording)
    assert metrics["n_triggers"] >= 1
    assert metrics["median_error_px"] < 100.0
