import numpy as np
import pandas as pd
import pytest

from gaze_filter.config import GazeFilterConfiguration
from gaze_filter.domain import Viewport
from gaze_filter.io import (
    calibration_samples_to_frame,
    read_calibration_samples,
    read_tsv,
    replay_file,
    replay_many,
    replay_recording,
    write_tsv,
)
from gaze_filter.io.replay import OUTPUT_COLUMNS
from gaze_filter.session import TrackingSession
from gaze_filter.simulation import SimulationConfig, simulate_calibration_samples, simulate_recording
from conftest import RecordingObserver

VIEWPORT = Viewport(1920.0, 1080.0)


def _recording(**kwargs):
    cfg = SimulationConfig(fixation_ms=600.0, **kwargs)
    return simulate_recording(VIEWPORT, config=cfg)


def test_replay_matches_stepping_a_session_by_hand():
    recording = _recording(glitch_rate=0.05, dropout_rate=0.05, seed=3)
    samples = simulate_calibration_samples(VIEWPORT)
    out = replay_recording(recording, viewport=VIEWPORT, calibration_samples=samples)

    session = TrackingSession(
        VIEWPORT, source_aspect=4 / 3, config=GazeFilterConfiguration.for_replay()
    )
    session.calibrate(samples)
    gaze_x = []
    for row in recording.itertuples(index=False):
        if np.isnan(row.norm_x):
            result = session.process_missing(row.time_ms)
        else:
            result = session.process_sample(row.norm_x, row.norm_y, row.time_ms)
        gaze_x.append(np.nan if result.gaze is None else result.gaze.x)

    assert list(out.columns) == OUTPUT_COLUMNS
    assert len(out) == len(recording)
    np.testing.assert_allclose(out["gaze_x_px"].to_numpy(), np.array(gaze_x), equal_nan=True)


def test_replay_follows_every_target():
    recording = simulate_recording(VIEWPORT, config=SimulationConfig(noise_std=0.0))
    out = replay_recording(
        recording, viewport=VIEWPORT, calibration_samples=simulate_calibration_samples(VIEWPORT)
    )
    assert (out["status"] == "published").mean() > 0.75

    out = out.assign(target_x=recording["target_x_px"], target_y=recording["target_y_px"])
    for _, segment in out.groupby(["target_x", "target_y"], sort=False):
        settled = segment.tail(len(segment) // 3)
        assert (settled["status"] == "published").all()
        error = np.hypot(
            settled["gaze_x_px"] - settled["target_x"],
            settled["gaze_y_px"] - settled["target_y"],
        )
        assert error.max() < 20.0


def test_explicit_configuration_keeps_lock_out():
    recording = simulate_recording(VIEWPORT, config=SimulationConfig(noise_std=0.0))
    out = replay_recording(
        recording,
        config=GazeFilterConfiguration(),
        viewport=VIEWPORT,
        calibration_samples=simulate_calibration_samples(VIEWPORT),
    )
    assert (out["status"] == "published").mean() < 0.5


def test_missing_rows_become_no_sample():
    recording = pd.DataFrame(
        {"time_ms": [0.0, 33.0, 66.0], "norm_x": [0.5, np.nan, 0.5], "norm_y": [0.5, np.nan, 0.5]}
    )
    out = replay_recording(recording, viewport=VIEWPORT)
    assert list(out["status"]) == ["published", "no_sample", "published"]
    assert np.isnan(out.loc[1, "gaze_x_px"])


def test_missing_columns_raise():
    with pytest.raises(ValueError, match="norm_y"):
        replay_recording(pd.DataFrame({"time_ms": [0.0], "norm_x": [0.5]}))


def test_observers_are_attached_during_replay():
    observer = RecordingObserver()
    recording = _recording()
    replay_recording(recording, viewport=VIEWPORT, observers=[observer])
    assert len(observer.frames) == len(recording)


def test_calibration_samples_tsv_round_trip(tmp_path):
    samples = simulate_calibration_samples(VIEWPORT)
    path = tmp_path / "calibration.tsv"
    write_tsv(calibration_samples_to_frame(samples), path)
    loaded = read_calibration_samples(path)
    assert len(loaded) == len(samples)
    assert loaded[0].screen.x == pytest.approx(samples[0].screen.x)
    assert loaded[0].raw.y == pytest.approx(samples[0].raw.y)


def test_calibration_table_requires_columns():
    with pytest.raises(ValueError, match="screen_y"):
        read_calibration_samples(pd.DataFrame({"raw_x": [0.1], "raw_y": [0.1], "screen_x": [1.0]}))


def test_replay_file_writes_output(tmp_path):
    rec_path = tmp_path / "recording.tsv"
    out_path = tmp_path / "out" / "replay.tsv"
    write_tsv(_recording(), rec_path)

    out = replay_file(rec_path, out_path, viewport=VIEWPORT)
    written = read_tsv(out_path)
    assert len(written) == len(out)
    assert written["dwell_trigger"].dtype == bool


def test_replay_many_sequential_keeps_order():
    recordings = [_recording(seed=1), _recording(seed=2).iloc[:10]]
    outs = replay_many(recordings, viewport=VIEWPORT)
    assert [len(o) for o in outs] == [len(recordings[0]), 10]


def test_replay_many_parallel():
    pytest.importorskip("joblib")
    recordings = [_recording(seed=s) for s in range(3)]
    sequential = replay_many(recordings, viewport=VIEWPORT)
    parallel = replay_many(recordings, viewport=VIEWPORT, n_jobs=2)
    for a, b in zip(sequential, parallel):
        pd.testing.assert_frame_equal(a, b)
