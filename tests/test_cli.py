import json

import pytest

from gaze_filter.cli import build_parser, main
from gaze_filter.io import read_tsv


def _simulate(tmp_path):
    recording = tmp_path / "recording.tsv"
    calibration = tmp_path / "calibration.tsv"
    main(["simulate", str(recording), "--calibration-output", str(calibration), "--fixation-ms", "900"])
    return recording, calibration


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_simulate_writes_recording_and_calibration(tmp_path):
    recording, calibration = _simulate(tmp_path)
    assert len(read_tsv(recording)) > 0
    assert list(read_tsv(calibration).columns) == ["raw_x", "raw_y", "screen_x", "screen_y"]


def test_calibrate_writes_matrix_json(tmp_path, capsys):
    _, calibration = _simulate(tmp_path)
    out = tmp_path / "matrix.json"
    main(["calibrate", str(calibration), "--output", str(out)])

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert set(payload["matrix"]) == {"ax", "bx", "cx", "ay", "by", "cy"}
    assert payload["n_samples"] == 5
    assert "Calibration applied" in capsys.readouterr().out


def test_replay_and_summarize(tmp_path, capsys):
    recording, calibration = _simulate(tmp_path)
    output = tmp_path / "replay.tsv"
    trigger_log = tmp_path / "logs" / "triggers.csv"
    main(
        [
            "--log-level",
            "INFO",
            "replay",
            str(recording),
            str(output),
            "--calibration",
            str(calibration),
            "--trigger-log",
            str(trigger_log),
            "--quiet",
            "--jump-px",
            "150",
        ]
    )
    df = read_tsv(output)
    assert len(df) == len(read_tsv(recording))
    assert trigger_log.read_text(encoding="utf-8").startswith("logged_at,session")

    main(["summarize", str(output), "--reference", str(recording)])
    printed = capsys.readouterr().out
    assert "dwell triggers" in printed
    assert "Error vs. target" in printed


def test_replay_with_dwell_disabled(tmp_path):
    recording, _ = _simulate(tmp_path)
    output = tmp_path / "replay.tsv"
    main(["replay", str(recording), str(output), "--no-dwell", "--quiet"])
    assert not read_tsv(output)["dwell_trigger"].any()


def test_plot_command(tmp_path):
    pytest.importorskip("matplotlib")
    recording, _ = _simulate(tmp_path)
    output = tmp_path / "replay.tsv"
    plot = tmp_path / "plot.png"
    main(["replay", str(recording), str(output), "--quiet"])
    main(["plot", str(output), str(plot)])
    assert plot.exists()


def test_replay_reacquires_gaze_between_targets(tmp_path):
    recording, calibration = _simulate(tmp_path)
    output = tmp_path / "replay.tsv"
    main(["replay", str(recording), str(output), "--calibration", str(calibration), "--quiet"])
    assert (read_tsv(output)["status"] == "published").mean() > 0.7
