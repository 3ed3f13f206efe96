import argparse

import pytest

from gaze_filter.config import (
    CalibrationConfig,
    DwellConfig,
    GazeFilterConfiguration,
    PointFilterConfig,
    ReplayDefaults,
    SaccadeGuardConfig,
)
from gaze_filter.config_builder import ConfigBuilder


def test_defaults_match_documented_constants():
    cfg = GazeFilterConfiguration()
    assert cfg.point_filter.ema_alpha == 0.2
    assert cfg.point_filter.kalman_process_noise == 0.05
    assert cfg.point_filter.kalman_measurement_noise == 0.1
    assert cfg.calibration.min_samples == 4
    assert cfg.calibration.regularization == 1e-10
    assert cfg.saccade_guard.jump_px == 120.0
    assert cfg.saccade_guard.block_ms == 90.0
    assert cfg.saccade_guard.reacquire_ms is None
    assert cfg.adaptive_smoother.alpha_min == 0.1
    assert cfg.adaptive_smoother.alpha_max == 0.7
    assert cfg.dwell.dwell_ms == 700.0
    assert cfg.dwell.velocity_threshold_px_per_ms == 0.30
    assert cfg.dwell.refractory_ms == 600.0


@pytest.mark.parametrize(
    "factory",
    [
        lambda: PointFilterConfig(ema_alpha=0.0),
        lambda: PointFilterConfig(kalman_measurement_noise=0.0),
        lambda: CalibrationConfig(min_samples=2),
        lambda: CalibrationConfig(regularization=-1.0),
        lambda: SaccadeGuardConfig(jump_px=0.0),
        lambda: SaccadeGuardConfig(reacquire_ms=0.0),
        lambda: DwellConfig(dwell_ms=-5.0),
    ],
)
def test_invalid_values_raise(factory):
    with pytest.raises(ValueError):
        factory()


def test_json_round_trip(tmp_path):
    cfg = GazeFilterConfiguration(
        saccade_guard=SaccadeGuardConfig(jump_px=150.0, reacquire_ms=400.0),
        dwell=DwellConfig(dwell_ms=900.0, enabled=False),
    )
    path = tmp_path / "config.json"
    cfg.to_json(path)
    assert GazeFilterConfiguration.from_json(path) == cfg


def test_from_dict_fills_missing_sections():
    cfg = GazeFilterConfiguration.from_dict({"dwell": {"dwell_ms": 500.0}})
    assert cfg.dwell.dwell_ms == 500.0
    assert cfg.point_filter == PointFilterConfig()


def _namespace(**kwargs):
    defaults = dict(
        config=None,
        ema_alpha=None,
        jump_px=None,
        block_ms=None,
        reacquire_ms=None,
        dwell_ms=None,
        velocity_threshold=None,
        arm_ms=None,
        refractory_ms=None,
        no_dwell=False,
        width=None,
        height=None,
        source_aspect=None,
    )
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


def test_builder_without_flags_gives_defaults():
    assert ConfigBuilder.build_pipeline_config(_namespace()) == GazeFilterConfiguration()


def test_builder_overrides_single_fields():
    cfg = ConfigBuilder.build_pipeline_config(
        _namespace(jump_px=200.0, velocity_threshold=0.5, no_dwell=True)
    )
    assert cfg.saccade_guard.jump_px == 200.0
    assert cfg.saccade_guard.block_ms == 90.0
    assert cfg.dwell.velocity_threshold_px_per_ms == 0.5
    assert cfg.dwell.enabled is False


def test_builder_layers_flags_over_json(tmp_path):
    path = tmp_path / "base.json"
    GazeFilterConfiguration(dwell=DwellConfig(dwell_ms=1000.0, refractory_ms=100.0)).to_json(path)
    cfg = ConfigBuilder.build_pipeline_config(_namespace(config=str(path), dwell_ms=800.0))
    assert cfg.dwell.dwell_ms == 800.0
    assert cfg.dwell.refractory_ms == 100.0


def test_builder_geometry_defaults():
    viewport = ConfigBuilder.build_viewport(_namespace())
    assert (viewport.width, viewport.height) == (1920.0, 1080.0)
    assert ConfigBuilder.build_source_aspect(_namespace(source_aspect=1.5)) == 1.5


def test_replay_configuration_enables_reacquire():
    cfg = GazeFilterConfiguration.for_replay()
    assert cfg.saccade_guard.reacquire_ms == ReplayDefaults.REACQUIRE_MS
    assert cfg.saccade_guard.jump_px == GazeFilterConfiguration().saccade_guard.jump_px
    assert GazeFilterConfiguration().saccade_guard.reacquire_ms is None


def test_builder_default_is_used_without_config_file(tmp_path):
    replay_default = GazeFilterConfiguration.for_replay()
    cfg = ConfigBuilder.build_pipeline_config(_namespace(), default=replay_default)
    assert cfg == replay_default

    cfg = ConfigBuilder.build_pipeline_config(_namespace(reacquire_ms=400.0), default=replay_default)
    assert cfg.saccade_guard.reacquire_ms == 400.0

    path = tmp_path / "base.json"
    GazeFilterConfiguration().to_json(path)
    cfg = ConfigBuilder.build_pipeline_config(_namespace(config=str(path)), default=replay_default)
    assert cfg.saccade_guard.reacquire_ms is None
