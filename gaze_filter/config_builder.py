# gaze_filter/config_builder.py
"""Build configuration objects from CLI arguments.

Separates configuration construction from argument parsing.
"""
from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Dict, Optional

from .config import (
    GazeFilterConfiguration,
    ReplayDefaults,
)
from .domain.geometry import Viewport


def _overrides(args: argparse.Namespace, mapping: Dict[str, str]) -> Dict[str, Any]:
    """Collect config fields whose CLI argument was given (not None)."""
    values = {}
    for arg_name, field_name in mapping.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            values[field_name] = value
    return values


class ConfigBuilder:
    """Builds configuration objects from parsed CLI arguments.

    A ``--config`` JSON file, if given, is the base; individual flags
    override single fields on top of it.
    """

    POINT_FILTER_ARGS = {"ema_alpha": "ema_alpha"}
    SACCADE_GUARD_ARGS = {
        "jump_px": "jump_px",
        "block_ms": "block_ms",
        "reacquire_ms": "reacquire_ms",
    }
    DWELL_ARGS = {
        "dwell_ms": "dwell_ms",
        "velocity_threshold": "velocity_threshold_px_per_ms",
        "arm_ms": "arm_ms",
        "refractory_ms": "refractory_ms",
    }

    @staticmethod
    def build_base_config(
        args: argparse.Namespace, default: Optional[GazeFilterConfiguration] = None
    ) -> GazeFilterConfiguration:
        """The --config file if given, else ``default`` (plain defaults if None)."""
        path = getattr(args, "config", None)
        if path:
            return GazeFilterConfiguration.from_json(path)
        return default or GazeFilterConfiguration()

    @classmethod
    def build_pipeline_config(
        cls, args: argparse.Namespace, default: Optional[GazeFilterConfiguration] = None
    ) -> GazeFilterConfiguration:
        """Build the full pipeline configuration from CLI arguments."""
        base = cls.build_base_config(args, default)
        dwell = replace(base.dwell, **_overrides(args, cls.DWELL_ARGS))
        if getattr(args, "no_dwell", False):
            dwell = replace(dwell, enabled=False)
        return replace(
            base,
            point_filter=replace(base.point_filter, **_overrides(args, cls.POINT_FILTER_ARGS)),
            saccade_guard=replace(base.saccade_guard, **_overrides(args, cls.SACCADE_GUARD_ARGS)),
            dwell=dwell,
        )

    @staticmethod
    def build_viewport(args: argparse.Namespace) -> Viewport:
        width = getattr(args, "width", None) or ReplayDefaults.VIEWPORT_WIDTH
        height = getattr(args, "height", None) or ReplayDefaults.VIEWPORT_HEIGHT
        return Viewport(width, height)

    @staticmethod
    def build_source_aspect(args: argparse.Namespace) -> float:
        aspect = getattr(args, "source_aspect", None)
        return ReplayDefaults.SOURCE_ASPECT if aspect is None else aspect
