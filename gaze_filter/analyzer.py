"""Visualization helpers for replay outputs."""
from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from pathlib import Path
from typing import Iterable

import pandas as pd


@dataclass(frozen=True)
class PlotConfig:
    """Configuration for replay plot generation."""

    time_column: str = "time_ms"
    mapped_x_column: str = "mapped_x_px"
    mapped_y_column: str = "mapped_y_px"
    gaze_x_column: str = "gaze_x_px"
    gaze_y_column: str = "gaze_y_px"
    trigger_column: str = "dwell_trigger"
    show_triggers: bool = True
    figsize: tuple[float, float] = (10.0, 6.0)
    dpi: float | None = None
    tight_layout: bool = True
    show: bool = False

    def ensure_columns(self, columns: Iterable[str]) -> None:
        """Validate that required columns exist."""
        required = {
            self.time_column,
            self.mapped_x_column,
            self.mapped_y_column,
            self.gaze_x_column,
            self.gaze_y_column,
        }
        missing = required - set(columns)
        if missing:
            raise ValueError(f"Missing required columns: {', '.join(sorted(missing))}")


class GazeAnalyzer:
    """Plot mapped vs. published pointer coordinates over time."""

    def __init__(self, config: PlotConfig | None = None) -> None:
        self.config = config or PlotConfig()

    def plot(self, df: pd.DataFrame, output_path: str | Path | None = None) -> Path:
        """Plot x and y traces; dwell triggers are marked as vertical lines."""

        self.config.ensure_columns(df.columns)
        cfg = self.config

        try:
            matplotlib = import_module("matplotlib")
            if not cfg.show:
                matplotlib.use("Agg")
            plt = import_module("matplotlib.pyplot")
        except ModuleNotFoundError as exc:  # pragma: no cover - dependency is optional in CI
            raise ModuleNotFoundError(
                "matplotlib is required for plotting; install via `pip install matplotlib`."
            ) from exc

        fig, ax = plt.subplots(2, 1, figsize=cfg.figsize, dpi=cfg.dpi, sharex=True)
        t = df[cfg.time_column]

        for axis, mapped_col, gaze_col, label in (
            (ax[0], cfg.mapped_x_column, cfg.gaze_x_column, "x"),
            (ax[1], cfg.mapped_y_column, cfg.gaze_y_column, "y"),
        ):
            axis.plot(t, df[mapped_col], color="0.7", linewidth=0.8, label=f"mapped {label}")
            axis.plot(t, df[gaze_col], label=f"published {label}")
            axis.set_ylabel(f"{label} (px)")

        if cfg.show_triggers and cfg.trigger_column in df.columns:
            fired = df.loc[df[cfg.trigger_column].astype(bool), cfg.time_column]
            for axis in ax:
                for trigger_t in fired:
                    axis.axvline(trigger_t, color="red", linestyle="--", linewidth=0.8)

        for axis in ax:
            axis.legend()
        ax[1].set_xlabel("time (ms)")

        if cfg.tight_layout:
            plt.tight_layout()

        output_path = Path(output_path or "gaze_plot.png")
        fig.savefig(output_path)
        if cfg.show:  # pragma: no cover - UI-driven choice
            plt.show()
        plt.close(fig)
        return output_path

    def plot_from_file(self, input_path: str | Path, output_path: str | Path | None = None) -> Path:
        """Load a replay TSV and plot it."""

        df = pd.read_csv(input_path, sep="\t")
        return self.plot(df, output_path=output_path)


__all__ = ["GazeAnalyzer", "PlotConfig"]
