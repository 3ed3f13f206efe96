"""Command line interface for offline gaze processing."""
from __future__ import annotations

import argparse
import json
import logging

from .analyzer import GazeAnalyzer, PlotConfig
from .config import GazeFilterConfiguration
from .config_builder import ConfigBuilder
from .io import (
    ConsoleReporter,
    TriggerLogger,
    calibration_samples_to_frame,
    read_calibration_samples,
    read_tsv,
    replay_file,
    write_tsv,
)
from .metrics import summarize_replay
from .session import TrackingSession
from .simulation import SimulationConfig, simulate_calibration_samples, simulate_recording


def _add_geometry_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--width", type=float, default=None, help="Viewport width in px (default: 1920)")
    parser.add_argument("--height", type=float, default=None, help="Viewport height in px (default: 1080)")
    parser.add_argument(
        "--source-aspect",
        type=float,
        default=None,
        help="Camera aspect ratio for the uncalibrated projection (default: 4/3)",
    )


def _add_pipeline_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="JSON file with a full pipeline configuration")
    parser.add_argument("--ema-alpha", type=float, default=None, help="EMA weight of the newest sample")
    parser.add_argument("--jump-px", type=float, default=None, help="Saccade guard jump distance in px")
    parser.add_argument("--block-ms", type=float, default=None, help="Saccade guard cooldown in ms")
    parser.add_argument(
        "--reacquire-ms",
        type=float,
        default=None,
        help="Accept a new reference point after this much continuous rejection (default: 150)",
    )
    parser.add_argument("--dwell-ms", type=float, default=None, help="Dwell time in ms")
    parser.add_argument(
        "--velocity-threshold", type=float, default=None, help="Dwell velocity threshold in px/ms"
    )
    parser.add_argument("--arm-ms", type=float, default=None, help="Slow time before dwell counting starts")
    parser.add_argument("--refractory-ms", type=float, default=None, help="Minimum time between triggers")
    parser.add_argument("--no-dwell", action="store_true", help="Disable the dwell trigger")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gaze pointer filtering pipeline")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    simulate = sub.add_parser("simulate", help="Write a synthetic recording TSV")
    simulate.add_argument("output", help="Path to write the recording TSV")
    simulate.add_argument(
        "--calibration-output", help="Optional path to write matching calibration samples"
    )
    _add_geometry_args(simulate)
    simulate.add_argument("--fixation-ms", type=float, default=1500.0, help="Time per target in ms")
    simulate.add_argument("--noise", type=float, default=0.002, help="Gaussian jitter (normalized units)")
    simulate.add_argument("--glitch-rate", type=float, default=0.0, help="Fraction of glitch frames")
    simulate.add_argument("--dropout-rate", type=float, default=0.0, help="Fraction of frames without a face")
    simulate.add_argument("--seed", type=int, default=0, help="Random seed")

    calibrate = sub.add_parser("calibrate", help="Fit an affine calibration from a samples TSV")
    calibrate.add_argument("input", help="TSV with raw_x, raw_y, screen_x, screen_y")
    calibrate.add_argument("--output", help="Optional path to write the fitted matrix as JSON")
    calibrate.add_argument("--config", help="JSON file with a full pipeline configuration")
    _add_geometry_args(calibrate)

    replay = sub.add_parser("replay", help="Run a recording through the pipeline")
    replay.add_argument("input", help="Recording TSV with time_ms, norm_x, norm_y")
    replay.add_argument("output", help="Path to write the per-frame results TSV")
    replay.add_argument("--calibration", help="Calibration samples TSV applied before the first frame")
    replay.add_argument("--trigger-log", help="CSV file dwell triggers are appended to")
    replay.add_argument("--quiet", action="store_true", help="Do not print individual triggers")
    _add_geometry_args(replay)
    _add_pipeline_args(replay)

    summarize = sub.add_parser("summarize", help="Print statistics of a replay output TSV")
    summarize.add_argument("input", help="Replay output TSV")
    summarize.add_argument(
        "--reference", help="Simulated recording TSV with target_x_px/target_y_px for accuracy"
    )

    plot = sub.add_parser("plot", help="Plot mapped and published pointer traces")
    plot.add_argument("input", help="Replay output TSV")
    plot.add_argument("output", help="Path to write the generated plot (png or pdf)")
    plot.add_argument("--no-triggers", action="store_true", help="Do not mark dwell triggers")
    plot.add_argument(
        "--figsize",
        nargs=2,
        type=float,
        metavar=("WIDTH", "HEIGHT"),
        default=(10.0, 6.0),
        help="Figure size in inches (width height)",
    )
    plot.add_argument("--dpi", type=float, default=None, help="Optional DPI override for the figure")
    plot.add_argument(
        "--show",
        action="store_true",
        help="Display the plot window in addition to saving the file (uses your default backend)",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "simulate":
        viewport = ConfigBuilder.build_viewport(args)
        cfg = SimulationConfig(
            fixation_ms=args.fixation_ms,
            noise_std=args.noise,
            glitch_rate=args.glitch_rate,
            dropout_rate=args.dropout_rate,
            seed=args.seed,
        )
        df = simulate_recording(viewport, config=cfg)
        write_tsv(df, args.output)
        print(f"Wrote {len(df)} frames to {args.output}")
        if args.calibration_output:
            samples = simulate_calibration_samples(viewport, noise_std=args.noise, seed=args.seed)
            write_tsv(calibration_samples_to_frame(samples), args.calibration_output)
            print(f"Wrote {len(samples)} calibration samples to {args.calibration_output}")
        return

    if args.command == "calibrate":
        config = ConfigBuilder.build_base_config(args)
        session = TrackingSession(
            ConfigBuilder.build_viewport(args),
            ConfigBuilder.build_source_aspect(args),
            config=config,
        )
        session.register_observer(ConsoleReporter())
        fit = session.calibrate(read_calibration_samples(args.input))
        if args.output:
            payload = {
                "matrix": fit.matrix.to_dict(),
                "n_samples": fit.n_samples,
                "rms_error_px": fit.rms_error_px,
                "conditioning": fit.conditioning,
                "degenerate": fit.degenerate,
            }
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            print(f"Matrix written to {args.output}")
        return

    if args.command == "replay":
        reporter = ConsoleReporter(verbose=not args.quiet)
        observers = [reporter]
        if args.trigger_log:
            observers.append(TriggerLogger(args.trigger_log))
        replay_file(
            args.input,
            args.output,
            config=ConfigBuilder.build_pipeline_config(
                args, default=GazeFilterConfiguration.for_replay()
            ),
            viewport=ConfigBuilder.build_viewport(args),
            source_aspect=ConfigBuilder.build_source_aspect(args),
            calibration_path=args.calibration,
            observers=observers,
        )
        print(reporter.summary())
        print(f"Results written to {args.output}")
        return

    if args.command == "summarize":
        df = read_tsv(args.input)
        reference = read_tsv(args.reference) if args.reference else None
        summarize_replay(df, reference)
        return

    if args.command == "plot":
        cfg = PlotConfig(
            show_triggers=not args.no_triggers,
            figsize=tuple(args.figsize),
            dpi=args.dpi,
            show=args.show,
        )
        GazeAnalyzer(cfg).plot_from_file(args.input, args.output)
        return


if __name__ == "__main__":
    main()
