"""I/O, offline replay and session observers."""

from .tsv import read_tsv, write_tsv
from .replay import (
    read_calibration_samples,
    calibration_samples_to_frame,
    replay_recording,
    replay_file,
    replay_many,
)
from .observers import SessionObserver, ConsoleReporter, TriggerLogger

__all__ = [
    "read_tsv",
    "write_tsv",
    "read_calibration_samples",
    "calibration_samples_to_frame",
    "replay_recording",
    "replay_file",
    "replay_many",
    "SessionObserver",
    "ConsoleReporter",
    "TriggerLogger",
]
