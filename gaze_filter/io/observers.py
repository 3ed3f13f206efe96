# gaze_filter/io/observers.py
"""
Observers for tracking sessions (Observer Pattern).

Observers decouple reporting from the per-frame pipeline: a session
notifies every registered observer about processed frames, dwell triggers
and calibration changes. An observer that raises is logged by the session
and does not interrupt tracking.

Example:
    >>> from gaze_filter.io.observers import ConsoleReporter, TriggerLogger
    >>> session = TrackingSession(Viewport(1920, 1080), source_aspect=4 / 3)
    >>> session.register_observer(ConsoleReporter())
    >>> session.register_observer(TriggerLogger("logs/triggers.csv"))
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..calibration import CalibrationFit
from ..domain.events import DwellTriggerEvent, FrameResult, FrameStatus


class SessionObserver(ABC):
    """
    Abstract base class for session observers.
    """

    @abstractmethod
    def on_frame(self, result: FrameResult) -> None:
        """
        Called after every processed frame.

        Args:
            result: Outcome of the frame, including any dwell trigger
        """
        pass

    @abstractmethod
    def on_trigger(self, event: DwellTriggerEvent) -> None:
        """
        Called when the dwell engine fires.

        Args:
            event: Trigger position and time
        """
        pass

    @abstractmethod
    def on_calibration_changed(self, fit: Optional[CalibrationFit]) -> None:
        """
        Called when a calibration is applied or cleared.

        Args:
            fit: The new calibration, or None after clear_calibration()
        """
        pass


class ConsoleReporter(SessionObserver):
    """
    Reports calibration results and dwell triggers to the console.

    Example:
        >>> reporter = ConsoleReporter(verbose=True)
        >>> session.register_observer(reporter)
        >>> ...
        >>> print(reporter.summary())
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize console reporter.

        Args:
            verbose: If True, prints every trigger as it happens
        """
        self.verbose = verbose
        self.frames = 0
        self.published = 0
        self.rejected = 0
        self.no_sample = 0
        self.triggers = 0

    def on_frame(self, result: FrameResult) -> None:
        """Count frame outcomes."""
        self.frames += 1
        if result.status == FrameStatus.PUBLISHED:
            self.published += 1
        elif result.status == FrameStatus.REJECTED:
            self.rejected += 1
        else:
            self.no_sample += 1

    def on_trigger(self, event: DwellTriggerEvent) -> None:
        """Print trigger position."""
        self.triggers += 1
        if self.verbose:
            print(f"Dwell trigger at ({event.x:.1f}, {event.y:.1f}) px, t={event.timestamp_ms:.0f} ms")

    def on_calibration_changed(self, fit: Optional[CalibrationFit]) -> None:
        """Print calibration quality."""
        print(f"\n{'='*70}")
        if fit is None:
            print("Calibration cleared, using aspect-corrected projection")
        else:
            print(f"Calibration applied from {fit.n_samples} samples")
            print(f"   RMS error: {fit.rms_error_px:.2f} px")
            print(f"   Conditioning: {fit.conditioning:.4f}")
            if fit.degenerate:
                print("   Warning: calibration points are nearly collinear")
        print(f"{'='*70}\n")

    def summary(self) -> str:
        return (
            f"{self.frames} frames: {self.published} published, {self.rejected} rejected, "
            f"{self.no_sample} without sample; {self.triggers} dwell triggers"
        )


class TriggerLogger(SessionObserver):
    """
    Appends every dwell trigger to a CSV file.

    Example:
        >>> trigger_log = TriggerLogger("logs/triggers.csv", session_name="user01")
        >>> session.register_observer(trigger_log)
    """

    HEADER = ["logged_at", "session", "timestamp_ms", "x_px", "y_px"]

    def __init__(self, log_file: str | Path, session_name: str = "session"):
        """
        Initialize trigger logger.

        Args:
            log_file: Path to CSV log file
            session_name: Value written to the session column
        """
        self.log_file = Path(log_file)
        self.session_name = session_name
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        # Create header if file doesn't exist
        if not self.log_file.exists():
            self._create_header()

    def _create_header(self) -> None:
        with open(self.log_file, "w", encoding="utf-8") as f:
            f.write(",".join(self.HEADER) + "\n")

    def on_frame(self, result: FrameResult) -> None:
        """No action per frame."""
        pass

    def on_trigger(self, event: DwellTriggerEvent) -> None:
        """Append the trigger to the log file."""
        row = [
            datetime.now().isoformat(),
            self.session_name,
            f"{event.timestamp_ms:.3f}",
            f"{event.x:.3f}",
            f"{event.y:.3f}",
        ]
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(",".join(row) + "\n")

    def on_calibration_changed(self, fit: Optional[CalibrationFit]) -> None:
        """No action on calibration."""
        pass
