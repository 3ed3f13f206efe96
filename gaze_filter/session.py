"""Tracking session: owns the pipeline state of one gaze stream."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from .calibration import AffineCalibrator, CalibrationFit
from .config import GazeFilterConfiguration, ValidationMessages
from .domain.events import DetectorFrame, DwellTriggerEvent, FrameResult
from .domain.geometry import AffineMatrix, CalibrationSample, Point, Viewport
from .dwell import DwellEngine
from .engine import GazePipelineEngine
from .errors import InsufficientSamplesError
from .landmarks import gaze_sample

if TYPE_CHECKING:
    from .io.observers import SessionObserver

logger = logging.getLogger(__name__)


class TrackingSession:
    """Per-user tracking state plus the operations a UI needs.

    The session owns one pipeline engine (and with it every filter), one
    dwell engine, the current calibration and the viewport geometry. Filter
    state lives as long as the session; create a new session to start over.

    The calibration matrix is replaced by a single reference assignment and
    each frame reads it once, so recalibrating between frames never exposes
    a half-updated matrix to the pipeline. The mapped pixel space changes
    with it, so the saccade guard and the adaptive smoother restart on every
    calibration or geometry change; the normalized-space filters keep running.

    Example:
        >>> session = TrackingSession(Viewport(1920, 1080), source_aspect=4 / 3)
        >>> session.register_observer(ConsoleReporter())
        >>> result = session.process_sample(0.5, 0.5, 0.0)
        >>> result.gaze
    """

    def __init__(
        self,
        viewport: Viewport,
        source_aspect: float,
        config: Optional[GazeFilterConfiguration] = None,
        engine: Optional[GazePipelineEngine] = None,
    ) -> None:
        if engine is not None and config is not None and engine.config != config:
            raise ValueError(ValidationMessages.ENGINE_CONFIG_MISMATCH)
        self.engine = engine or GazePipelineEngine(config)
        self.config = self.engine.config
        self.calibrator = AffineCalibrator(self.config.calibration)
        self.dwell = DwellEngine(self.config.dwell)
        self.dwell.on_trigger(self._notify_trigger)

        self.viewport = viewport
        self.source_aspect = source_aspect

        self._calibration: Optional[CalibrationFit] = None
        self._matrix: Optional[AffineMatrix] = None
        self._last_normalized: Optional[Point] = None
        self._observers: List[SessionObserver] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def matrix(self) -> Optional[AffineMatrix]:
        return self._matrix

    @property
    def calibration(self) -> Optional[CalibrationFit]:
        """Diagnostics of the active calibration, None when uncalibrated."""
        return self._calibration

    @property
    def last_normalized(self) -> Optional[Point]:
        """Latest filtered normalized point, paired with targets during calibration."""
        return self._last_normalized

    def set_viewport(self, viewport: Viewport, source_aspect: Optional[float] = None) -> None:
        """Change the screen geometry; screen-space filters restart if it differs."""
        aspect = self.source_aspect if source_aspect is None else source_aspect
        if viewport == self.viewport and aspect == self.source_aspect:
            return
        self.viewport = viewport
        self.source_aspect = aspect
        self.engine.reset_screen_space()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def register_observer(self, observer: SessionObserver) -> None:
        """Register a SessionObserver to receive frame, trigger and calibration events."""
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: SessionObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, method: str, *args: Any) -> None:
        for observer in self._observers:
            try:
                getattr(observer, method)(*args)
            except Exception:
                logger.warning(
                    "Observer %s failed in %s", type(observer).__name__, method, exc_info=True
                )

    def _notify_trigger(self, event: DwellTriggerEvent) -> None:
        self._notify("on_trigger", event)

    # ------------------------------------------------------------------
    # Per-frame processing
    # ------------------------------------------------------------------
    def step(self, frame: DetectorFrame) -> FrameResult:
        """Process one detector frame.

        A frame without landmarks (no face) publishes nothing and leaves the
        filters untouched.

        Raises:
            LandmarkError: landmarks are present but do not cover both iris rings.
        """
        sample: Optional[Point] = None
        if frame.landmarks is not None and len(frame.landmarks) > 0:
            sample = gaze_sample(frame.landmarks)
        return self._run(sample, frame.timestamp_ms)

    def process_sample(self, nx: float, ny: float, timestamp_ms: float) -> FrameResult:
        """Process an already reduced normalized detector sample."""
        return self._run(Point(float(nx), float(ny)), timestamp_ms)

    def process_missing(self, timestamp_ms: float) -> FrameResult:
        """Report a frame in which the detector found no face."""
        return self._run(None, timestamp_ms)

    def _run(self, sample: Optional[Point], timestamp_ms: float) -> FrameResult:
        matrix = self._matrix
        result = self.engine.run(
            sample, timestamp_ms, self.viewport, self.source_aspect, matrix
        )
        if result.normalized is not None:
            self._last_normalized = result.normalized

        if result.gaze is not None and self.config.dwell.enabled:
            result.trigger = self.dwell.update(result.gaze.x, result.gaze.y, timestamp_ms)

        self._notify("on_frame", result)
        return result

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------
    def calibrate(self, samples: Sequence[CalibrationSample]) -> CalibrationFit:
        """Fit and apply a new calibration.

        Raises:
            InsufficientSamplesError: fewer than ``config.calibration.min_samples``
                samples. The previous calibration stays active.
        """
        required = self.config.calibration.min_samples
        if len(samples) < required:
            raise InsufficientSamplesError(required, len(samples))

        fit = self.calibrator.fit_with_diagnostics(samples)
        self._calibration = fit
        self._matrix = fit.matrix
        self.engine.reset_screen_space()
        logger.info(
            "Calibration applied from %d samples (rms %.1f px%s)",
            fit.n_samples,
            fit.rms_error_px,
            ", degenerate" if fit.degenerate else "",
        )
        self._notify("on_calibration_changed", fit)
        return fit

    def clear_calibration(self) -> None:
        """Return to the uncalibrated aspect-corrected projection."""
        self._calibration = None
        self._matrix = None
        self.engine.reset_screen_space()
        logger.info("Calibration cleared")
        self._notify("on_calibration_changed", None)
