"""Velocity-gated dwell trigger ("click by looking")."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .config import DwellConfig
from .config.constants import MIN_DELTA_TIME_MS
from .domain.events import DwellPhase, DwellState, DwellTriggerEvent
from .domain.geometry import Point

logger = logging.getLogger(__name__)

TriggerCallback = Callable[[DwellTriggerEvent], None]


class DwellEngine:
    """Fire a trigger when the pointer stays slow for long enough.

    Every update measures the pointer speed against the previous update
    (px/ms, time delta floored to 1 ms). While the speed stays below
    ``velocity_threshold_px_per_ms`` the engine is arming; after
    ``arm_ms + dwell_ms`` of continuous slow movement it fires once, unless
    the previous trigger is less than ``refractory_ms`` old. Any fast sample
    and every trigger restart the arming period, so holding still keeps
    firing at most once per dwell period.

    Example:
        >>> engine = DwellEngine()
        >>> engine.on_trigger(lambda ev: print(ev.x, ev.y))
        >>> for t in range(0, 1000, 33):
        ...     engine.update(400.0, 300.0, float(t))
    """

    def __init__(self, config: Optional[DwellConfig] = None) -> None:
        self.config = config or DwellConfig()
        self._last_point: Optional[Point] = None
        self._last_timestamp: Optional[float] = None
        self._armed_since: Optional[float] = None
        self._last_fired: Optional[float] = None
        self._progress: float = 0.0
        self._callbacks: List[TriggerCallback] = []

    def on_trigger(self, callback: TriggerCallback) -> None:
        """Register a callback invoked with every trigger event."""
        self._callbacks.append(callback)

    @property
    def state(self) -> DwellState:
        return DwellState(
            last_point=self._last_point,
            last_timestamp=self._last_timestamp,
            armed_since=self._armed_since,
            last_fired=self._last_fired,
        )

    @property
    def progress(self) -> float:
        """Fraction of the dwell period completed at the last update (0..1)."""
        return self._progress

    @property
    def phase(self) -> DwellPhase:
        if (
            self._last_fired is not None
            and self._last_timestamp is not None
            and self._last_timestamp - self._last_fired <= self.config.refractory_ms
        ):
            return DwellPhase.REFRACTORY
        if self._armed_since is not None:
            return DwellPhase.ARMING
        return DwellPhase.IDLE

    def update(self, x: float, y: float, timestamp: float) -> Optional[DwellTriggerEvent]:
        current = Point(float(x), float(y))

        if self._last_point is None or self._last_timestamp is None:
            self._remember(current, timestamp)
            return None

        cfg = self.config
        dt = max(MIN_DELTA_TIME_MS, timestamp - self._last_timestamp)
        velocity = current.distance_to(self._last_point) / dt
        event: Optional[DwellTriggerEvent] = None

        if velocity < cfg.velocity_threshold_px_per_ms:
            if self._armed_since is None:
                self._armed_since = timestamp
            held = timestamp - self._armed_since
            required = cfg.arm_ms + cfg.dwell_ms
            self._progress = min(1.0, max(0.0, (held - cfg.arm_ms) / cfg.dwell_ms))

            if held >= required and self._refractory_elapsed(timestamp):
                self._last_fired = timestamp
                self._armed_since = None
                event = DwellTriggerEvent(x=current.x, y=current.y, timestamp_ms=timestamp)
        else:
            self._armed_since = None
            self._progress = 0.0

        self._remember(current, timestamp)

        if event is not None:
            logger.debug("Dwell trigger at (%.1f, %.1f), t=%.0f ms", event.x, event.y, timestamp)
            for callback in self._callbacks:
                try:
                    callback(event)
                except Exception:
                    logger.warning("Dwell trigger callback %r failed", callback, exc_info=True)
        return event

    def _refractory_elapsed(self, timestamp: float) -> bool:
        if self._last_fired is None:
            return True
        return timestamp - self._last_fired > self.config.refractory_ms

    def _remember(self, point: Point, timestamp: float) -> None:
        self._last_point = point
        self._last_timestamp = timestamp
