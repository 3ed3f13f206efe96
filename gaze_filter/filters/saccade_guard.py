"""Reject implausible jumps in the mapped screen position."""
from __future__ import annotations

import logging
from typing import Optional

from ..config import SaccadeGuardConfig
from ..domain.geometry import Point

logger = logging.getLogger(__name__)


class SaccadeGuard:
    """Jump detector with a cooldown window.

    A sample farther than ``jump_px`` from the last accepted point is treated
    as a detector glitch or blink artifact: it is rejected and every sample is
    rejected until ``timestamp + block_ms``. Distance equal to ``jump_px`` is
    still accepted.

    With ``reacquire_ms`` set, continuous rejection for that long lets the
    next sample through as the new reference point.
    """

    def __init__(self, config: Optional[SaccadeGuardConfig] = None) -> None:
        self.config = config or SaccadeGuardConfig()
        self._last_good: Optional[Point] = None
        self._block_until: float = float("-inf")
        self._rejecting_since: Optional[float] = None

    @property
    def last_good(self) -> Optional[Point]:
        return self._last_good

    @property
    def block_until(self) -> float:
        return self._block_until

    def reset(self) -> None:
        """Forget the reference point and any cooldown."""
        self._last_good = None
        self._block_until = float("-inf")
        self._rejecting_since = None

    def is_blocked(self, timestamp: float) -> bool:
        return timestamp < self._block_until

    def accept(self, point: Point, timestamp: float) -> Optional[Point]:
        cfg = self.config
        blocked = self.is_blocked(timestamp)

        if (
            cfg.reacquire_ms is not None
            and self._rejecting_since is not None
            and timestamp - self._rejecting_since >= cfg.reacquire_ms
        ):
            logger.debug("Reacquired gaze at (%.1f, %.1f) after %.0f ms", point.x, point.y,
                         timestamp - self._rejecting_since)
            self._block_until = float("-inf")
            return self._take(point)

        if self._last_good is not None:
            distance = point.distance_to(self._last_good)
            if distance > cfg.jump_px:
                self._block_until = timestamp + cfg.block_ms
                self._reject(timestamp)
                return None

        if blocked:
            self._reject(timestamp)
            return None

        return self._take(point)

    def _take(self, point: Point) -> Point:
        self._last_good = point
        self._rejecting_since = None
        return point

    def _reject(self, timestamp: float) -> None:
        if self._rejecting_since is None:
            self._rejecting_since = timestamp
