"""Explicit frame loops around a TrackingSession.

The detector and the camera stay outside this package; the driver only pulls
frames from whatever iterator the caller provides and pushes the results back
out. Stopping iteration is the only cancellation mechanism.

Example:
    >>> session = TrackingSession(Viewport(1280, 720), source_aspect=16 / 9)
    >>> for result in run_tracking(session, frames):
    ...     if result.trigger is not None:
    ...         click(result.trigger.x, result.trigger.y)
"""
from __future__ import annotations

from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, Union

from .domain.events import DetectorFrame, FrameResult
from .domain.geometry import TimestampedPoint
from .session import TrackingSession

FrameInput = Union[DetectorFrame, TimestampedPoint]


def _dispatch(session: TrackingSession, item: FrameInput) -> FrameResult:
    if isinstance(item, TimestampedPoint):
        return session.process_sample(item.x, item.y, item.timestamp_ms)
    if isinstance(item, DetectorFrame):
        return session.step(item)
    raise TypeError(f"Unsupported frame type: {type(item).__name__}")


def run_tracking(session: TrackingSession, frames: Iterable[FrameInput]) -> Iterator[FrameResult]:
    """Yield one FrameResult per input frame, in order."""
    for item in frames:
        yield _dispatch(session, item)


async def run_tracking_async(
    session: TrackingSession, frames: AsyncIterable[FrameInput]
) -> AsyncIterator[FrameResult]:
    """Async variant of :func:`run_tracking`; awaiting the next frame is the only suspension point."""
    async for item in frames:
        yield _dispatch(session, item)
