"""Projection of filtered normalized points onto the screen."""
from __future__ import annotations

from typing import Optional

from .config.constants import ValidationMessages
from .domain.geometry import AffineMatrix, Point, Viewport


class GazeMapper:
    """Map a normalized detector point to viewport pixels.

    With a calibration matrix the affine transform is applied directly.
    Without one the unit square of the camera image is fitted into the
    viewport preserving the camera aspect: the limiting dimension fills the
    viewport and the other one is scaled down with it.

    The mapper is stateless; one instance can serve any number of sessions.
    """

    def map(
        self,
        point: Point,
        matrix: Optional[AffineMatrix],
        viewport: Viewport,
        source_aspect: float,
    ) -> Point:
        if matrix is not None:
            return matrix.apply(point)

        if source_aspect <= 0:
            raise ValueError(ValidationMessages.INVALID_ASPECT)

        if source_aspect > viewport.aspect:
            scale_x = viewport.width
            scale_y = viewport.width / source_aspect
        else:
            scale_x = viewport.height * source_aspect
            scale_y = viewport.height
        return Point(point.x * scale_x, point.y * scale_y)


def map_to_screen(
    point: Point,
    matrix: Optional[AffineMatrix],
    viewport: Viewport,
    source_aspect: float,
) -> Point:
    return GazeMapper().map(point, matrix, viewport, source_aspect)
