"""Unit quadrant arcs and headed point-list transforms.

Each quadrant spline runs through three points of the unit circle: the
two axis crossings bounding the quadrant and the 45 degree point
between them, always in increasing x.  Sample one with
``interpolate_quadrant`` and place it on the field with
``transform_points``::

    points = interpolate_quadrant(1, samples=20)
    points = transform_points(points, radius=24.0, center=Point(72, 72))
"""

from __future__ import annotations

from collections.abc import Sequence

from fieldnav.config.settings import get_default_settings
from fieldnav.core.spline import Spline
from fieldnav.core.trajectory import PathGenerator, Trajectory
from fieldnav.models.geometry import ORIGIN, HeadingPoint, Point, fix_deg

DEFAULT_SAMPLES: int = 10

_UP = HeadingPoint(0.0, 1.0)
_RIGHT = HeadingPoint(1.0, 0.0)
_DOWN = HeadingPoint(0.0, -1.0)
_LEFT = HeadingPoint(-1.0, 0.0)

_QUADRANT_POINTS: dict[int, tuple[HeadingPoint, HeadingPoint]] = {
    1: (_UP, _RIGHT),
    2: (_LEFT, _UP),
    3: (_LEFT, _DOWN),
    4: (_DOWN, _RIGHT),
}
_QUADRANT_MIDPOINT_ANGLE: dict[int, float] = {1: 45.0, 2: 135.0, 3: 225.0, 4: 315.0}


def quadrant_spline(quadrant: int) -> Spline:
    """The unit-circle spline for *quadrant* (1-4).

    Raises:
        ValueError: If *quadrant* is not 1, 2, 3 or 4.
    """
    if quadrant not in _QUADRANT_POINTS:
        raise ValueError(f"quadrant must be 1, 2, 3 or 4, got {quadrant}")
    first, last = _QUADRANT_POINTS[quadrant]
    middle = ORIGIN.in_direction(_QUADRANT_MIDPOINT_ANGLE[quadrant], 1.0)
    return Spline([first, middle.with_heading(0.0), last])


def interpolate_quadrant(
    quadrant: int, samples: int = DEFAULT_SAMPLES
) -> list[HeadingPoint]:
    """Sample the unit quadrant arc into headed points."""
    trajectory = Trajectory([quadrant_spline(quadrant)])
    return PathGenerator(get_default_settings()).to_path(trajectory, samples)


def ensure_increasing_order(points: Sequence[HeadingPoint]) -> list[HeadingPoint]:
    """Return *points* ordered so the first x is not greater than the last."""
    points = list(points)
    if len(points) > 1 and points[0].x > points[-1].x:
        points.reverse()
    return points


def ensure_decreasing_order(points: Sequence[HeadingPoint]) -> list[HeadingPoint]:
    """Return *points* ordered so the first x is not less than the last."""
    points = list(points)
    if len(points) > 1 and points[0].x < points[-1].x:
        points.reverse()
    return points


def scale_points(points: Sequence[HeadingPoint], scale: float) -> list[HeadingPoint]:
    """Scale positions about the origin, keeping headings."""
    return [p.scale(scale).with_heading(p.heading) for p in points]


def displace_points(
    points: Sequence[HeadingPoint], offset: Point
) -> list[HeadingPoint]:
    """Translate positions by *offset*, keeping headings."""
    return [p.add(offset).with_heading(p.heading) for p in points]


def rotate_points(
    points: Sequence[HeadingPoint],
    degrees: float,
    center: Point | None = None,
) -> list[HeadingPoint]:
    """Rotate positions and headings counter-clockwise by *degrees*."""
    return [
        p.rotate(degrees, center).with_heading(fix_deg(p.heading + degrees))
        for p in points
    ]


def transform_points(
    points: Sequence[HeadingPoint], radius: float, center: Point
) -> list[HeadingPoint]:
    """Scale unit points to *radius*, then move them onto *center*."""
    return displace_points(scale_points(points, radius), center)
