"""Obstacle shapes: circles, rectangles and rounded rectangles.

Shapes form a closed tagged union, ``Shape = Circle | Rectangle |
RoundedRectangle``.  The capability set shared by every variant lives in
module-level functions that pattern-match on the variant:

* ``contains_point`` -- is a point inside (or on the edge of) the shape?
* ``intersects_line`` -- does any part of a segment touch the shape?
* ``contains_points`` -- vectorised containment over numpy arrays, used
  when rasterizing a field into an occupancy grid.
* ``bounding_box`` / ``inflate`` -- helpers for area queries and
  robot-footprint inflation.

Rectangles are described by their centre, size, and a rotation in
degrees about the centre.  All shapes are convex.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from fieldnav.models.geometry import EPSILON, Line, Point


@dataclass(frozen=True)
class Circle:
    """A disc.

    Attributes:
        center: Centre of the circle.
        radius: Radius (must be >= 0).
    """

    center: Point
    radius: float

    def __post_init__(self) -> None:
        """Validate that the radius is non-negative."""
        if self.radius < 0:
            raise ValueError(f"Circle radius must be >= 0, got {self.radius}")


@dataclass(frozen=True)
class Rectangle:
    """A rectangle, optionally rotated about its centre.

    Attributes:
        center: Centre of the rectangle.
        width: Extent along the rectangle's local x axis (>= 0).
        height: Extent along the rectangle's local y axis (>= 0).
        rotation: Counter-clockwise rotation in degrees.
    """

    center: Point
    width: float
    height: float
    rotation: float = 0.0

    def __post_init__(self) -> None:
        """Validate that width and height are non-negative."""
        if self.width < 0:
            raise ValueError(f"Rectangle width must be >= 0, got {self.width}")
        if self.height < 0:
            raise ValueError(f"Rectangle height must be >= 0, got {self.height}")

    @classmethod
    def from_corners(
        cls, x1: float, y1: float, x2: float, y2: float, rotation: float = 0.0
    ) -> Rectangle:
        """Build a rectangle from two opposite (unrotated) corners."""
        return cls(
            center=Point((x1 + x2) / 2.0, (y1 + y2) / 2.0),
            width=abs(x2 - x1),
            height=abs(y2 - y1),
            rotation=rotation,
        )

    def corners(self) -> list[Point]:
        """Return the four corners counter-clockwise from bottom-left."""
        hw = self.width / 2.0
        hh = self.height / 2.0
        local = [(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)]
        return [_to_world(self.center, self.rotation, lx, ly) for lx, ly in local]

    def edges(self) -> list[Line]:
        """Return the four edges as line segments."""
        c = self.corners()
        return [Line(c[i], c[(i + 1) % 4]) for i in range(4)]


@dataclass(frozen=True)
class RoundedRectangle:
    """A rectangle whose corners are rounded with a fixed radius.

    The outline is the set of points within ``corner_radius`` of an inner
    ``(width - 2r) x (height - 2r)`` core rectangle.

    Attributes:
        center: Centre of the shape.
        width: Full extent along the local x axis.
        height: Full extent along the local y axis.
        corner_radius: Radius of the corner arcs, at most half of the
            shorter side.
        rotation: Counter-clockwise rotation in degrees.
    """

    center: Point
    width: float
    height: float
    corner_radius: float
    rotation: float = 0.0

    def __post_init__(self) -> None:
        """Validate the dimensions and corner radius."""
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"RoundedRectangle size must be >= 0, got {self.width} x {self.height}"
            )
        if self.corner_radius < 0:
            raise ValueError(f"corner_radius must be >= 0, got {self.corner_radius}")
        if self.corner_radius > min(self.width, self.height) / 2.0 + EPSILON:
            raise ValueError(
                f"corner_radius {self.corner_radius} exceeds half of the "
                f"shorter side ({min(self.width, self.height) / 2.0})"
            )

    @property
    def core_half_width(self) -> float:
        return max(self.width / 2.0 - self.corner_radius, 0.0)

    @property
    def core_half_height(self) -> float:
        return max(self.height / 2.0 - self.corner_radius, 0.0)


Shape = Circle | Rectangle | RoundedRectangle


# ---------------------------------------------------------------------------
# Local-frame helpers
# ---------------------------------------------------------------------------


def _to_local(center: Point, rotation: float, point: Point) -> tuple[float, float]:
    """Express *point* in a frame centred on *center* rotated by *rotation*."""
    dx = point.x - center.x
    dy = point.y - center.y
    if rotation == 0.0:
        return dx, dy
    rad = math.radians(rotation)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    return dx * cos_a + dy * sin_a, -dx * sin_a + dy * cos_a


def _to_world(center: Point, rotation: float, lx: float, ly: float) -> Point:
    rad = math.radians(rotation)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    return Point(
        center.x + lx * cos_a - ly * sin_a,
        center.y + lx * sin_a + ly * cos_a,
    )


def _segment_hits_box(
    a: tuple[float, float],
    b: tuple[float, float],
    hw: float,
    hh: float,
) -> bool:
    """Liang-Barsky test of a local-frame segment against ``[-hw, hw] x [-hh, hh]``.

    Segments that lie entirely inside the box count as hits.
    """
    x1, y1 = a
    x2, y2 = b
    dx = x2 - x1
    dy = y2 - y1

    p = [-dx, dx, -dy, dy]
    q = [x1 + hw, hw - x1, y1 + hh, hh - y1]

    t_enter = 0.0
    t_exit = 1.0

    for pi, qi in zip(p, q):
        if pi == 0.0:
            # Parallel to this edge pair.
            if qi < -EPSILON:
                return False
        else:
            t = qi / pi
            if pi < 0.0:
                t_enter = max(t_enter, t)
            else:
                t_exit = min(t_exit, t)
            if t_enter > t_exit + EPSILON:
                return False

    return t_enter <= t_exit + EPSILON


def _box_distance(lx: float, ly: float, hw: float, hh: float) -> float:
    """Distance from a local-frame point to the box (0 when inside)."""
    qx = max(abs(lx) - hw, 0.0)
    qy = max(abs(ly) - hh, 0.0)
    return math.hypot(qx, qy)


def _segment_box_distance(
    a: tuple[float, float],
    b: tuple[float, float],
    hw: float,
    hh: float,
) -> float:
    """Shortest distance between a local-frame segment and a centred box."""
    if _segment_hits_box(a, b, hw, hh):
        return 0.0
    seg = Line(Point(*a), Point(*b))
    corners = [Point(-hw, -hh), Point(hw, -hh), Point(hw, hh), Point(-hw, hh)]
    # For disjoint convex sets the closest pair involves a vertex of one.
    return min(
        _box_distance(a[0], a[1], hw, hh),
        _box_distance(b[0], b[1], hw, hh),
        *(seg.distance_to(c) for c in corners),
    )


# ---------------------------------------------------------------------------
# Capability dispatch
# ---------------------------------------------------------------------------


def shape_kind(shape: Shape) -> str:
    """Return a short lowercase name for the shape variant."""
    match shape:
        case Circle():
            return "circle"
        case Rectangle():
            return "rectangle"
        case RoundedRectangle():
            return "rounded_rectangle"
    raise TypeError(f"Unsupported shape: {shape!r}")


def contains_point(shape: Shape, point: Point) -> bool:
    """Check whether *point* lies inside or on the boundary of *shape*."""
    match shape:
        case Circle(center=center, radius=radius):
            return center.distance(point) <= radius + EPSILON
        case Rectangle(center=center, width=width, height=height, rotation=rotation):
            lx, ly = _to_local(center, rotation, point)
            return abs(lx) <= width / 2.0 + EPSILON and abs(ly) <= height / 2.0 + EPSILON
        case RoundedRectangle():
            lx, ly = _to_local(shape.center, shape.rotation, point)
            distance = _box_distance(lx, ly, shape.core_half_width, shape.core_half_height)
            return distance <= shape.corner_radius + EPSILON
    raise TypeError(f"Unsupported shape: {shape!r}")


def intersects_line(shape: Shape, line: Line) -> bool:
    """Check whether any part of *line* touches or lies inside *shape*."""
    match shape:
        case Circle(center=center, radius=radius):
            return line.distance_to(center) <= radius + EPSILON
        case Rectangle(center=center, width=width, height=height, rotation=rotation):
            a = _to_local(center, rotation, line.a)
            b = _to_local(center, rotation, line.b)
            return _segment_hits_box(a, b, width / 2.0, height / 2.0)
        case RoundedRectangle():
            a = _to_local(shape.center, shape.rotation, line.a)
            b = _to_local(shape.center, shape.rotation, line.b)
            distance = _segment_box_distance(
                a, b, shape.core_half_width, shape.core_half_height
            )
            return distance <= shape.corner_radius + EPSILON
    raise TypeError(f"Unsupported shape: {shape!r}")


def _local_arrays(
    center: Point,
    rotation: float,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    rad = math.radians(rotation)
    dx = xs - center.x
    dy = ys - center.y
    return (
        dx * math.cos(rad) + dy * math.sin(rad),
        -dx * math.sin(rad) + dy * math.cos(rad),
    )


def contains_points(
    shape: Shape,
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
) -> NDArray[np.bool_]:
    """Vectorised ``contains_point`` over broadcastable coordinate arrays.

    Args:
        shape: The shape to test.
        xs: X coordinates.
        ys: Y coordinates (broadcastable against *xs*).

    Returns:
        A boolean array, True where the point is inside the shape.
    """
    match shape:
        case Circle(center=center, radius=radius):
            return np.hypot(xs - center.x, ys - center.y) <= radius + EPSILON
        case Rectangle(center=center, width=width, height=height, rotation=rotation):
            lx, ly = _local_arrays(center, rotation, xs, ys)
            return (np.abs(lx) <= width / 2.0 + EPSILON) & (
                np.abs(ly) <= height / 2.0 + EPSILON
            )
        case RoundedRectangle():
            lx, ly = _local_arrays(shape.center, shape.rotation, xs, ys)
            qx = np.maximum(np.abs(lx) - shape.core_half_width, 0.0)
            qy = np.maximum(np.abs(ly) - shape.core_half_height, 0.0)
            return np.hypot(qx, qy) <= shape.corner_radius + EPSILON
    raise TypeError(f"Unsupported shape: {shape!r}")


def bounding_box(shape: Shape) -> tuple[float, float, float, float]:
    """Axis-aligned bounds of *shape* as ``(min_x, min_y, max_x, max_y)``."""
    match shape:
        case Circle(center=c, radius=r):
            return c.x - r, c.y - r, c.x + r, c.y + r
        case Rectangle():
            corners = shape.corners()
            xs = [c.x for c in corners]
            ys = [c.y for c in corners]
            return min(xs), min(ys), max(xs), max(ys)
        case RoundedRectangle():
            core = Rectangle(
                shape.center,
                2.0 * shape.core_half_width,
                2.0 * shape.core_half_height,
                shape.rotation,
            )
            min_x, min_y, max_x, max_y = bounding_box(core)
            r = shape.corner_radius
            return min_x - r, min_y - r, max_x + r, max_y + r
    raise TypeError(f"Unsupported shape: {shape!r}")


def inflate(shape: Shape, margin: float) -> Shape:
    """Grow *shape* by *margin* in every direction.

    The result is the exact Minkowski sum of the shape with a disc of
    radius *margin*, so a point is inside the inflated shape iff it is
    within *margin* of the original.

    Args:
        shape: Shape to inflate.
        margin: Inflation distance (>= 0).

    Returns:
        The inflated shape.  Rectangles become rounded rectangles.
    """
    if margin < 0:
        raise ValueError(f"margin must be >= 0, got {margin}")
    if margin == 0:
        return shape
    match shape:
        case Circle(center=center, radius=radius):
            return Circle(center, radius + margin)
        case Rectangle(center=center, width=width, height=height, rotation=rotation):
            return RoundedRectangle(
                center, width + 2.0 * margin, height + 2.0 * margin, margin, rotation
            )
        case RoundedRectangle():
            return RoundedRectangle(
                shape.center,
                shape.width + 2.0 * margin,
                shape.height + 2.0 * margin,
                shape.corner_radius + margin,
                shape.rotation,
            )
    raise TypeError(f"Unsupported shape: {shape!r}")
