"""Geometry primitives: points, headed points, angles and line segments.

All values are in one field-consistent linear unit (conventionally
inches).  Angles are in degrees, measured counter-clockwise from the
positive x axis.  Every type here is an immutable value: operations
return new instances.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EPSILON: float = 1e-9
"""Tolerance used for degenerate-geometry checks."""


def fix_deg(degrees: float) -> float:
    """Normalise an angle in degrees into the range [0, 360)."""
    fixed = math.fmod(degrees, 360.0)
    if fixed < 0.0:
        fixed += 360.0
    # fmod of a tiny negative value can round up to exactly 360.
    return 0.0 if fixed >= 360.0 else fixed


@dataclass(frozen=True)
class Angle:
    """An angle stored in degrees.

    Attributes:
        degrees: The angle in degrees (not normalised).
    """

    degrees: float

    @property
    def radians(self) -> float:
        """The angle in radians."""
        return math.radians(self.degrees)


@dataclass(frozen=True)
class Point:
    """A 2-D position on the field.

    Attributes:
        x: Horizontal coordinate.
        y: Vertical coordinate.
    """

    x: float
    y: float

    def scale(self, sx: float, sy: float | None = None) -> Point:
        """Multiply the coordinates by *sx* (and *sy*, defaulting to *sx*)."""
        if sy is None:
            sy = sx
        return Point(self.x * sx, self.y * sy)

    def translate(self, dx: float, dy: float) -> Point:
        """Shift the point by ``(dx, dy)``."""
        return Point(self.x + dx, self.y + dy)

    def add(self, other: Point) -> Point:
        """Component-wise sum of two points."""
        return Point(self.x + other.x, self.y + other.y)

    def rotate(self, degrees: float, center: Point | None = None) -> Point:
        """Rotate counter-clockwise about *center* (the origin by default).

        Args:
            degrees: Rotation angle in degrees.
            center: Pivot point.  ``None`` means ``(0, 0)``.

        Returns:
            The rotated point.
        """
        cx, cy = (0.0, 0.0) if center is None else (center.x, center.y)
        rad = math.radians(degrees)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)
        dx = self.x - cx
        dy = self.y - cy
        return Point(
            cx + dx * cos_a - dy * sin_a,
            cy + dx * sin_a + dy * cos_a,
        )

    def distance(self, other: Point) -> float:
        """Euclidean distance to *other*."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def angle_to(self, other: Point) -> float:
        """Direction from this point to *other* in degrees, in [0, 360)."""
        return fix_deg(math.degrees(math.atan2(other.y - self.y, other.x - self.x)))

    def midpoint(self, other: Point) -> Point:
        """Point halfway between this point and *other*."""
        return Point((self.x + other.x) / 2.0, (self.y + other.y) / 2.0)

    def in_direction(self, degrees: float, length: float) -> Point:
        """Point reached by travelling *length* along heading *degrees*."""
        rad = math.radians(degrees)
        return Point(
            self.x + length * math.cos(rad),
            self.y + length * math.sin(rad),
        )

    def with_heading(self, heading: float) -> HeadingPoint:
        """Attach a heading (degrees) to this position."""
        return HeadingPoint(self.x, self.y, heading)

    def is_close(self, other: Point, tolerance: float = EPSILON) -> bool:
        """Check whether *other* lies within *tolerance* of this point."""
        return self.distance(other) <= tolerance

    @property
    def point(self) -> Point:
        """This position as a plain ``Point``."""
        return Point(self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


@dataclass(frozen=True)
class HeadingPoint(Point):
    """A field position with a heading.

    Attributes:
        heading: Facing direction in degrees.  Conventionally in
            [0, 360), but not enforced.
    """

    heading: float = 0.0

    @property
    def angle(self) -> Angle:
        """The heading as an ``Angle``."""
        return Angle(self.heading)

    @staticmethod
    def blend(a: HeadingPoint, b: HeadingPoint) -> HeadingPoint:
        """Average position and heading of two headed points."""
        return HeadingPoint(
            (a.x + b.x) / 2.0,
            (a.y + b.y) / 2.0,
            (a.heading + b.heading) / 2.0,
        )

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g}) @ {self.heading:g}"


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True)
class Line:
    """A line segment between two points.

    Attributes:
        a: First endpoint.
        b: Second endpoint.
    """

    a: Point
    b: Point

    @classmethod
    def from_direction(cls, start: Point, degrees: float, length: float) -> Line:
        """Segment of *length* starting at *start* along heading *degrees*."""
        return cls(start, start.in_direction(degrees, length))

    @property
    def midpoint(self) -> Point:
        return self.a.midpoint(self.b)

    @property
    def length(self) -> float:
        return self.a.distance(self.b)

    @property
    def angle(self) -> float:
        """Direction from ``a`` to ``b`` in degrees."""
        return self.a.angle_to(self.b)

    def distance_to(self, point: Point) -> float:
        """Shortest distance from *point* to any point on the segment."""
        dx = self.b.x - self.a.x
        dy = self.b.y - self.a.y
        length_sq = dx * dx + dy * dy
        if length_sq <= EPSILON * EPSILON:
            return self.a.distance(point)
        t = ((point.x - self.a.x) * dx + (point.y - self.a.y) * dy) / length_sq
        t = max(0.0, min(1.0, t))
        return point.distance(Point(self.a.x + t * dx, self.a.y + t * dy))
