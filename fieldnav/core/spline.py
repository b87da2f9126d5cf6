"""Segment model: monotone cubic splines, lines and arcs.

A ``Segment`` is a piece of a trajectory that can be evaluated from
either axis.  ``Spline`` is the concrete implementation: it fits two
independent Fritsch-Carlson monotone cubic Hermite interpolators, one
mapping x to y and one mapping y to x.  ``Linear`` and ``Arc`` are
convenience constructors that reuse the same machinery.

Queries outside a spline's sampled domain clamp to the nearest endpoint
value; nothing here extrapolates.

Inverse (y to x) lookups are only physically meaningful when the
control points are monotone in y.  Non-monotone y input still produces
a valid function, just not one that retraces the x to y curve.
"""

from __future__ import annotations

import bisect
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from fieldnav.models.geometry import EPSILON, Angle, HeadingPoint, Point, fix_deg


# ---------------------------------------------------------------------------
# Interpolator
# ---------------------------------------------------------------------------


class SplineInterpolator:
    """Monotone cubic Hermite interpolation over ordered samples.

    Build instances with ``monotone_cubic``; the constructor takes
    already-prepared arrays.

    Args:
        x_values: Strictly increasing sample positions.
        y_values: Sample values, parallel to *x_values*.
        m_values: Tangent slopes at each sample.
    """

    def __init__(
        self,
        x_values: Sequence[float],
        y_values: Sequence[float],
        m_values: Sequence[float],
    ) -> None:
        if not (len(x_values) == len(y_values) == len(m_values)):
            raise ValueError("x, y and m arrays must be the same length")
        if not x_values:
            raise ValueError("SplineInterpolator needs at least one sample")
        self._x = tuple(float(v) for v in x_values)
        self._y = tuple(float(v) for v in y_values)
        self._m = tuple(float(v) for v in m_values)

    @classmethod
    def monotone_cubic(
        cls, xs: Sequence[float], ys: Sequence[float]
    ) -> SplineInterpolator:
        """Fit a Fritsch-Carlson monotone cubic to ``(xs, ys)``.

        Samples are ordered by x first.  Samples sharing an x value are
        merged into one sample at their mean y, so every interval has
        positive width.  A single remaining sample yields a constant
        function.

        Args:
            xs: Sample positions, in any order.
            ys: Sample values, parallel to *xs*.

        Returns:
            A fitted interpolator.

        Raises:
            ValueError: If the inputs are empty or differ in length.
        """
        if len(xs) != len(ys):
            raise ValueError(
                f"xs and ys must be the same length, got {len(xs)} and {len(ys)}"
            )
        if len(xs) == 0:
            raise ValueError("monotone_cubic needs at least one sample")

        x_arr = np.asarray(xs, dtype=np.float64)
        y_arr = np.asarray(ys, dtype=np.float64)

        # np.unique sorts; duplicate x values collapse to their mean y.
        x_unique, inverse = np.unique(x_arr, return_inverse=True)
        counts = np.bincount(inverse)
        y_unique = np.bincount(inverse, weights=y_arr) / counts

        n = len(x_unique)
        if n == 1:
            return cls(x_unique.tolist(), y_unique.tolist(), [0.0])

        # Secant slopes.
        d = np.diff(y_unique) / np.diff(x_unique)

        # Initial tangents: one-sided at the ends, secant mean inside.
        m = np.empty(n, dtype=np.float64)
        m[0] = d[0]
        m[-1] = d[-1]
        m[1:-1] = (d[:-1] + d[1:]) / 2.0

        # Fritsch-Carlson correction.  Sequential: each interval may
        # rewrite the tangent the next interval reads.
        for i in range(n - 1):
            if abs(d[i]) <= EPSILON:
                m[i] = 0.0
                m[i + 1] = 0.0
                continue
            a = m[i] / d[i]
            b = m[i + 1] / d[i]
            h = math.hypot(a, b)
            if h > 3.0:
                t = 3.0 / h
                m[i] = t * a * d[i]
                m[i + 1] = t * b * d[i]

        return cls(x_unique.tolist(), y_unique.tolist(), m.tolist())

    @property
    def x_values(self) -> tuple[float, ...]:
        return self._x

    @property
    def y_values(self) -> tuple[float, ...]:
        return self._y

    @property
    def m_values(self) -> tuple[float, ...]:
        """Tangent slope at each sample."""
        return self._m

    @property
    def domain(self) -> tuple[float, float]:
        """``(first_x, last_x)``."""
        return self._x[0], self._x[-1]

    def interpolate(self, value: float) -> float:
        """Evaluate the interpolant at *value*.

        NaN passes through.  Values at or beyond either end of the
        domain return that end's sample value.
        """
        if math.isnan(value):
            return value
        x, y, m = self._x, self._y, self._m
        if value <= x[0]:
            return y[0]
        if value >= x[-1]:
            return y[-1]

        # x[i] <= value < x[i + 1]
        i = bisect.bisect_right(x, value) - 1
        if value == x[i]:
            return y[i]

        h = x[i + 1] - x[i]
        t = (value - x[i]) / h
        return (y[i] * (1.0 + 2.0 * t) + h * m[i] * t) * (1.0 - t) ** 2 + (
            y[i + 1] * (3.0 - 2.0 * t) + h * m[i + 1] * (t - 1.0)
        ) * t**2

    def __repr__(self) -> str:
        return f"SplineInterpolator(samples={len(self._x)}, domain={self.domain})"


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------


class Segment(ABC):
    """A continuously interpolatable piece of a trajectory."""

    @abstractmethod
    def interpolate_from_x(self, x: float) -> Point:
        """Point on the segment at horizontal position *x*."""

    @abstractmethod
    def interpolate_from_y(self, y: float) -> Point:
        """Point on the segment at vertical position *y*."""

    @abstractmethod
    def angle_at(self, point: Point) -> Angle:
        """Heading the robot should hold at *point*."""

    @abstractmethod
    def minimum(self) -> Point:
        """Lower-left corner of the segment's bounding box."""

    @abstractmethod
    def maximum(self) -> Point:
        """Upper-right corner of the segment's bounding box."""

    @abstractmethod
    def start(self) -> Point:
        """Where travel along the segment begins."""

    @abstractmethod
    def end(self) -> Point:
        """Where travel along the segment ends."""


class Spline(Segment):
    """A segment through two or more headed control points.

    Args:
        points: Control points in travel order.

    Raises:
        ValueError: If fewer than two points are given.
    """

    def __init__(self, points: Sequence[HeadingPoint]) -> None:
        if len(points) < 2:
            raise ValueError(f"A spline needs at least 2 points, got {len(points)}")
        self._points: tuple[HeadingPoint, ...] = tuple(points)

        xs = [p.x for p in self._points]
        ys = [p.y for p in self._points]
        self._x_to_y = SplineInterpolator.monotone_cubic(xs, ys)
        self._y_to_x = SplineInterpolator.monotone_cubic(ys, xs)
        self._minimum = Point(min(xs), min(ys))
        self._maximum = Point(max(xs), max(ys))

    @property
    def points(self) -> tuple[HeadingPoint, ...]:
        """The control points in travel order."""
        return self._points

    @property
    def x_interpolator(self) -> SplineInterpolator:
        return self._x_to_y

    @property
    def y_interpolator(self) -> SplineInterpolator:
        return self._y_to_x

    def interpolate_from_x(self, x: float) -> Point:
        return Point(x, self._x_to_y.interpolate(x))

    def interpolate_from_y(self, y: float) -> Point:
        return Point(self._y_to_x.interpolate(y), y)

    def angle_at(self, point: Point) -> Angle:
        # Every point on the segment holds the final control heading.
        return Angle(self._points[-1].heading)

    def minimum(self) -> Point:
        return self._minimum

    def maximum(self) -> Point:
        return self._maximum

    def start(self) -> HeadingPoint:
        return self._points[0]

    def end(self) -> HeadingPoint:
        return self._points[-1]

    def __repr__(self) -> str:
        inner = ", ".join(str(p) for p in self._points)
        return f"{type(self).__name__}([{inner}])"


class Linear(Spline):
    """A straight segment expressed as a two-point spline."""

    def __init__(self, start: HeadingPoint, end: HeadingPoint) -> None:
        super().__init__([start, end])


class Arc(Spline):
    """A three-point spline bowed away from the straight start->end line."""

    def __init__(
        self, start: HeadingPoint, middle: HeadingPoint, end: HeadingPoint
    ) -> None:
        super().__init__([start, middle, end])

    @property
    def middle(self) -> HeadingPoint:
        return self.points[1]

    @classmethod
    def bend(
        cls, start: HeadingPoint, bend_distance: float, end: HeadingPoint
    ) -> Arc:
        """Build an arc through a point offset from the start/end midpoint.

        The middle control point sits *bend_distance* from the midpoint
        of ``start -> end``, 90 degrees counter-clockwise from that
        heading (negative distances bend the other way).  Its heading
        is the average of the two end headings.

        Args:
            start: First control point.
            bend_distance: Perpendicular offset of the middle point.
            end: Last control point.

        Returns:
            The arc.
        """
        perpendicular = fix_deg(start.angle_to(end) + 90.0)
        blended = HeadingPoint.blend(start, end)
        middle = blended.in_direction(perpendicular, bend_distance).with_heading(
            blended.heading
        )
        return cls(start, middle, end)
