"""Tests for fieldnav.core.arcs."""

from __future__ import annotations

import pytest

from fieldnav.core.arcs import (
    DEFAULT_SAMPLES,
    displace_points,
    ensure_decreasing_order,
    ensure_increasing_order,
    interpolate_quadrant,
    quadrant_spline,
    rotate_points,
    scale_points,
    transform_points,
)
from fieldnav.models.geometry import ORIGIN, HeadingPoint, Point


# Expected (first, last) endpoint of each sampled quadrant.
QUADRANT_ENDS = {
    1: ((0, 1), (1, 0)),
    2: ((-1, 0), (0, 1)),
    3: ((-1, 0), (0, -1)),
    4: ((0, -1), (1, 0)),
}


class TestQuadrants:
    """Tests for the unit quadrant splines."""

    @pytest.mark.parametrize("quadrant", [1, 2, 3, 4])
    def test_endpoints(self, quadrant: int) -> None:
        """Each quadrant runs between its two axis crossings."""
        points = interpolate_quadrant(quadrant)
        (fx, fy), (lx, ly) = QUADRANT_ENDS[quadrant]
        assert (points[0].x, points[0].y) == pytest.approx((fx, fy))
        assert (points[-1].x, points[-1].y) == pytest.approx((lx, ly))

    @pytest.mark.parametrize("quadrant", [1, 2, 3, 4])
    def test_increasing_x(self, quadrant: int) -> None:
        """Quadrant arcs always run in increasing x."""
        xs = [p.x for p in interpolate_quadrant(quadrant)]
        assert xs == sorted(xs)

    def test_default_sample_count(self) -> None:
        """Default sampling gives DEFAULT_SAMPLES + 1 points."""
        assert len(interpolate_quadrant(2)) == DEFAULT_SAMPLES + 1

    def test_custom_sample_count(self) -> None:
        """The sample count is configurable."""
        assert len(interpolate_quadrant(3, samples=4)) == 5

    @pytest.mark.parametrize("quadrant", [1, 2, 3, 4])
    def test_control_points_on_unit_circle(self, quadrant: int) -> None:
        """Every control point lies one unit from the origin."""
        points = quadrant_spline(quadrant).points
        assert [ORIGIN.distance(p) for p in points] == pytest.approx([1.0, 1.0, 1.0])

    def test_first_quadrant_descends(self) -> None:
        """Quadrant 1 falls monotonically from (0, 1) to (1, 0)."""
        ys = [p.y for p in interpolate_quadrant(1, samples=20)]
        assert all(b <= a + 1e-12 for a, b in zip(ys, ys[1:]))
        assert all(-1e-12 <= y <= 1 + 1e-12 for y in ys)

    def test_middle_control_point(self) -> None:
        """The middle control point sits on the unit circle at 45 degrees."""
        spline = quadrant_spline(1)
        middle = spline.points[1]
        assert middle.x == pytest.approx(2**-0.5)
        assert middle.y == pytest.approx(2**-0.5)

    @pytest.mark.parametrize("quadrant", [0, 5, -1])
    def test_invalid_quadrant(self, quadrant: int) -> None:
        """Only quadrants 1-4 exist."""
        with pytest.raises(ValueError):
            quadrant_spline(quadrant)


class TestOrdering:
    """Tests for ensure_increasing_order / ensure_decreasing_order."""

    def test_increasing_reverses(self) -> None:
        """A right-to-left list is reversed."""
        points = [HeadingPoint(3, 0), HeadingPoint(2, 0), HeadingPoint(1, 0)]
        assert [p.x for p in ensure_increasing_order(points)] == [1, 2, 3]

    def test_increasing_keeps(self) -> None:
        """An already increasing list is unchanged."""
        points = [HeadingPoint(1, 0), HeadingPoint(3, 0)]
        assert ensure_increasing_order(points) == points

    def test_decreasing_reverses(self) -> None:
        """A left-to-right list is reversed."""
        points = [HeadingPoint(1, 0), HeadingPoint(3, 0)]
        assert [p.x for p in ensure_decreasing_order(points)] == [3, 1]

    def test_input_not_mutated(self) -> None:
        """The caller's list is left alone."""
        points = [HeadingPoint(3, 0), HeadingPoint(1, 0)]
        ensure_increasing_order(points)
        assert points[0].x == 3

    def test_empty_and_single(self) -> None:
        """Short lists pass through."""
        assert ensure_increasing_order([]) == []
        assert ensure_decreasing_order([HeadingPoint(1, 1)]) == [HeadingPoint(1, 1)]


class TestTransforms:
    """Tests for the point-list transforms."""

    def test_scale(self) -> None:
        """Scaling multiplies positions and keeps headings."""
        assert scale_points([HeadingPoint(1, 2, 30)], 3) == [HeadingPoint(3, 6, 30)]

    def test_displace(self) -> None:
        """Displacing adds the offset and keeps headings."""
        result = displace_points([HeadingPoint(1, 2, 30)], Point(10, 10))
        assert result == [HeadingPoint(11, 12, 30)]

    def test_rotate_about_origin(self) -> None:
        """Rotation turns both position and heading."""
        (result,) = rotate_points([HeadingPoint(1, 0, 0)], 90)
        assert result.x == pytest.approx(0, abs=1e-12)
        assert result.y == pytest.approx(1)
        assert result.heading == pytest.approx(90)

    def test_rotate_heading_wraps(self) -> None:
        """Rotated headings stay within [0, 360)."""
        (result,) = rotate_points([HeadingPoint(0, 0, 300)], 90)
        assert result.heading == pytest.approx(30)

    def test_rotate_about_center(self) -> None:
        """Rotation pivots around the given center."""
        (result,) = rotate_points([HeadingPoint(2, 1)], 180, center=Point(1, 1))
        assert result.x == pytest.approx(0)
        assert result.y == pytest.approx(1)

    def test_transform_places_quadrant(self) -> None:
        """transform_points scales a unit arc onto a field circle."""
        points = transform_points(interpolate_quadrant(1), 24.0, Point(72, 72))
        assert (points[0].x, points[0].y) == pytest.approx((72, 96))
        assert (points[-1].x, points[-1].y) == pytest.approx((96, 72))
