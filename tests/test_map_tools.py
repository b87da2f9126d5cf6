"""Tests for fieldnav.core.map_tools.

Covers Area helpers, shape/area overlap, the zone queries and
occupancy-grid rasterization.
"""

from __future__ import annotations

import numpy as np
import pytest

from fieldnav.core.map_tools import (
    Area,
    OccupancyGrid,
    get_zones_in_area,
    is_area_empty,
    rasterize,
    shape_overlaps_area,
)
from fieldnav.models.geometry import Point
from fieldnav.models.shapes import Circle, Rectangle
from fieldnav.models.zone import FieldMap, Zone


@pytest.fixture()
def field_map() -> FieldMap:
    """An FTC field with a 20 x 20 block centred on (72, 72)."""
    return FieldMap.ftc([Zone("block", Rectangle(Point(72, 72), 20, 20))])


class TestArea:
    """Tests for Area."""

    def test_spanning_orders_bounds(self) -> None:
        """spanning works regardless of point order."""
        area = Area.spanning(Point(10, 2), Point(3, 8))
        assert (area.min_x, area.min_y, area.max_x, area.max_y) == (3, 2, 10, 8)

    def test_spanning_needs_points(self) -> None:
        """spanning with no points is an error."""
        with pytest.raises(ValueError):
            Area.spanning()

    def test_out_of_order_rejected(self) -> None:
        """min must not exceed max."""
        with pytest.raises(ValueError):
            Area(5, 0, 1, 1)

    def test_size_and_center(self) -> None:
        """width, height and center follow from the bounds."""
        area = Area(0, 0, 4, 2)
        assert (area.width, area.height) == (4, 2)
        assert area.center == Point(2, 1)
        assert len(area.corners()) == 4
        assert len(area.edges()) == 4

    def test_expanded_and_clamped(self) -> None:
        """expanded grows every side; clamped_to cuts at the field edge."""
        area = Area(2, 2, 10, 10).expanded(5)
        assert (area.min_x, area.max_x) == (-3, 15)
        clamped = area.clamped_to(FieldMap(12, 12))
        assert (clamped.min_x, clamped.min_y, clamped.max_x, clamped.max_y) == (0, 0, 12, 12)

    def test_clamp_point(self) -> None:
        """clamp pulls a point into the area."""
        assert Area(0, 0, 10, 10).clamp(Point(-1, 11)) == Point(0, 10)


class TestShapeOverlapsArea:
    """Tests for shape_overlaps_area."""

    def test_area_inside_shape(self) -> None:
        """A small area inside a large shape overlaps it."""
        assert shape_overlaps_area(Circle(Point(0, 0), 100), Area(1, 1, 2, 2))

    def test_shape_inside_area(self) -> None:
        """A small shape inside a large area overlaps it."""
        assert shape_overlaps_area(Circle(Point(5, 5), 1), Area(0, 0, 10, 10))

    def test_edge_crossing(self) -> None:
        """A shape straddling an area edge overlaps it."""
        assert shape_overlaps_area(Rectangle(Point(10, 5), 4, 4), Area(0, 0, 10, 10))

    def test_disjoint(self) -> None:
        """Separated shapes do not overlap."""
        assert not shape_overlaps_area(Circle(Point(20, 20), 2), Area(0, 0, 10, 10))

    def test_circle_near_corner_disjoint(self) -> None:
        """A circle near, but not touching, an area corner does not overlap."""
        assert not shape_overlaps_area(Circle(Point(12, 12), 2.5), Area(0, 0, 10, 10))


class TestZoneQueries:
    """Tests for get_zones_in_area and is_area_empty."""

    def test_empty_map(self) -> None:
        """Every area is empty on an empty map."""
        assert is_area_empty(FieldMap.ftc(), Area(0, 0, 144, 144))

    def test_finds_overlapping_zone(self, field_map: FieldMap) -> None:
        """An area over the block reports it."""
        zones = get_zones_in_area(field_map, Area(60, 60, 70, 70))
        assert [z.name for z in zones] == ["block"]
        assert not is_area_empty(field_map, Area(60, 60, 70, 70))

    def test_ignores_distant_zone(self, field_map: FieldMap) -> None:
        """An area away from the block is empty."""
        assert is_area_empty(field_map, Area(0, 0, 20, 20))

    def test_ignores_non_solid_zones(self) -> None:
        """Non-solid zones never block an area."""
        m = FieldMap.ftc([Zone("paint", Circle(Point(10, 10), 5), solid=False)])
        assert is_area_empty(m, Area(0, 0, 20, 20))

    def test_map_order_preserved(self) -> None:
        """Zones come back in map order."""
        m = FieldMap.ftc(
            [
                Zone("b", Circle(Point(10, 10), 2)),
                Zone("a", Circle(Point(12, 12), 2)),
            ]
        )
        assert [z.name for z in get_zones_in_area(m, Area(0, 0, 20, 20))] == ["b", "a"]


class TestRasterize:
    """Tests for rasterize and OccupancyGrid."""

    def test_grid_dimensions(self) -> None:
        """Cell counts include both edges of the region."""
        grid = rasterize(FieldMap.ftc(), 0, 0, 10, 5, 2, 0, 0)
        assert (grid.width, grid.height) == (21, 11)
        assert grid.cell_count == 21 * 11
        assert grid.blocked_count() == 0

    def test_blocks_obstacle_cells(self, field_map: FieldMap) -> None:
        """Cells inside the obstacle are blocked; far cells are free."""
        grid = rasterize(field_map, 50, 50, 94, 94, 1, 0, 0)
        assert not grid.is_walkable(*grid.point_to_cell(Point(72, 72)))
        assert grid.is_walkable(*grid.point_to_cell(Point(52, 52)))

    def test_blocks_inflated_margin(self, field_map: FieldMap) -> None:
        """Cells within the robot half-diagonal of the obstacle are blocked."""
        grid = rasterize(field_map, 40, 40, 104, 104, 1, 3, 4)
        # Block edge at x=82; half-diagonal is 5.
        assert not grid.is_walkable(*grid.point_to_cell(Point(86, 72)))
        assert grid.is_walkable(*grid.point_to_cell(Point(88, 72)))

    def test_zone_outside_region_still_inflates_in(self, field_map: FieldMap) -> None:
        """An obstacle just outside the region still blocks its inflated margin."""
        grid = rasterize(field_map, 84, 60, 100, 84, 1, 3, 4)
        assert not grid.is_walkable(*grid.point_to_cell(Point(84, 72)))

    def test_walkable_indexing(self) -> None:
        """walkable is indexed [gy, gx]."""
        m = FieldMap.ftc([Zone("dot", Circle(Point(4, 1), 0.1))])
        grid = rasterize(m, 0, 0, 6, 2, 1, 0, 0)
        assert grid.walkable.shape == (3, 7)
        assert not grid.walkable[1, 4]
        assert grid.walkable[1, 1]

    def test_cell_point_round_trip(self) -> None:
        """cell_to_point and point_to_cell agree on grid points."""
        grid = rasterize(FieldMap.ftc(), 10, 20, 30, 40, 2, 0, 0)
        assert grid.cell_to_point(4, 6) == Point(12, 23)
        assert grid.point_to_cell(Point(12, 23)) == (4, 6)

    def test_point_to_cell_clamps(self) -> None:
        """Points off the grid map to the nearest edge cell."""
        grid = rasterize(FieldMap.ftc(), 0, 0, 10, 10, 1, 0, 0)
        assert grid.point_to_cell(Point(-5, 50)) == (0, 10)

    def test_in_bounds(self) -> None:
        """in_bounds rejects negative and overflowing indices."""
        grid = OccupancyGrid(np.ones((2, 3), dtype=bool), 0.0, 0.0, 1.0)
        assert grid.in_bounds(2, 1)
        assert not grid.in_bounds(3, 1)
        assert not grid.in_bounds(-1, 0)
        assert not grid.is_walkable(0, 2)

    @pytest.mark.parametrize("resolution", [0, -1])
    def test_bad_resolution(self, resolution: int) -> None:
        """Non-positive resolution is rejected."""
        with pytest.raises(ValueError):
            rasterize(FieldMap.ftc(), 0, 0, 10, 10, resolution, 0, 0)

    def test_bad_bounds(self) -> None:
        """Out-of-order bounds are rejected."""
        with pytest.raises(ValueError):
            rasterize(FieldMap.ftc(), 10, 0, 0, 10, 1, 0, 0)

    def test_higher_resolution_more_cells(self) -> None:
        """Resolution scales the cell count quadratically."""
        low = rasterize(FieldMap.ftc(), 0, 0, 10, 10, 1, 0, 0)
        high = rasterize(FieldMap.ftc(), 0, 0, 10, 10, 4, 0, 0)
        assert high.cell_count > 10 * low.cell_count
