"""Map query layer: area tests and occupancy-grid rasterization.

The finder chain never walks the raw zone list itself.  It asks this
module three questions, from cheapest to most expensive:

* ``is_area_empty`` -- does any solid zone touch a rectangle?
* ``get_zones_in_area`` -- which solid zones touch it?
* ``rasterize`` -- what does the region look like as a walkable grid,
  with every obstacle inflated by the robot's half-diagonal?

Resolution is a caller-visible accuracy/performance trade-off: the
rasterized grid has roughly ``area * resolution**2`` cells.

This module depends only on ``fieldnav.models`` and numpy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from fieldnav.models.geometry import Line, Point
from fieldnav.models.shapes import (
    Shape,
    contains_point,
    contains_points,
    inflate,
    intersects_line,
)
from fieldnav.models.zone import FieldMap, Zone


# ---------------------------------------------------------------------------
# Area
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Area:
    """An axis-aligned rectangular region.

    Attributes:
        min_x: Left edge.
        min_y: Bottom edge.
        max_x: Right edge.
        max_y: Top edge.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        """Validate that the bounds are ordered."""
        if self.max_x < self.min_x or self.max_y < self.min_y:
            raise ValueError(
                f"Area bounds out of order: ({self.min_x}, {self.min_y}) "
                f"-> ({self.max_x}, {self.max_y})"
            )

    @classmethod
    def spanning(cls, *points: Point) -> Area:
        """Smallest area containing every point in *points*."""
        if not points:
            raise ValueError("Area.spanning needs at least one point")
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def corners(self) -> list[Point]:
        """The four corners counter-clockwise from ``(min_x, min_y)``."""
        return [
            Point(self.min_x, self.min_y),
            Point(self.max_x, self.min_y),
            Point(self.max_x, self.max_y),
            Point(self.min_x, self.max_y),
        ]

    def edges(self) -> list[Line]:
        """The four boundary segments."""
        c = self.corners()
        return [Line(c[i], c[(i + 1) % 4]) for i in range(4)]

    def contains_point(self, point: Point) -> bool:
        return self.min_x <= point.x <= self.max_x and self.min_y <= point.y <= self.max_y

    def expanded(self, margin: float) -> Area:
        """The area grown by *margin* on every side."""
        return Area(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )

    def clamped_to(self, field_map: FieldMap) -> Area:
        """The part of the area that lies on the field."""
        min_x = min(max(self.min_x, 0.0), field_map.width)
        min_y = min(max(self.min_y, 0.0), field_map.height)
        max_x = min(max(self.max_x, 0.0), field_map.width)
        max_y = min(max(self.max_y, 0.0), field_map.height)
        return Area(min_x, min_y, max_x, max_y)

    def clamp(self, point: Point) -> Point:
        """Clamp *point* into the area."""
        return Point(
            min(max(point.x, self.min_x), self.max_x),
            min(max(point.y, self.min_y), self.max_y),
        )


# ---------------------------------------------------------------------------
# Area queries
# ---------------------------------------------------------------------------


def shape_overlaps_area(shape: Shape, area: Area) -> bool:
    """Check whether a convex shape and an area share any point.

    Two convex regions overlap iff a boundary of one crosses the other,
    or one lies entirely inside the other.  The three checks below
    cover those cases in order of cost.

    Args:
        shape: Obstacle shape.
        area: Query rectangle.

    Returns:
        True if the shape touches the area.
    """
    # Area inside the shape (any corner will do).
    if contains_point(shape, area.corners()[0]):
        return True
    # Shape inside the area.
    if area.contains_point(shape.center):
        return True
    return any(intersects_line(shape, edge) for edge in area.edges())


def get_zones_in_area(field_map: FieldMap, area: Area) -> list[Zone]:
    """Return the solid zones whose shape overlaps *area*, in map order."""
    return [z for z in field_map.solid_zones() if shape_overlaps_area(z.shape, area)]


def is_area_empty(field_map: FieldMap, area: Area) -> bool:
    """True iff no solid zone overlaps *area*."""
    return not get_zones_in_area(field_map, area)


# ---------------------------------------------------------------------------
# Occupancy grid
# ---------------------------------------------------------------------------


@dataclass
class OccupancyGrid:
    """A walkable/blocked raster of part of the field.

    Cell ``(gx, gy)`` samples the field point
    ``(origin_x + gx / resolution, origin_y + gy / resolution)``.

    Attributes:
        walkable: Boolean array indexed ``[gy, gx]``; True where the
            robot centre may stand.
        origin_x: Field x of cell column 0.
        origin_y: Field y of cell row 0.
        resolution: Cells per field unit.
    """

    walkable: NDArray[np.bool_]
    origin_x: float
    origin_y: float
    resolution: float

    @property
    def width(self) -> int:
        """Number of cell columns."""
        return int(self.walkable.shape[1])

    @property
    def height(self) -> int:
        """Number of cell rows."""
        return int(self.walkable.shape[0])

    @property
    def cell_count(self) -> int:
        return int(self.walkable.size)

    def blocked_count(self) -> int:
        """Number of non-walkable cells."""
        return int(self.walkable.size - np.count_nonzero(self.walkable))

    def in_bounds(self, gx: int, gy: int) -> bool:
        return 0 <= gx < self.width and 0 <= gy < self.height

    def is_walkable(self, gx: int, gy: int) -> bool:
        """True iff ``(gx, gy)`` is on the grid and not blocked."""
        return self.in_bounds(gx, gy) and bool(self.walkable[gy, gx])

    def point_to_cell(self, point: Point) -> tuple[int, int]:
        """Nearest cell to a field point, clamped onto the grid."""
        gx = int(round((point.x - self.origin_x) * self.resolution))
        gy = int(round((point.y - self.origin_y) * self.resolution))
        gx = min(max(gx, 0), self.width - 1)
        gy = min(max(gy, 0), self.height - 1)
        return gx, gy

    def cell_to_point(self, gx: int, gy: int) -> Point:
        """Field coordinates sampled by cell ``(gx, gy)``."""
        return Point(
            self.origin_x + gx / self.resolution,
            self.origin_y + gy / self.resolution,
        )


def rasterize(
    field_map: FieldMap,
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
    resolution: float,
    robot_half_width: float,
    robot_half_height: float,
) -> OccupancyGrid:
    """Rasterize a region of the field into an occupancy grid.

    A cell is walkable iff a robot centred on it stays clear of every
    solid zone.  The robot footprint is approximated by its bounding
    circle: each obstacle is inflated by the half-diagonal
    ``hypot(robot_half_width, robot_half_height)`` and the cell sample
    point is tested against the inflated shape.

    Args:
        field_map: Map whose solid zones are rasterized.
        min_x: Left edge of the region.
        min_y: Bottom edge of the region.
        max_x: Right edge of the region.
        max_y: Top edge of the region.
        resolution: Cells per field unit (must be > 0).
        robot_half_width: Half of the robot footprint along x.
        robot_half_height: Half of the robot footprint along y.

    Returns:
        An ``OccupancyGrid`` covering ``[min_x, max_x] x [min_y, max_y]``
        with at least one cell.

    Raises:
        ValueError: If *resolution* is not positive or the bounds are
            out of order.
    """
    if resolution <= 0:
        raise ValueError(f"resolution must be > 0, got {resolution}")
    if max_x < min_x or max_y < min_y:
        raise ValueError("rasterize bounds out of order")

    columns = int(math.floor((max_x - min_x) * resolution)) + 1
    rows = int(math.floor((max_y - min_y) * resolution)) + 1

    xs = min_x + np.arange(columns, dtype=np.float64) / resolution
    ys = min_y + np.arange(rows, dtype=np.float64) / resolution
    grid_x, grid_y = np.meshgrid(xs, ys)

    margin = math.hypot(robot_half_width, robot_half_height)
    region = Area(min_x, min_y, max_x, max_y).expanded(margin)

    blocked = np.zeros((rows, columns), dtype=bool)
    for zone in get_zones_in_area(field_map, region):
        blocked |= contains_points(inflate(zone.shape, margin), grid_x, grid_y)

    return OccupancyGrid(
        walkable=~blocked,
        origin_x=float(min_x),
        origin_y=float(min_y),
        resolution=float(resolution),
    )
