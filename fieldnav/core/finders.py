"""Path-discovery strategies sharing the ``Generator`` contract.

Three tiers are provided, cheapest first:

* **LightningFinder** -- direct clearance: the straight segment is
  accepted when the start/end bounding box contains no solid zone.
* **CorridorFinder** -- a corridor approximation: two boundary lines,
  offset either side of the straight segment by the robot's
  half-diagonal, must not touch any nearby zone.
* **GridFinder** -- rasterizes the surrounding region and runs A* or
  Theta*.

Every finder returns a list: empty means "no path from this tier", and
a non-empty list starts at *start* and ends at *end*.  Finders never
raise to report a missing path.

Known limitation of the corridor tier: an obstacle narrower than the
corridor that sits between the two boundary lines without touching
either one is not detected.  Callers with tight tolerances should not
rely on that tier alone.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from fieldnav.config.settings import Settings
from fieldnav.core.grid_search import find_path
from fieldnav.core.map_tools import Area, get_zones_in_area, is_area_empty, rasterize
from fieldnav.models.geometry import EPSILON, Line, Point
from fieldnav.models.search import GridAlgorithm, GridFinderOptions
from fieldnav.models.shapes import intersects_line
from fieldnav.models.zone import FieldMap

logger = logging.getLogger(__name__)


def _is_degenerate(start: Point, end: Point) -> bool:
    """True when *start* and *end* coincide."""
    return start.distance(end) <= EPSILON


class Generator(ABC):
    """Contract shared by every path-discovery tier."""

    @abstractmethod
    def get_coordinate_path(self, start: Point, end: Point) -> list[Point]:
        """Find a path from *start* to *end*.

        Args:
            start: Start position.
            end: Target position.

        Returns:
            An ordered list of points from *start* to *end*, or an
            empty list when this tier cannot find a path.
        """


class LightningFinder(Generator):
    """Direct-clearance tier.

    Returns ``[start, end]`` when the axis-aligned rectangle spanned by
    the two points is free of solid zones.
    """

    def __init__(self, field_map: FieldMap, settings: Settings) -> None:
        self._map = field_map
        self._settings = settings

    def get_coordinate_path(self, start: Point, end: Point) -> list[Point]:
        if _is_degenerate(start, end):
            return [start, end]
        if is_area_empty(self._map, Area.spanning(start, end)):
            return [start, end]
        return []


class CorridorFinder(Generator):
    """Corridor-approximation tier.

    Builds two lines parallel to the start->end segment, offset by
    ``hypot(robot_half_width, robot_half_height)`` on either side, and
    accepts ``[start, end]`` when neither line touches a solid zone in
    the corridor's bounding area.  Obstacles that fit entirely between
    the two lines are missed; see the module docstring.
    """

    def __init__(self, field_map: FieldMap, settings: Settings) -> None:
        self._map = field_map
        self._settings = settings
        self._offset = settings.robot_half_diagonal

    def boundary_lines(self, start: Point, end: Point) -> tuple[Line, Line]:
        """The left and right corridor boundaries for a start/end pair."""
        distance = start.distance(end)
        angle = start.angle_to(end)
        left_base = start.in_direction(angle + 90.0, self._offset)
        right_base = start.in_direction(angle - 90.0, self._offset)
        return (
            Line.from_direction(left_base, angle, distance),
            Line.from_direction(right_base, angle, distance),
        )

    def get_coordinate_path(self, start: Point, end: Point) -> list[Point]:
        if _is_degenerate(start, end):
            return [start, end]

        left, right = self.boundary_lines(start, end)
        area = Area.spanning(left.a, left.b, right.a, right.b)
        for zone in get_zones_in_area(self._map, area):
            if intersects_line(zone.shape, left) or intersects_line(zone.shape, right):
                logger.debug("Corridor blocked by zone '%s'", zone.name)
                return []
        return [start, end]


class GridFinder(Generator):
    """Grid-search tier of last resort.

    The search region is the start/end bounding box grown by
    ``settings.search_margin`` and clamped to the field.  It is
    rasterized at ``settings.resolution`` cells per unit with every
    obstacle inflated by the robot half-diagonal, then searched with
    the configured algorithm.  Cost grows with the number of cells.

    Args:
        field_map: The field to search.
        settings: Supplies resolution, footprint, margin and movement
            rules.
        algorithm: Overrides ``settings.grid_algorithm`` when given.
        options: Overrides ``settings.finder_options()`` when given.
    """

    def __init__(
        self,
        field_map: FieldMap,
        settings: Settings,
        algorithm: GridAlgorithm | None = None,
        options: GridFinderOptions | None = None,
    ) -> None:
        self._map = field_map
        self._settings = settings
        # GridAlgorithm(...) raises ValueError for unsupported values.
        self._algorithm = (
            GridAlgorithm(algorithm) if algorithm is not None else settings.algorithm()
        )
        self._options = options if options is not None else settings.finder_options()

    @property
    def algorithm(self) -> GridAlgorithm:
        return self._algorithm

    def search_area(self, start: Point, end: Point) -> Area:
        """Region rasterized for a start/end pair."""
        area = Area.spanning(start, end).expanded(self._settings.search_margin)
        return area.clamped_to(self._map)

    def get_coordinate_path(self, start: Point, end: Point) -> list[Point]:
        if _is_degenerate(start, end):
            return [start, end]

        area = self.search_area(start, end)
        start = area.clamp(start)
        end = area.clamp(end)

        grid = rasterize(
            self._map,
            area.min_x,
            area.min_y,
            area.max_x,
            area.max_y,
            self._settings.resolution,
            self._settings.robot_half_width,
            self._settings.robot_half_height,
        )
        start_cell = grid.point_to_cell(start)
        end_cell = grid.point_to_cell(end)
        logger.debug(
            "Grid search %s: %dx%d cells, %d blocked, %s -> %s",
            self._algorithm.value,
            grid.width,
            grid.height,
            grid.blocked_count(),
            start_cell,
            end_cell,
        )

        cells = find_path(
            grid.walkable, start_cell, end_cell, self._options, self._algorithm
        )
        if not cells:
            return []

        points = [grid.cell_to_point(gx, gy) for gx, gy in cells]
        if len(points) == 1:
            return [start, end]
        points[0] = start
        points[-1] = end
        return points
