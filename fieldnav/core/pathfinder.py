"""Pathfinder: the facade callers use to plan and parameterize motion.

Wraps a ``GeneratorManager`` and a ``PathGenerator`` so a caller can go
from start/end (or a list of waypoints) to a dense headed path in one
place.  Unlike the finders themselves, the facade turns an empty search
result into a ``NoPathError`` so the caller has to decide whether to
retry, replan or stop the robot.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fieldnav.config.settings import Settings, get_default_settings
from fieldnav.core.generator_manager import GeneratorManager
from fieldnav.core.spline import Linear
from fieldnav.core.trajectory import PathGenerator, Trajectory
from fieldnav.errors import InvalidPathError, NoPathError
from fieldnav.models.geometry import HeadingPoint, Point
from fieldnav.models.zone import FieldMap

logger = logging.getLogger(__name__)


class Pathfinder:
    """Path discovery plus trajectory sampling over one field map.

    Args:
        field_map: The field to plan on.
        settings: Tuning values.  ``None`` uses the defaults.

    Raises:
        NoFindersError: If *settings* enables no finder tier.
    """

    def __init__(self, field_map: FieldMap, settings: Settings | None = None) -> None:
        self._map = field_map
        self._settings = settings or get_default_settings()
        self._manager = GeneratorManager(field_map, self._settings)
        self._path_generator = PathGenerator(self._settings)

    @property
    def field_map(self) -> FieldMap:
        return self._map

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def manager(self) -> GeneratorManager:
        return self._manager

    # -- Path discovery -------------------------------------------------------

    def get_path(self, start: Point, end: Point) -> list[Point]:
        """Find a path from *start* to *end*.

        Raises:
            NoPathError: If every enabled finder returned no path.
        """
        path = self._manager.get_coordinate_path(start, end)
        if not path:
            logger.warning("No path found from %s to %s", start, end)
            raise NoPathError(start, end)
        logger.debug("Path %s -> %s has %d points", start, end, len(path))
        return path

    def get_waypoint_path(self, points: Sequence[Point]) -> list[Point]:
        """Find one path visiting every waypoint in order.

        Each consecutive pair is searched separately; the legs are
        joined with the shared junction point kept once.

        Raises:
            InvalidPathError: If fewer than two waypoints are given.
            NoPathError: If any leg has no path.
        """
        if len(points) < 2:
            raise InvalidPathError(
                f"A waypoint path needs at least 2 points, got {len(points)}"
            )

        merged: list[Point] = []
        for leg_start, leg_end in zip(points, points[1:]):
            leg = self.get_path(leg_start, leg_end)
            if merged and merged[-1].is_close(leg[0]):
                leg = leg[1:]
            merged.extend(leg)
        return merged

    # -- Heading & trajectory -------------------------------------------------

    @staticmethod
    def with_heading(
        points: Sequence[Point], start: HeadingPoint, end: HeadingPoint
    ) -> list[HeadingPoint]:
        """Attach headings to a discovered path.

        The first point takes the start heading and every later point
        the end heading.  A single point takes the end heading.
        """
        if len(points) == 1:
            return [points[0].with_heading(end.heading)]
        return [
            p.with_heading(start.heading if i == 0 else end.heading)
            for i, p in enumerate(points)
        ]

    def get_headed_path(
        self, start: HeadingPoint, end: HeadingPoint
    ) -> list[HeadingPoint]:
        """``get_path`` followed by ``with_heading``."""
        return self.with_heading(self.get_path(start, end), start, end)

    @staticmethod
    def get_trajectory(points: Sequence[HeadingPoint]) -> Trajectory:
        """Build a trajectory of straight segments through *points*.

        Raises:
            InvalidPathError: If fewer than two points are given.
        """
        if len(points) < 2:
            raise InvalidPathError(
                f"A trajectory needs at least 2 points, got {len(points)}"
            )
        return Trajectory([Linear(a, b) for a, b in zip(points, points[1:])])

    def to_path(
        self, trajectory: Trajectory, samples: int | None = None
    ) -> list[HeadingPoint]:
        """Sample *trajectory* with this pathfinder's settings."""
        return self._path_generator.to_path(trajectory, samples)

    def plan(
        self, start: HeadingPoint, end: HeadingPoint, samples: int | None = None
    ) -> list[HeadingPoint]:
        """Find a path and sample it into a dense headed path.

        Raises:
            NoPathError: If no finder tier found a path.
        """
        headed = self.get_headed_path(start, end)
        if len(headed) == 1:
            return headed
        return self.to_path(self.get_trajectory(headed), samples)
