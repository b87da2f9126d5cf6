"""Trajectories and their conversion into dense headed paths.

- ``Trajectory`` -- an ordered list of segments with a completion cursor.
- ``PathGenerator`` -- samples every segment of a trajectory into one
  list of ``HeadingPoint`` in travel order.
- ``SegmentInterpolator`` -- percent-of-completion lookups on a single
  segment, for followers that track progress along it.
"""

from __future__ import annotations

import functools
from collections.abc import Sequence

from fieldnav.config.settings import Settings
from fieldnav.core.spline import Segment
from fieldnav.models.geometry import EPSILON, HeadingPoint, Point


# ---------------------------------------------------------------------------
# Trajectory
# ---------------------------------------------------------------------------


class Trajectory:
    """Ordered segments plus a zero-based "current segment" cursor.

    The cursor always lies in ``[0, len(segments))``.  Callers check
    ``next_segment`` before calling ``complete_segment``; advancing past
    the last segment is an error.

    Args:
        segments: Segments in travel order.

    Raises:
        ValueError: If *segments* is empty.
    """

    def __init__(self, segments: Sequence[Segment]) -> None:
        if not segments:
            raise ValueError("A trajectory needs at least one segment")
        self._segments: tuple[Segment, ...] = tuple(segments)
        self._index = 0

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_segment(self) -> Segment:
        return self._segments[self._index]

    @property
    def next_segment(self) -> Segment | None:
        """The segment after the current one, or ``None`` at the end."""
        if self.is_last_segment:
            return None
        return self._segments[self._index + 1]

    @property
    def is_last_segment(self) -> bool:
        return self._index == len(self._segments) - 1

    def complete_segment(self) -> Segment:
        """Advance the cursor and return the new current segment.

        Raises:
            IndexError: If the cursor is already on the last segment.
        """
        if self.is_last_segment:
            raise IndexError(
                f"Cannot complete segment {self._index}: it is the last of "
                f"{len(self._segments)}"
            )
        self._index += 1
        return self.current_segment

    def reset(self) -> None:
        """Move the cursor back to the first segment."""
        self._index = 0

    def __len__(self) -> int:
        return len(self._segments)


# ---------------------------------------------------------------------------
# Path generation
# ---------------------------------------------------------------------------


def sample_segment(segment: Segment, samples: int) -> list[HeadingPoint]:
    """Sample one segment from its start to its end.

    The x-range is stepped in ``range / samples`` increments with both
    endpoints included.  Segments with no x extent are stepped along y
    instead, and a zero-length segment yields only its start.
    """
    start = segment.start()
    end = segment.end()
    dx = end.x - start.x
    dy = end.y - start.y

    if abs(dx) > EPSILON:
        points = [
            segment.interpolate_from_x(start.x + dx * i / samples)
            for i in range(samples + 1)
        ]
    elif abs(dy) > EPSILON:
        points = [
            segment.interpolate_from_y(start.y + dy * i / samples)
            for i in range(samples + 1)
        ]
    else:
        points = [start.point]

    return [p.with_heading(segment.angle_at(p).degrees) for p in points]


def _join(path: list[HeadingPoint], points: list[HeadingPoint]) -> list[HeadingPoint]:
    """Append *points* to *path*, skipping a repeated junction point."""
    if path and points and path[-1].is_close(points[0]):
        return path + points[1:]
    return path + points


class PathGenerator:
    """Turns trajectories into dense headed point lists.

    Args:
        settings: Supplies the default ``path_samples``.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def to_path(
        self, trajectory: Trajectory, samples: int | None = None
    ) -> list[HeadingPoint]:
        """Sample every segment of *trajectory* into one path.

        Args:
            trajectory: Segments to sample, in travel order.
            samples: Steps per segment.  ``None`` uses
                ``settings.path_samples``.

        Returns:
            Headed points from the first segment's start to the last
            segment's end.

        Raises:
            ValueError: If *samples* is less than 1.
        """
        if samples is None:
            samples = self._settings.path_samples
        if samples < 1:
            raise ValueError(f"samples must be >= 1, got {samples}")

        return functools.reduce(
            _join,
            (sample_segment(segment, samples) for segment in trajectory.segments),
            [],
        )


# ---------------------------------------------------------------------------
# Segment interpolator
# ---------------------------------------------------------------------------


class SegmentInterpolator:
    """Percent-of-completion lookups on one segment.

    Percentages are measured across the segment's bounding box, from
    its minimum to its maximum coordinate.  Out-of-domain queries
    return the ``-1.0`` sentinel.

    Args:
        segment: The segment to wrap.
    """

    OUT_OF_RANGE: float = -1.0

    def __init__(self, segment: Segment) -> None:
        self._segment = segment
        minimum = segment.minimum()
        maximum = segment.maximum()
        self.min_x = minimum.x
        self.min_y = minimum.y
        self.max_x = maximum.x
        self.max_y = maximum.y
        self.size_x = self.max_x - self.min_x
        self.size_y = self.max_y - self.min_y

    @property
    def segment(self) -> Segment:
        return self._segment

    def valid_x(self, x: float) -> bool:
        return self.min_x <= x <= self.max_x

    def valid_y(self, y: float) -> bool:
        return self.min_y <= y <= self.max_y

    def valid(self, point: Point) -> bool:
        """True iff *point* lies inside the segment's bounding box."""
        return self.valid_x(point.x) and self.valid_y(point.y)

    def percent_x(self, x: float) -> float:
        """Fraction of the x-range covered at *x*, or ``-1.0``."""
        if not self.valid_x(x):
            return self.OUT_OF_RANGE
        if self.size_x <= EPSILON:
            return 0.0
        return (x - self.min_x) / self.size_x

    def percent_y(self, y: float) -> float:
        """Fraction of the y-range covered at *y*, or ``-1.0``."""
        if not self.valid_y(y):
            return self.OUT_OF_RANGE
        if self.size_y <= EPSILON:
            return 0.0
        return (y - self.min_y) / self.size_y

    def at_percent_x(self, percent: float) -> Point:
        """Point on the segment at *percent* of its x-range."""
        x = self.min_x + percent * self.size_x
        return self._segment.interpolate_from_x(min(max(x, self.min_x), self.max_x))

    def at_percent_y(self, percent: float) -> Point:
        """Point on the segment at *percent* of its y-range."""
        y = self.min_y + percent * self.size_y
        return self._segment.interpolate_from_y(min(max(y, self.min_y), self.max_y))
