"""Grid search: A* and Theta* over an occupancy grid.

This module ONLY handles search over a pre-built boolean grid:

- neighbour expansion with configurable diagonal and corner rules
- A* with a configurable heuristic
- Theta* (any-angle) with Bresenham line-of-sight parent shortcuts
- path reconstruction in cell coordinates

Converting between field and cell coordinates lives in
``fieldnav.core.map_tools``.

Cells are ``(gx, gy)`` tuples; the grid is indexed ``walkable[gy, gx]``.
"""

from __future__ import annotations

import heapq
import itertools
import math

import numpy as np
from numpy.typing import NDArray

from fieldnav.models.search import GridAlgorithm, GridFinderOptions

Cell = tuple[int, int]

_ORTHOGONAL: tuple[Cell, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
_DIAGONAL: tuple[Cell, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))


def _walkable(walkable: NDArray[np.bool_], gx: int, gy: int) -> bool:
    rows, columns = walkable.shape
    return 0 <= gx < columns and 0 <= gy < rows and bool(walkable[gy, gx])


def _diagonal_allowed(
    walkable: NDArray[np.bool_],
    gx: int,
    gy: int,
    dx: int,
    dy: int,
    dont_cross_corners: bool,
) -> bool:
    """Apply the corner rule to a diagonal step from ``(gx, gy)``."""
    side_a = _walkable(walkable, gx + dx, gy)
    side_b = _walkable(walkable, gx, gy + dy)
    if dont_cross_corners:
        return side_a and side_b
    return side_a or side_b


def neighbors(
    walkable: NDArray[np.bool_],
    cell: Cell,
    options: GridFinderOptions,
) -> list[tuple[Cell, float]]:
    """Walkable neighbours of *cell* with their step costs.

    Args:
        walkable: Occupancy grid.
        cell: Cell to expand.
        options: Movement rules.

    Returns:
        ``[(neighbour, cost), ...]``.
    """
    gx, gy = cell
    result: list[tuple[Cell, float]] = []
    for dx, dy in _ORTHOGONAL:
        if _walkable(walkable, gx + dx, gy + dy):
            result.append(((gx + dx, gy + dy), options.orthogonal_cost))
    if options.allow_diagonal:
        for dx, dy in _DIAGONAL:
            if not _walkable(walkable, gx + dx, gy + dy):
                continue
            if not _diagonal_allowed(
                walkable, gx, gy, dx, dy, options.dont_cross_corners
            ):
                continue
            result.append(((gx + dx, gy + dy), options.diagonal_cost))
    return result


def bresenham_line(a: Cell, b: Cell) -> list[Cell]:
    """Cells visited by Bresenham's line from *a* to *b* (inclusive)."""
    x1, y1 = a
    x2, y2 = b
    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x2 >= x1 else -1
    sy = 1 if y2 >= y1 else -1
    err = dx - dy

    cells: list[Cell] = []
    x, y = x1, y1
    while True:
        cells.append((x, y))
        if x == x2 and y == y2:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
    return cells


def line_of_sight(
    walkable: NDArray[np.bool_],
    a: Cell,
    b: Cell,
    dont_cross_corners: bool = True,
) -> bool:
    """Check that every cell on the line from *a* to *b* is walkable.

    Diagonal steps along the line obey the same corner rule as grid
    moves, so a shortcut never slips between blocked cells that a
    step-by-step path could not pass.
    """
    cells = bresenham_line(a, b)
    for index, (x, y) in enumerate(cells):
        if not _walkable(walkable, x, y):
            return False
        if index == 0:
            continue
        px, py = cells[index - 1]
        dx, dy = x - px, y - py
        if dx != 0 and dy != 0 and not _diagonal_allowed(
            walkable, px, py, dx, dy, dont_cross_corners
        ):
            return False
    return True


def _reconstruct(came_from: dict[Cell, Cell], current: Cell) -> list[Cell]:
    """Backtrack from *current* to the start cell."""
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def find_path(
    walkable: NDArray[np.bool_],
    start: Cell,
    goal: Cell,
    options: GridFinderOptions | None = None,
    algorithm: GridAlgorithm = GridAlgorithm.A_STAR,
) -> list[Cell]:
    """Search the grid for a path from *start* to *goal*.

    Args:
        walkable: Boolean grid indexed ``[gy, gx]``; True = free.
        start: Start cell ``(gx, gy)``.
        goal: Goal cell ``(gx, gy)``.
        options: Movement rules; defaults to ``GridFinderOptions()``.
        algorithm: ``A_STAR`` or ``THETA_STAR``.

    Returns:
        The cell path from *start* to *goal* inclusive, or ``[]`` when
        either endpoint is blocked or no path exists.  Theta* paths
        contain only the turning cells.
    """
    if options is None:
        options = GridFinderOptions()
    algorithm = GridAlgorithm(algorithm)

    if not _walkable(walkable, *start) or not _walkable(walkable, *goal):
        return []
    if start == goal:
        return [start]

    heuristic = options.heuristic
    theta = algorithm is GridAlgorithm.THETA_STAR

    def h(cell: Cell) -> float:
        return heuristic.estimate(goal[0] - cell[0], goal[1] - cell[1])

    # Open set entries: (f_score, tie_breaker, cell).  The counter keeps
    # heap ordering stable without comparing cells.
    counter = itertools.count()
    open_set: list[tuple[float, int, Cell]] = [(h(start), next(counter), start)]
    came_from: dict[Cell, Cell] = {}
    g_score: dict[Cell, float] = {start: 0.0}
    closed: set[Cell] = set()

    while open_set:
        _, _, current = heapq.heappop(open_set)
        if current in closed:
            continue
        if current == goal:
            return _reconstruct(came_from, current)
        closed.add(current)

        current_g = g_score[current]
        parent = came_from.get(current)

        for neighbor, step_cost in neighbors(walkable, current, options):
            if neighbor in closed:
                continue

            origin = current
            tentative_g = current_g + step_cost
            if (
                theta
                and parent is not None
                and line_of_sight(walkable, parent, neighbor, options.dont_cross_corners)
            ):
                origin = parent
                tentative_g = g_score[parent] + options.orthogonal_cost * math.hypot(
                    neighbor[0] - parent[0], neighbor[1] - parent[1]
                )

            if tentative_g < g_score.get(neighbor, math.inf):
                came_from[neighbor] = origin
                g_score[neighbor] = tentative_g
                heapq.heappush(
                    open_set, (tentative_g + h(neighbor), next(counter), neighbor)
                )

    return []
