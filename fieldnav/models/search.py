"""Search configuration models shared by the finder chain.

The enumerations here are the configuration-time vocabulary for which
finder tiers run, which grid algorithm backs the last tier, and which
heuristic that algorithm uses.  Unknown values fail when the enum is
constructed, long before any search is attempted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class FinderType(Enum):
    """A path-discovery tier, listed in fallback order.

    Attributes:
        LIGHTNING: Direct-clearance test over the start/end bounding box.
        CORRIDOR: Two-line corridor test along the straight path.
        GRID: Rasterized grid search (A* or Theta*).
    """

    LIGHTNING = "lightning"
    CORRIDOR = "corridor"
    GRID = "grid"


class GridAlgorithm(Enum):
    """Search algorithm used by the grid tier.

    Attributes:
        A_STAR: Classic A* over 4/8-connected cells.
        THETA_STAR: Any-angle Theta* with line-of-sight parent shortcuts.
    """

    A_STAR = "a_star"
    THETA_STAR = "theta_star"


class Heuristic(Enum):
    """Distance estimate used to order the open set.

    Attributes:
        MANHATTAN: ``|dx| + |dy|``.
        EUCLIDEAN: ``hypot(dx, dy)``.
        CHEBYSHEV: ``max(|dx|, |dy|)``.
        OCTILE: ``max + (sqrt(2) - 1) * min``.
    """

    MANHATTAN = "manhattan"
    EUCLIDEAN = "euclidean"
    CHEBYSHEV = "chebyshev"
    OCTILE = "octile"

    def estimate(self, dx: float, dy: float) -> float:
        """Return the heuristic distance for a cell offset."""
        dx = abs(dx)
        dy = abs(dy)
        if self is Heuristic.MANHATTAN:
            return dx + dy
        if self is Heuristic.EUCLIDEAN:
            return math.hypot(dx, dy)
        if self is Heuristic.CHEBYSHEV:
            return max(dx, dy)
        return max(dx, dy) + (math.sqrt(2.0) - 1.0) * min(dx, dy)


@dataclass(frozen=True)
class GridFinderOptions:
    """Movement rules for grid search.

    Attributes:
        allow_diagonal: Permit 8-connected moves.
        dont_cross_corners: When True, a diagonal move needs both
            orthogonal neighbours walkable.  When False it needs at
            least one; squeezing between two blocked cells is never
            allowed.
        heuristic: Open-set ordering heuristic.
        orthogonal_cost: Cost of a horizontal or vertical step.
        diagonal_cost: Cost of a diagonal step.
    """

    allow_diagonal: bool = True
    dont_cross_corners: bool = True
    heuristic: Heuristic = Heuristic.MANHATTAN
    orthogonal_cost: float = 1.0
    diagonal_cost: float = math.sqrt(2.0)
