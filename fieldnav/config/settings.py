"""Configuration defaults for fieldnav.

Provides the ``Settings`` dataclass that holds every tunable parameter
for the robot footprint, finder chain, grid search and
trajectory sampling.

Typical usage::

    from fieldnav.config.settings import get_default_settings

    settings = get_default_settings()
    print(settings.resolution)
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Any

from fieldnav.errors import NoFindersError
from fieldnav.models.search import (
    FinderType,
    GridAlgorithm,
    GridFinderOptions,
    Heuristic,
)


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for path discovery and trajectory sampling.

    Linear values share one unit, conventionally inches.  Defaults
    describe an 18 inch robot.  Field bounds belong to the ``FieldMap``
    being searched, not to the settings.

    Attributes:
        robot_width: Robot footprint along x.
        robot_height: Robot footprint along y.
        resolution: Grid cells per field unit used by the grid tier.
            Higher values are more accurate and cost memory and CPU
            roughly with the square of the value.
        search_margin: Distance the grid tier extends its search region
            beyond the start/end bounding box (clamped to the field).
        use_lightning: Enable the direct-clearance tier.
        use_fast: Enable the corridor tier.
        use_grid: Enable the grid-search tier.
        grid_algorithm: ``"a_star"`` or ``"theta_star"``.
        heuristic: ``"manhattan"``, ``"euclidean"``, ``"chebyshev"`` or
            ``"octile"``.
        allow_diagonal: Permit diagonal grid moves.
        dont_cross_corners: Require both orthogonal neighbours of a
            diagonal move to be walkable.
        orthogonal_cost: Grid cost of an orthogonal step.
        diagonal_cost: Grid cost of a diagonal step.
        path_samples: Default number of steps per segment when a
            trajectory is sampled into a dense path.
    """

    # -- Robot footprint ------------------------------------------------------
    robot_width: float = 18.0
    robot_height: float = 18.0

    # -- Finder chain ---------------------------------------------------------
    use_lightning: bool = True
    use_fast: bool = True
    use_grid: bool = True

    # -- Grid search ----------------------------------------------------------
    resolution: int = 2
    search_margin: float = 6.0
    grid_algorithm: str = "a_star"
    heuristic: str = "manhattan"
    allow_diagonal: bool = True
    dont_cross_corners: bool = True
    orthogonal_cost: float = 1.0
    diagonal_cost: float = math.sqrt(2.0)

    # -- Trajectory sampling --------------------------------------------------
    path_samples: int = 50

    def __post_init__(self) -> None:
        """Reject configurations that cannot produce a working finder chain."""
        for name in ("resolution", "path_samples"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        for name in ("robot_width", "robot_height", "search_margin"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
        if self.orthogonal_cost <= 0 or self.diagonal_cost <= 0:
            raise ValueError("Grid movement costs must be > 0")

        # Raises ValueError for names with no backing implementation.
        GridAlgorithm(self.grid_algorithm)
        Heuristic(self.heuristic)

        if not self.use_lightning and not self.use_fast and not self.use_grid:
            raise NoFindersError(
                "No finder tier is enabled; enable at least one of "
                "use_lightning, use_fast or use_grid."
            )

    # -- Derived values -------------------------------------------------------

    @property
    def robot_half_width(self) -> float:
        """Half of ``robot_width``."""
        return self.robot_width / 2.0

    @property
    def robot_half_height(self) -> float:
        """Half of ``robot_height``."""
        return self.robot_height / 2.0

    @property
    def robot_half_diagonal(self) -> float:
        """Distance from the robot centre to a footprint corner."""
        return math.hypot(self.robot_half_width, self.robot_half_height)

    def enabled_finders(self) -> list[FinderType]:
        """Return the enabled tiers in fallback order."""
        order = [
            (self.use_lightning, FinderType.LIGHTNING),
            (self.use_fast, FinderType.CORRIDOR),
            (self.use_grid, FinderType.GRID),
        ]
        return [finder for enabled, finder in order if enabled]

    def algorithm(self) -> GridAlgorithm:
        """Return ``grid_algorithm`` as a ``GridAlgorithm``."""
        return GridAlgorithm(self.grid_algorithm)

    def finder_options(self) -> GridFinderOptions:
        """Bundle the grid movement rules into ``GridFinderOptions``."""
        return GridFinderOptions(
            allow_diagonal=self.allow_diagonal,
            dont_cross_corners=self.dont_cross_corners,
            heuristic=Heuristic(self.heuristic),
            orthogonal_cost=self.orthogonal_cost,
            diagonal_cost=self.diagonal_cost,
        )

    # -- Factory & serialisation ----------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create a ``Settings`` instance from a plain dictionary.

        Unknown keys are silently ignored so that forward-compatible
        config files do not break older versions.

        Args:
            data: Dictionary whose keys correspond to ``Settings``
                field names.  Only recognised keys are used; the rest
                are discarded.

        Returns:
            A new ``Settings`` instance populated from *data*, with
            defaults filling any missing keys.
        """
        known_names = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in known_names}
        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the settings to a plain dictionary.

        Returns:
            A shallow dictionary mapping every field name to its
            current value.
        """
        return asdict(self)


def get_default_settings() -> Settings:
    """Return a ``Settings`` instance with all default values.

    Call ``Settings.from_dict`` when you need to overlay overrides on
    top of the defaults.

    Returns:
        A freshly constructed ``Settings`` with default values.
    """
    return Settings()
