"""Ordered fallback chain over the finder tiers.

The manager holds an explicit, ordered list of ``Generator`` instances
built from ``Settings.enabled_finders()``.  A query walks the list and
returns the first non-empty path; an empty list from every tier means
no path was found.
"""

from __future__ import annotations

import logging

from fieldnav.config.settings import Settings
from fieldnav.core.finders import CorridorFinder, Generator, GridFinder, LightningFinder
from fieldnav.errors import NoFindersError
from fieldnav.models.geometry import Point
from fieldnav.models.search import FinderType
from fieldnav.models.zone import FieldMap

logger = logging.getLogger(__name__)

_FINDER_CLASSES: dict[FinderType, type[Generator]] = {
    FinderType.LIGHTNING: LightningFinder,
    FinderType.CORRIDOR: CorridorFinder,
    FinderType.GRID: GridFinder,
}


def build_generator(
    finder_type: FinderType, field_map: FieldMap, settings: Settings
) -> Generator:
    """Instantiate the finder implementing *finder_type*.

    Raises:
        ValueError: If *finder_type* has no implementation.
    """
    finder_cls = _FINDER_CLASSES.get(FinderType(finder_type))
    if finder_cls is None:
        raise ValueError(f"No finder implements {finder_type!r}")
    return finder_cls(field_map, settings)


class GeneratorManager:
    """Tries each enabled finder in order until one returns a path.

    Args:
        field_map: The field every finder searches.
        settings: Selects and configures the tiers.

    Raises:
        NoFindersError: If no tier is enabled.
    """

    def __init__(self, field_map: FieldMap, settings: Settings) -> None:
        self._map = field_map
        self._settings = settings
        self._generators: list[Generator] = [
            build_generator(finder_type, field_map, settings)
            for finder_type in settings.enabled_finders()
        ]
        if not self._generators:
            raise NoFindersError("GeneratorManager needs at least one finder")

    @property
    def generators(self) -> list[Generator]:
        """The finder chain in fallback order (a copy)."""
        return list(self._generators)

    def add_generator(self, generator: Generator, index: int | None = None) -> None:
        """Insert a custom finder into the chain.

        Args:
            generator: Any object implementing ``Generator``.
            index: Position in the chain.  ``None`` appends it as the
                last resort.
        """
        if index is None:
            self._generators.append(generator)
        else:
            self._generators.insert(index, generator)

    def get_coordinate_path(self, start: Point, end: Point) -> list[Point]:
        """Return the first non-empty path produced by the chain.

        Returns:
            A path from *start* to *end*, or ``[]`` when every tier
            failed.
        """
        for generator in self._generators:
            path = generator.get_coordinate_path(start, end)
            if path:
                logger.debug(
                    "%s answered %s -> %s with %d points",
                    type(generator).__name__,
                    start,
                    end,
                    len(path),
                )
                return path
            logger.debug("%s found no path", type(generator).__name__)
        return []
