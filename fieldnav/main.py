"""fieldnav command-line entry point.

Builds a field map from command-line obstacles, plans a path between two
headed points and prints (or saves) the sampled path.

Typical usage::

    fieldnav --start 10,10,0 --end 130,130,90 --rect 60,60,24,24 --theta-star

Programmatic usage::

    from fieldnav.main import build_pathfinder

    pathfinder = build_pathfinder(field="ftc", rects=[(60, 60, 24, 24)])
    points = pathfinder.plan(start, end)
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from fieldnav.config.settings import Settings
from fieldnav.core.pathfinder import Pathfinder
from fieldnav.core.point_io import save_points
from fieldnav.errors import FieldnavError, NoPathError
from fieldnav.models.geometry import HeadingPoint, Point
from fieldnav.models.shapes import Circle, Rectangle
from fieldnav.models.zone import FieldMap, Zone

logger = logging.getLogger(__name__)

_FIELD_PRESETS = {
    "ftc": FieldMap.ftc,
    "frc": FieldMap.frc,
}


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_field_map(
    field: str = "ftc",
    rects: Sequence[tuple[float, float, float, float]] = (),
    circles: Sequence[tuple[float, float, float]] = (),
) -> FieldMap:
    """Build a preset field with solid rectangle and circle obstacles.

    Args:
        field: ``"ftc"`` or ``"frc"``.
        rects: ``(x, y, width, height)`` tuples, ``(x, y)`` being the
            lower-left corner.
        circles: ``(x, y, radius)`` tuples.

    Returns:
        The populated map.

    Raises:
        ValueError: If *field* is not a known preset.
    """
    preset = _FIELD_PRESETS.get(field)
    if preset is None:
        raise ValueError(f"Unknown field preset '{field}'")
    field_map = preset()

    for i, (x, y, width, height) in enumerate(rects):
        shape = Rectangle.from_corners(x, y, x + width, y + height)
        field_map.add_zone(Zone(f"rect-{i}", shape))
    for i, (x, y, radius) in enumerate(circles):
        field_map.add_zone(Zone(f"circle-{i}", Circle(Point(x, y), radius)))
    return field_map


def build_pathfinder(
    field: str = "ftc",
    rects: Sequence[tuple[float, float, float, float]] = (),
    circles: Sequence[tuple[float, float, float]] = (),
    **overrides: object,
) -> Pathfinder:
    """Build a ``Pathfinder`` for a preset field.

    Args:
        field: ``"ftc"`` or ``"frc"``.
        rects: Rectangle obstacles, see ``build_field_map``.
        circles: Circle obstacles, see ``build_field_map``.
        **overrides: ``Settings`` fields to override.

    Returns:
        A ready ``Pathfinder``.
    """
    field_map = build_field_map(field, rects, circles)
    return Pathfinder(field_map, Settings.from_dict(overrides))


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _floats(text: str, counts: tuple[int, ...]) -> list[float]:
    try:
        values = [float(part) for part in text.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not a list of numbers")
    if len(values) not in counts:
        expected = " or ".join(str(c) for c in counts)
        raise argparse.ArgumentTypeError(
            f"'{text}' has {len(values)} values, expected {expected}"
        )
    return values


def parse_heading_point(text: str) -> HeadingPoint:
    """Parse ``X,Y`` or ``X,Y,HEADING``."""
    values = _floats(text, (2, 3))
    return HeadingPoint(*values)


def parse_rect(text: str) -> tuple[float, float, float, float]:
    """Parse ``X,Y,WIDTH,HEIGHT``."""
    x, y, width, height = _floats(text, (4,))
    return x, y, width, height


def parse_circle(text: str) -> tuple[float, float, float]:
    """Parse ``X,Y,RADIUS``."""
    x, y, radius = _floats(text, (3,))
    return x, y, radius


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldnav",
        description="Plan an obstacle-free path across a robot field.",
    )
    parser.add_argument(
        "--start", "-s", required=True, type=parse_heading_point,
        help="Start point as X,Y or X,Y,HEADING.",
    )
    parser.add_argument(
        "--end", "-e", required=True, type=parse_heading_point,
        help="Target point as X,Y or X,Y,HEADING.",
    )
    parser.add_argument(
        "--field", choices=sorted(_FIELD_PRESETS), default="ftc",
        help="Field preset (default: ftc, 144 x 144).",
    )
    parser.add_argument(
        "--rect", action="append", type=parse_rect, default=[],
        help="Solid rectangle X,Y,WIDTH,HEIGHT from its lower-left corner. "
        "Repeatable.",
    )
    parser.add_argument(
        "--circle", action="append", type=parse_circle, default=[],
        help="Solid circle X,Y,RADIUS. Repeatable.",
    )
    parser.add_argument(
        "--theta-star", action="store_true",
        help="Use Theta* instead of A* for the grid tier.",
    )
    parser.add_argument(
        "--resolution", type=int, default=None,
        help="Grid cells per field unit.",
    )
    parser.add_argument(
        "--search-margin", type=float, default=None,
        help="Padding around the start/end box searched by the grid tier.",
    )
    parser.add_argument(
        "--samples", type=int, default=None,
        help="Samples per path segment.",
    )
    parser.add_argument(
        "--output", "-o", default=None,
        help="Write the sampled path to this JSON file instead of stdout.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging.",
    )
    return parser


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments, plan the path and print or save it."""
    args = build_parser().parse_args(argv)

    # -- Logging setup ---------------------------------------------------
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    overrides: dict[str, object] = {}
    if args.theta_star:
        overrides["grid_algorithm"] = "theta_star"
    if args.resolution is not None:
        overrides["resolution"] = args.resolution
    if args.search_margin is not None:
        overrides["search_margin"] = args.search_margin
    if args.samples is not None:
        overrides["path_samples"] = args.samples

    try:
        pathfinder = build_pathfinder(args.field, args.rect, args.circle, **overrides)
        points = pathfinder.plan(args.start, args.end)
    except NoPathError as exc:
        logger.error("%s", exc)
        sys.exit(1)
    except (FieldnavError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(2)

    if args.output:
        save_points(args.output, points)
    else:
        for point in points:
            print(point)

    sys.exit(0)


if __name__ == "__main__":
    main()
