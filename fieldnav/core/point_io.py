"""JSON import and export of headed point lists.

The on-disk format is a JSON array of objects::

    [{"x": 0.0, "y": 0.0, "heading": 0.0}, {"x": 24.0, "y": 12.0, "heading": 90.0}]

A missing ``heading`` key reads as 0.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from fieldnav.models.geometry import HeadingPoint

logger = logging.getLogger(__name__)


def _point_to_dict(point: HeadingPoint) -> dict[str, float]:
    return {"x": point.x, "y": point.y, "heading": point.heading}


def _point_from_dict(data: Any, index: int) -> HeadingPoint:
    if not isinstance(data, dict):
        raise ValueError(f"Point {index} must be an object, got {type(data).__name__}")
    try:
        return HeadingPoint(
            float(data["x"]),
            float(data["y"]),
            float(data.get("heading", 0.0)),
        )
    except KeyError as exc:
        raise ValueError(f"Point {index} is missing key {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Point {index} has a non-numeric value: {exc}") from exc


def points_to_json(points: Sequence[HeadingPoint], indent: int | None = None) -> str:
    """Serialise headed points to a JSON string."""
    return json.dumps([_point_to_dict(p) for p in points], indent=indent)


def points_from_json(text: str) -> list[HeadingPoint]:
    """Parse headed points from a JSON string.

    Raises:
        ValueError: If *text* is not valid JSON or not a list of point
            objects.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid point JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError(f"Point JSON must be a list, got {type(data).__name__}")
    return [_point_from_dict(item, i) for i, item in enumerate(data)]


def save_points(path: str | Path, points: Sequence[HeadingPoint]) -> Path:
    """Write headed points to *path*, creating parent directories.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(points_to_json(points, indent=2), encoding="utf-8")
    logger.info("Saved %d points to %s", len(points), path)
    return path


def load_points(path: str | Path) -> list[HeadingPoint]:
    """Read headed points from *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file content is malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Point file not found: {path}")
    points = points_from_json(path.read_text(encoding="utf-8"))
    logger.debug("Loaded %d points from %s", len(points), path)
    return points
