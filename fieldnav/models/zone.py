"""Zone and field map models.

A Zone is a named region of the field backed by a Shape -- usually an
obstacle the robot must not enter.  A FieldMap owns an ordered
collection of zones plus the field's width and height.

Maps are built at field-setup time and then only read by the finder
chain.  ``add_zone`` / ``remove_zone`` are configuration-time
operations: mutating a map while a search is running is undefined, so
callers that need to change obstacles mid-run should build a new map
and swap it in.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fieldnav.models.geometry import Point
from fieldnav.models.shapes import Shape, contains_point, inflate

FTC_FIELD_SIZE: tuple[float, float] = (144.0, 144.0)
"""FTC field width and height in inches."""

FRC_FIELD_SIZE: tuple[float, float] = (320.0, 650.0)
"""FRC field width and height in inches."""


@dataclass(frozen=True)
class Zone:
    """A named field region backed by a shape.

    Attributes:
        name: Human-readable identifier (e.g. ``"hub"``).
        shape: Geometry used for collision tests.
        solid: Whether the robot must avoid this zone.  Non-solid zones
            (scoring areas, slow zones) are ignored by the finders.
        priority: Ordering hint for overlapping zones; higher wins.
        drive_speed_multiplier: Speed scale a follower may apply while
            inside the zone.
        parent_shape: The original shape this zone was derived from,
            e.g. the un-inflated obstacle behind an inflated copy.
            ``None`` for zones defined directly.
    """

    name: str
    shape: Shape
    solid: bool = True
    priority: int = 0
    drive_speed_multiplier: float = 1.0
    parent_shape: Shape | None = None

    @property
    def source_shape(self) -> Shape:
        """The obstacle to report when this zone is hit."""
        return self.parent_shape if self.parent_shape is not None else self.shape

    def contains_point(self, point: Point) -> bool:
        """Check whether *point* falls within this zone's shape."""
        return contains_point(self.shape, point)

    def inflated(self, margin: float) -> Zone:
        """Return a copy grown by *margin*, remembering the original shape."""
        return Zone(
            name=self.name,
            shape=inflate(self.shape, margin),
            solid=self.solid,
            priority=self.priority,
            drive_speed_multiplier=self.drive_speed_multiplier,
            parent_shape=self.source_shape,
        )


@dataclass
class FieldMap:
    """A bounded field and the zones placed on it.

    The field spans ``[0, width] x [0, height]``.

    Attributes:
        width: Field extent along x.
        height: Field extent along y.
        zones: Zones in insertion order.
    """

    width: float
    height: float
    zones: list[Zone] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the field bounds."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Field size must be > 0, got {self.width} x {self.height}"
            )

    # -- Presets --------------------------------------------------------------

    @classmethod
    def ftc(cls, zones: list[Zone] | None = None) -> FieldMap:
        """A 144 x 144 inch FTC field."""
        width, height = FTC_FIELD_SIZE
        return cls(width, height, list(zones or []))

    @classmethod
    def frc(cls, zones: list[Zone] | None = None) -> FieldMap:
        """A 320 x 650 inch FRC field."""
        width, height = FRC_FIELD_SIZE
        return cls(width, height, list(zones or []))

    # -- Configuration-time mutation ------------------------------------------

    def add_zone(self, zone: Zone) -> None:
        """Append a zone to the map."""
        self.zones.append(zone)

    def remove_zone(self, name: str) -> Zone:
        """Remove the first zone called *name*.

        Raises:
            KeyError: If no zone has that name.
        """
        for index, zone in enumerate(self.zones):
            if zone.name == name:
                return self.zones.pop(index)
        raise KeyError(f"Zone '{name}' not found in map")

    # -- Queries --------------------------------------------------------------

    def get(self, name: str) -> Zone | None:
        """Return the first zone called *name*, or ``None``."""
        for zone in self.zones:
            if zone.name == name:
                return zone
        return None

    def solid_zones(self) -> list[Zone]:
        """Zones that block movement, in map order."""
        return [z for z in self.zones if z.solid]

    def zones_at(self, point: Point) -> list[Zone]:
        """All zones containing *point*, highest priority first."""
        hits = [z for z in self.zones if z.contains_point(point)]
        return sorted(hits, key=lambda z: z.priority, reverse=True)

    def in_bounds(self, point: Point) -> bool:
        """Check whether *point* lies on the field."""
        return 0.0 <= point.x <= self.width and 0.0 <= point.y <= self.height

    def clamp(self, point: Point) -> Point:
        """Clamp *point* onto the field."""
        return Point(
            min(max(point.x, 0.0), self.width),
            min(max(point.y, 0.0), self.height),
        )

    def inflated(self, margin: float) -> FieldMap:
        """A new map with every zone grown by *margin*."""
        return FieldMap(
            self.width,
            self.height,
            [z.inflated(margin) for z in self.zones],
        )
