"""Exception types raised by fieldnav.

Finder tiers never raise to report a missing path: an empty result is
the normal "try the next tier" signal.  The exceptions here are reserved
for configuration mistakes and for the orchestration layer, which must
give callers an explicit signal once every tier has been exhausted.
"""

from __future__ import annotations


class FieldnavError(Exception):
    """Base class for all fieldnav-specific errors."""


class NoFindersError(FieldnavError, ValueError):
    """Raised when a configuration enables no path-finding tier."""


class NoPathError(FieldnavError, RuntimeError):
    """Raised when every enabled finder tier failed to produce a path.

    Attributes:
        start: The requested start point.
        end: The requested end point.
    """

    def __init__(self, start: object, end: object) -> None:
        super().__init__(f"No path found from {start} to {end}")
        self.start = start
        self.end = end


class InvalidPathError(FieldnavError, ValueError):
    """Raised when a waypoint request is malformed (e.g. too few points)."""
