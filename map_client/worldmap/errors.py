"""
Exception types raised inside the world map package.

The public seams (``render_map``, ``MapToolExecutor.execute_tool``) turn these
into typed results, so callers only see them when using the lower-level APIs
directly.
"""


class WorldMapError(Exception):
    """Base class for world map errors."""


class CenterNotFoundError(WorldMapError):
    """The requested center location is not in the supplied location set."""

    def __init__(self, center_id: str):
        super().__init__(f"Center location not found: {center_id}")
        self.center_id = center_id


class LocationNotFoundError(WorldMapError):
    """A location id referenced by an operation does not exist."""

    def __init__(self, location_id: str):
        super().__init__(f"Location not found: {location_id}")
        self.location_id = location_id


class WorldFileError(WorldMapError):
    """A world file could not be read or has an unexpected shape."""
