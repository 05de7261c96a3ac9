"""
WorldMap - ASCII cartography for text-adventure worlds

Lays out a graph of locations joined by labeled exits on a 2D grid and
draws it as boxes and connector lines.
"""

__version__ = "0.1.0"

from .directions import Direction, DIRECTION_OFFSETS, direction_offset
from .errors import (
    WorldMapError,
    CenterNotFoundError,
    LocationNotFoundError,
    WorldFileError,
)
from .world import Exit, Location, World
from .layout import Bounds, MapNode, MapConnection, compute_bounds, layout_grid
from .canvas import render_ascii
from .map_render import MapFailure, MapRenderResult, render_map
from .map_tools import MAP_TOOLS, MapToolExecutor, ToolResult
from .config import AppConfig

__all__ = [
    # Directions
    "Direction",
    "DIRECTION_OFFSETS",
    "direction_offset",
    # Errors
    "WorldMapError",
    "CenterNotFoundError",
    "LocationNotFoundError",
    "WorldFileError",
    # World store
    "Exit",
    "Location",
    "World",
    # Layout and rendering
    "Bounds",
    "MapNode",
    "MapConnection",
    "compute_bounds",
    "layout_grid",
    "render_ascii",
    "MapFailure",
    "MapRenderResult",
    "render_map",
    # Tools
    "MAP_TOOLS",
    "MapToolExecutor",
    "ToolResult",
    # Config
    "AppConfig",
]
