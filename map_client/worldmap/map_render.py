"""
Map rendering - lays out a world's locations and draws them as ASCII.

``render_map`` is the single entry point. It never raises for an empty world
or an unknown center; it returns a MapRenderResult with ``success=False`` and
a MapFailure code instead.
"""

import logging
from typing import Optional, Iterable, Union
from dataclasses import dataclass, field
from enum import Enum

from .canvas import render_ascii
from .errors import CenterNotFoundError
from .layout import Bounds, MapConnection, MapNode, compute_bounds, layout_grid
from .world import Location

logger = logging.getLogger(__name__)


MAP_INSTRUCTION = (
    "Display the ASCII map to the player. The @ symbol marks the player's "
    "location. Use this to help players visualize the game world."
)


class MapFailure(Enum):
    """Why a map could not be rendered."""
    EMPTY_WORLD = "empty_world"
    CENTER_NOT_FOUND = "center_not_found"


@dataclass
class MapRenderResult:
    """Result of a map render."""
    success: bool
    message: str
    error: Optional[MapFailure] = None
    center_id: Optional[str] = None
    nodes: list[MapNode] = field(default_factory=list)
    connections: list[MapConnection] = field(default_factory=list)
    bounds: Optional[Bounds] = None
    ascii: str = ""

    def get_node(self, node_id: str) -> Optional[MapNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def positions(self) -> dict[str, tuple[int, int]]:
        return {node.id: (node.x, node.y) for node in self.nodes}

    def to_dict(self) -> dict:
        """Full map data, as served by the JSON endpoints."""
        if not self.success:
            return {
                "success": False,
                "error": self.error.value if self.error else None,
                "message": self.message,
            }
        return {
            "success": True,
            "center_id": self.center_id,
            "nodes": [node.to_dict() for node in self.nodes],
            "connections": [c.to_dict() for c in self.connections],
            "connection_count": len(self.connections),
            "bounds": self.bounds.to_dict() if self.bounds else None,
            "ascii": self.ascii,
        }

    def summary(self) -> dict:
        """Compact reply for an agent calling the render_map tool."""
        return {
            "ascii": self.ascii,
            "node_count": len(self.nodes),
            "connection_count": len(self.connections),
            "bounds": self.bounds.to_dict() if self.bounds else None,
            "nodes": [
                {
                    "id": node.id,
                    "name": node.name,
                    "position": {"x": node.x, "y": node.y},
                    "exits": len(node.exits),
                    "is_center": node.is_center,
                    "has_player": node.has_player,
                }
                for node in self.nodes
            ],
            "instruction": MAP_INSTRUCTION,
        }


def _as_location(item: Union[Location, dict]) -> Location:
    if isinstance(item, Location):
        return item
    return Location.from_dict(item)


def build_nodes(
    by_id: dict[str, Location],
    placed: dict[str, tuple[int, int]],
    center_id: str,
    player_location_id: Optional[str] = None,
) -> list[MapNode]:
    """Turn a layout into nodes, keeping only exits between placed locations."""
    nodes = []
    for location_id, (x, y) in placed.items():
        location = by_id[location_id]
        nodes.append(MapNode(
            id=location_id,
            name=location.name,
            x=x,
            y=y,
            exits=[
                (e.direction, e.destination_id)
                for e in location.exits
                if e.destination_id in placed
            ],
            is_center=location_id == center_id,
            has_player=location_id == player_location_id,
        ))
    return nodes


def build_connections(nodes: Iterable[MapNode]) -> list[MapConnection]:
    """One connection per unordered pair, labeled by the first exit seen."""
    connections = []
    seen: set[frozenset[str]] = set()

    for node in nodes:
        for direction, target_id in node.exits:
            key = frozenset((node.id, target_id))
            if key in seen:
                continue
            seen.add(key)
            connections.append(MapConnection(
                from_id=node.id,
                to_id=target_id,
                direction=direction,
            ))

    return connections


def render_map(
    locations: Iterable[Union[Location, dict]],
    center_id: Optional[str] = None,
    radius: Optional[int] = None,
    player_location_id: Optional[str] = None,
) -> MapRenderResult:
    """
    Lay out and render the neighborhood of a location.

    The center is ``center_id``, else ``player_location_id``, else the first
    location. ``radius`` is the maximum number of hops from the center
    (None for the whole connected component).
    """
    locations = [_as_location(item) for item in locations]
    if not locations:
        return MapRenderResult(
            success=False,
            message="No locations found in this world",
            error=MapFailure.EMPTY_WORLD,
        )

    by_id = {location.id: location for location in locations}
    center_id = center_id or player_location_id or locations[0].id

    try:
        placed = layout_grid(locations, center_id, radius)
    except CenterNotFoundError as e:
        logger.warning(str(e))
        return MapRenderResult(
            success=False,
            message=str(e),
            error=MapFailure.CENTER_NOT_FOUND,
            center_id=center_id,
        )

    nodes = build_nodes(by_id, placed, center_id, player_location_id)
    connections = build_connections(nodes)
    bounds = compute_bounds(placed)

    return MapRenderResult(
        success=True,
        message=f"Rendered {len(nodes)} locations",
        center_id=center_id,
        nodes=nodes,
        connections=connections,
        bounds=bounds,
        ascii=render_ascii(nodes, connections, bounds),
    )
