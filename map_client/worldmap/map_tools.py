"""
Map Tools - named, JSON-schema described operations over a World.

An agent (or the HTTP backend) calls ``MapToolExecutor.execute_tool`` with a
tool name and an argument dict. Every call returns a ToolResult; failures are
reported through ``success=False`` rather than raised.
"""

import logging
from typing import Optional
from dataclasses import dataclass
from pathlib import Path

from .errors import WorldMapError
from .map_render import render_map
from .world import World

logger = logging.getLogger(__name__)


def _check_type(argument: str, value, expected: type, optional: bool = False) -> None:
    """Raise ValueError unless ``value`` is an ``expected`` (or None when optional)."""
    if value is None and optional:
        return
    if isinstance(value, expected) and not (expected is not bool and isinstance(value, bool)):
        return
    raise ValueError(
        f"{argument} must be a {expected.__name__}, got {type(value).__name__}"
    )


# ==================== Tool Definitions ====================

MAP_TOOLS = [
    {
        "name": "render_map",
        "description": "Render an ASCII map of the game world. Can show the full map or a local area around a specific location.",
        "parameters": {
            "type": "object",
            "properties": {
                "center_id": {
                    "type": "string",
                    "description": "Location ID to center the map on (defaults to player location or first location)"
                },
                "radius": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Maximum number of exits to follow from the center (omit for full map)"
                },
                "player_location_id": {
                    "type": "string",
                    "description": "Current player location ID (marked with @ on the map)"
                }
            },
            "required": []
        }
    },
    {
        "name": "add_location",
        "description": "Create a new location in the world.",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Name of the location"
                },
                "description": {
                    "type": "string",
                    "description": "Description of the location"
                },
                "location_id": {
                    "type": "string",
                    "description": "Explicit ID (a UUID is generated when omitted)"
                }
            },
            "required": ["name"]
        }
    },
    {
        "name": "connect_locations",
        "description": "Create an exit between two locations, and by default the exit back.",
        "parameters": {
            "type": "object",
            "properties": {
                "from_location_id": {
                    "type": "string",
                    "description": "Location ID where the exit starts"
                },
                "to_location_id": {
                    "type": "string",
                    "description": "Location ID where the exit leads"
                },
                "from_direction": {
                    "type": "string",
                    "description": "Direction label of the exit (north, ne, up, 'through the arch', ...)"
                },
                "to_direction": {
                    "type": "string",
                    "description": "Direction label of the way back (defaults to the opposite direction)"
                },
                "description": {
                    "type": "string",
                    "description": "Description of the path"
                },
                "bidirectional": {
                    "type": "boolean",
                    "description": "Whether to also create the way back (default true)"
                }
            },
            "required": ["from_location_id", "to_location_id", "from_direction"]
        }
    },
    {
        "name": "get_exits",
        "description": "List the exits of a location.",
        "parameters": {
            "type": "object",
            "properties": {
                "location_id": {
                    "type": "string",
                    "description": "Location ID"
                }
            },
            "required": ["location_id"]
        }
    },
    {
        "name": "find_location",
        "description": "Find a location by name (case-insensitive, partial names allowed).",
        "parameters": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Name or part of the name"
                }
            },
            "required": ["name"]
        }
    },
    {
        "name": "delete_location",
        "description": "Delete a location and every exit that leads to it.",
        "parameters": {
            "type": "object",
            "properties": {
                "location_id": {
                    "type": "string",
                    "description": "Location ID"
                }
            },
            "required": ["location_id"]
        }
    },
]


@dataclass
class ToolResult:
    """Result of a tool call."""
    success: bool
    tool_name: str
    message: str
    data: Optional[dict] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "tool_name": self.tool_name,
            "message": self.message,
            "data": self.data,
        }


class MapToolExecutor:
    """
    Runs map tools against a World.

    Mutating tools save the world to ``world_path`` when auto-save is on.
    """

    def __init__(
        self,
        world: World,
        world_path: Optional[str | Path] = None,
        auto_save: bool = True,
        default_radius: Optional[int] = None,
    ):
        self.world = world
        self.world_path = Path(world_path) if world_path else None
        self.auto_save = auto_save
        self.default_radius = default_radius

    # ==================== Tool Execution ====================

    def execute_tool(self, tool_name: str, arguments: dict) -> ToolResult:
        """Execute a map tool."""
        try:
            if tool_name == "render_map":
                return self._tool_render_map(**arguments)
            elif tool_name == "add_location":
                return self._tool_add_location(**arguments)
            elif tool_name == "connect_locations":
                return self._tool_connect_locations(**arguments)
            elif tool_name == "get_exits":
                return self._tool_get_exits(**arguments)
            elif tool_name == "find_location":
                return self._tool_find_location(**arguments)
            elif tool_name == "delete_location":
                return self._tool_delete_location(**arguments)
            else:
                return ToolResult(
                    success=False,
                    tool_name=tool_name,
                    message=f"Unknown tool: {tool_name}"
                )
        except (WorldMapError, ValueError, TypeError) as e:
            logger.error(f"Tool execution error ({tool_name}): {e}")
            return ToolResult(
                success=False,
                tool_name=tool_name,
                message=f"Error: {str(e)}"
            )

    def _tool_render_map(
        self,
        center_id: Optional[str] = None,
        radius: Optional[int] = None,
        player_location_id: Optional[str] = None,
    ) -> ToolResult:
        """Render the map around a location."""
        _check_type("center_id", center_id, str, optional=True)
        _check_type("player_location_id", player_location_id, str, optional=True)

        if radius is None:
            radius = self.default_radius
        elif isinstance(radius, bool) or not isinstance(radius, int) or radius < 0:
            raise ValueError(f"radius must be a non-negative integer, got {radius!r}")

        result = render_map(
            self.world.snapshot(),
            center_id=center_id,
            radius=radius,
            player_location_id=player_location_id,
        )

        if not result.success:
            return ToolResult(
                success=False,
                tool_name="render_map",
                message=result.message,
                data={"error": result.error.value if result.error else None}
            )

        return ToolResult(
            success=True,
            tool_name="render_map",
            message=result.message,
            data=result.summary()
        )

    def _tool_add_location(
        self,
        name: str,
        description: str = "",
        location_id: Optional[str] = None,
    ) -> ToolResult:
        """Create a location."""
        _check_type("name", name, str)
        _check_type("description", description, str, optional=True)
        _check_type("location_id", location_id, str, optional=True)

        if not name.strip():
            raise ValueError("Location name must not be empty")
        if location_id and self.world.get_location(location_id):
            raise ValueError(f"Location already exists: {location_id}")

        location = self.world.add_location(name, description or "", location_id)
        self._auto_save()

        return ToolResult(
            success=True,
            tool_name="add_location",
            message=f"Added location: {location.name}",
            data={"location_id": location.id, "name": location.name}
        )

    def _tool_connect_locations(
        self,
        from_location_id: str,
        to_location_id: str,
        from_direction: str,
        to_direction: Optional[str] = None,
        description: str = "",
        bidirectional: bool = True,
    ) -> ToolResult:
        """Connect two locations."""
        _check_type("from_location_id", from_location_id, str)
        _check_type("to_location_id", to_location_id, str)
        _check_type("from_direction", from_direction, str)
        _check_type("to_direction", to_direction, str, optional=True)
        _check_type("description", description, str, optional=True)
        _check_type("bidirectional", bidirectional, bool)

        forward, reverse = self.world.connect_locations(
            from_location_id=from_location_id,
            to_location_id=to_location_id,
            from_direction=from_direction,
            to_direction=to_direction,
            description=description or "",
            bidirectional=bidirectional,
        )
        self._auto_save()

        source = self.world.require_location(from_location_id)
        target = self.world.require_location(to_location_id)

        return ToolResult(
            success=True,
            tool_name="connect_locations",
            message=f"Connected {source.name} -> {from_direction} -> {target.name}",
            data={
                "from_location": {"id": source.id, "name": source.name},
                "to_location": {"id": target.id, "name": target.name},
                "exit_created": forward.to_dict(),
                "reverse_exit_created": reverse.to_dict() if reverse else None,
                "bidirectional": reverse is not None,
            }
        )

    def _tool_get_exits(self, location_id: str) -> ToolResult:
        """List the exits of a location."""
        _check_type("location_id", location_id, str)

        location = self.world.require_location(location_id)
        exits = []
        for exit_ in location.exits:
            target = self.world.get_location(exit_.destination_id)
            exits.append({
                **exit_.to_dict(),
                "destination_name": target.name if target else "",
            })

        return ToolResult(
            success=True,
            tool_name="get_exits",
            message=f"{location.name} has {len(exits)} exits",
            data={"location_id": location.id, "exits": exits}
        )

    def _tool_find_location(self, name: str) -> ToolResult:
        """Find a location by name."""
        _check_type("name", name, str)

        location = self.world.find_location_by_name(name)

        if not location:
            return ToolResult(
                success=False,
                tool_name="find_location",
                message=f"No location matching '{name}' found"
            )

        return ToolResult(
            success=True,
            tool_name="find_location",
            message=f"Found location: {location.name}",
            data={
                "location_id": location.id,
                "name": location.name,
                "description": location.description,
                "exits": len(location.exits),
            }
        )

    def _tool_delete_location(self, location_id: str) -> ToolResult:
        """Delete a location."""
        _check_type("location_id", location_id, str)

        location = self.world.require_location(location_id)
        self.world.remove_location(location_id)
        self._auto_save()

        return ToolResult(
            success=True,
            tool_name="delete_location",
            message=f"Deleted location: {location.name}",
            data={"location_id": location.id, "name": location.name}
        )

    def _auto_save(self) -> None:
        """Save the world if auto-save is enabled."""
        if self.auto_save and self.world_path:
            try:
                self.world.save_json(self.world_path)
            except OSError as e:
                logger.warning(f"Auto-save failed: {e}")
