"""
World - the location/exit store that feeds the map engine.

This module provides:
- Location records with ordered, directed exits
- Connecting locations (one-way or two-way)
- Name lookup (exact, contains, last word)
- Serialization to/from JSON files

The map engine never touches a World directly; it receives
``World.snapshot()``, an ordered tuple of locations.
"""

import json
import uuid
import logging
from typing import Optional, Any
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .directions import normalize_direction, opposite_label
from .errors import LocationNotFoundError, WorldFileError

logger = logging.getLogger(__name__)


def _parse_timestamp(value: Any) -> datetime:
    """Parse an ISO timestamp from a world file."""
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise WorldFileError(f"Invalid timestamp: {value!r}") from e


@dataclass(frozen=True)
class Exit:
    """A directed, labeled link from one location to another."""
    direction: str
    destination_id: str
    description: str = ""

    def to_dict(self) -> dict:
        data = {
            "direction": self.direction,
            "destination_id": self.destination_id,
        }
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Exit":
        if not isinstance(data, dict):
            raise WorldFileError(f"Exit record must be an object: {data!r}")

        # Accept both the snake_case and the camelCase record layouts
        destination = data.get("destination_id", data.get("destinationId"))
        if not destination:
            raise WorldFileError(f"Exit without destination: {data!r}")
        return cls(
            direction=str(data.get("direction", "")),
            destination_id=str(destination),
            description=data.get("description") or "",
        )


@dataclass
class Location:
    """A place in the world."""
    id: str
    name: str
    description: str = ""

    # Exits in storage order; layout iterates them in this order
    exits: list[Exit] = field(default_factory=list)

    created_at: datetime = field(default_factory=datetime.now)

    def add_exit(self, exit_: Exit) -> None:
        """Add an exit, replacing any existing exit with the same label."""
        label = normalize_direction(exit_.direction)
        self.exits = [e for e in self.exits if normalize_direction(e.direction) != label]
        self.exits.append(exit_)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "exits": [e.to_dict() for e in self.exits],
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        """Create from dictionary.

        Exits may live at the top level or under ``properties.exits``.
        """
        if not isinstance(data, dict):
            raise WorldFileError(f"Location record must be an object: {data!r}")
        if "id" not in data or "name" not in data:
            raise WorldFileError(f"Location record needs 'id' and 'name': {data!r}")

        raw_exits = data.get("exits")
        if raw_exits is None:
            properties = data.get("properties") or {}
            raw_exits = properties.get("exits", []) if isinstance(properties, dict) else []
        if not isinstance(raw_exits, list):
            raise WorldFileError(f"Exits of location {data['id']!r} must be a list")

        location = cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=data.get("description") or "",
            exits=[Exit.from_dict(e) for e in raw_exits],
        )
        if data.get("created_at"):
            location.created_at = _parse_timestamp(data["created_at"])
        return location


class World:
    """
    Ordered collection of locations.

    Insertion order is creation order; the map falls back to the first
    location when no center is given.
    """

    def __init__(self, name: str = "world"):
        self.name = name
        self.locations: dict[str, Location] = {}

        # Metadata
        self.created_at: datetime = datetime.now()
        self.last_modified: datetime = datetime.now()
        self.version: str = "1.0"

    def __len__(self) -> int:
        return len(self.locations)

    # ==================== Location Operations ====================

    def add_location(
        self,
        name: str,
        description: str = "",
        location_id: Optional[str] = None,
    ) -> Location:
        """Create a location and add it to the world."""
        location = Location(
            id=location_id or str(uuid.uuid4()),
            name=name,
            description=description,
        )
        self.put_location(location)
        return location

    def put_location(self, location: Location) -> None:
        """Add or replace a location."""
        self.locations[location.id] = location
        self.last_modified = datetime.now()
        logger.debug(f"Stored location: {location.name} ({location.id})")

    def get_location(self, location_id: str) -> Optional[Location]:
        """Get a location by ID."""
        return self.locations.get(location_id)

    def require_location(self, location_id: str) -> Location:
        location = self.locations.get(location_id)
        if location is None:
            raise LocationNotFoundError(location_id)
        return location

    def remove_location(self, location_id: str) -> bool:
        """Remove a location and every exit that leads to it."""
        if location_id not in self.locations:
            return False

        del self.locations[location_id]
        for location in self.locations.values():
            location.exits = [e for e in location.exits if e.destination_id != location_id]

        self.last_modified = datetime.now()
        return True

    def get_exits(self, location_id: str) -> list[Exit]:
        """Get the exits of a location, or an empty list if it does not exist."""
        location = self.locations.get(location_id)
        if not location:
            return []
        return list(location.exits)

    # ==================== Connections ====================

    def connect_locations(
        self,
        from_location_id: str,
        to_location_id: str,
        from_direction: str,
        to_direction: Optional[str] = None,
        description: str = "",
        bidirectional: bool = True,
    ) -> tuple[Exit, Optional[Exit]]:
        """
        Connect two locations.

        Returns (exit created, reverse exit or None). The reverse direction
        defaults to the opposite of ``from_direction``; labels with no known
        opposite need an explicit ``to_direction``.
        """
        source = self.require_location(from_location_id)
        target = self.require_location(to_location_id)

        back = None
        if bidirectional:
            back = to_direction or opposite_label(from_direction)
            if not back:
                raise ValueError(
                    f"No opposite known for '{from_direction}', pass to_direction"
                )

        forward = Exit(
            direction=from_direction,
            destination_id=target.id,
            description=description,
        )
        source.add_exit(forward)

        reverse = None
        if back:
            reverse = Exit(direction=back, destination_id=source.id, description=description)
            target.add_exit(reverse)

        self.last_modified = datetime.now()
        logger.debug(
            f"Connected {source.name} -{from_direction}-> {target.name}"
            + (f" (back: {reverse.direction})" if reverse else "")
        )
        return forward, reverse

    # ==================== Search ====================

    def find_location_by_name(self, name: str) -> Optional[Location]:
        """
        Find a location by name, case-insensitive.

        Tries an exact match, then a substring match, then a substring match
        on the last word of the query (so "square" finds "Village Square").
        """
        query = name.strip().lower()
        if not query:
            return None

        for location in self.locations.values():
            if location.name.lower() == query:
                return location

        for location in self.locations.values():
            if query in location.name.lower():
                return location

        last_word = query.split()[-1]
        for location in self.locations.values():
            if last_word in location.name.lower():
                return location

        return None

    def resolve(self, reference: str) -> Optional[Location]:
        """Resolve a location by id first, then by name."""
        return self.locations.get(reference) or self.find_location_by_name(reference)

    def snapshot(self) -> tuple[Location, ...]:
        """Locations in creation order, for handing to the map engine."""
        return tuple(self.locations.values())

    # ==================== Serialization ====================

    def to_dict(self) -> dict:
        """Convert world to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "version": self.version,
            "created_at": self.created_at.isoformat(),
            "last_modified": self.last_modified.isoformat(),
            "locations": [location.to_dict() for location in self.locations.values()],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "World":
        """Create world from dictionary, or from a bare list of locations."""
        if isinstance(data, list):
            data = {"locations": data}
        if not isinstance(data, dict):
            raise WorldFileError(f"Expected an object or a list, got {type(data).__name__}")

        world = cls(name=str(data.get("name", "world")))
        world.version = data.get("version", "1.0")

        locations = data.get("locations", [])
        if not isinstance(locations, list):
            raise WorldFileError("'locations' must be a list")

        for location_data in locations:
            location = Location.from_dict(location_data)
            world.locations[location.id] = location

        if "created_at" in data:
            world.created_at = _parse_timestamp(data["created_at"])
        if "last_modified" in data:
            world.last_modified = _parse_timestamp(data["last_modified"])

        return world

    def save_json(self, path: str | Path) -> None:
        """Save world to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Saved world to {path} ({len(self.locations)} locations)")

    @classmethod
    def load_json(cls, path: str | Path) -> "World":
        """Load world from a JSON file."""
        path = Path(path)

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise WorldFileError(f"Could not read world file {path}: {e}") from e

        world = cls.from_dict(data)
        if world.name == "world" and not (isinstance(data, dict) and "name" in data):
            world.name = path.stem
        logger.info(f"Loaded world from {path} ({len(world.locations)} locations)")
        return world
