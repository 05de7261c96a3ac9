"""
Direction vocabulary - maps free-form exit labels to grid offsets.

The grid is strictly 2D with y growing downward, so "north" is (0, -1).
Vertical exits (up/down) are folded onto north/south. Labels that are not
in the table get a zero offset; the layout engine's collision probing then
finds the destination a free cell next to its neighbor.
"""

from typing import Optional
from enum import Enum


# Label -> (dx, dy)
DIRECTION_OFFSETS: dict[str, tuple[int, int]] = {
    "north": (0, -1),
    "south": (0, 1),
    "east": (1, 0),
    "west": (-1, 0),
    "northeast": (1, -1),
    "northwest": (-1, -1),
    "southeast": (1, 1),
    "southwest": (-1, 1),
    "n": (0, -1),
    "s": (0, 1),
    "e": (1, 0),
    "w": (-1, 0),
    "ne": (1, -1),
    "nw": (-1, -1),
    "se": (1, 1),
    "sw": (-1, 1),
    "up": (0, -1),
    "down": (0, 1),
}

ZERO_OFFSET = (0, 0)


def normalize_direction(direction: str) -> str:
    """Trim and lower-case a direction label."""
    return direction.strip().lower()


def direction_offset(direction: str) -> tuple[int, int]:
    """Get the (dx, dy) grid offset for a direction label.

    Unknown labels return (0, 0) instead of raising.
    """
    return DIRECTION_OFFSETS.get(normalize_direction(direction), ZERO_OFFSET)


class Direction(Enum):
    """Named directions with an opposite, used when creating two-way exits."""
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    NORTHEAST = "northeast"
    NORTHWEST = "northwest"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"
    UP = "up"
    DOWN = "down"
    IN = "in"
    OUT = "out"

    @classmethod
    def from_string(cls, direction: str) -> Optional["Direction"]:
        """Convert a label (full name or abbreviation) to a Direction."""
        direction = normalize_direction(direction)

        abbreviations = {
            "n": cls.NORTH,
            "s": cls.SOUTH,
            "e": cls.EAST,
            "w": cls.WEST,
            "ne": cls.NORTHEAST,
            "nw": cls.NORTHWEST,
            "se": cls.SOUTHEAST,
            "sw": cls.SOUTHWEST,
            "u": cls.UP,
            "d": cls.DOWN,
            "enter": cls.IN,
            "inside": cls.IN,
            "exit": cls.OUT,
            "outside": cls.OUT,
        }

        if direction in abbreviations:
            return abbreviations[direction]

        for d in cls:
            if d.value == direction:
                return d

        return None

    @classmethod
    def get_opposite(cls, direction: "Direction") -> "Direction":
        """Get the opposite direction."""
        opposites = {
            cls.NORTH: cls.SOUTH,
            cls.SOUTH: cls.NORTH,
            cls.EAST: cls.WEST,
            cls.WEST: cls.EAST,
            cls.NORTHEAST: cls.SOUTHWEST,
            cls.SOUTHWEST: cls.NORTHEAST,
            cls.NORTHWEST: cls.SOUTHEAST,
            cls.SOUTHEAST: cls.NORTHWEST,
            cls.UP: cls.DOWN,
            cls.DOWN: cls.UP,
            cls.IN: cls.OUT,
            cls.OUT: cls.IN,
        }
        return opposites[direction]


def opposite_label(direction: str) -> Optional[str]:
    """Get the full-name opposite of a label, or None if it has no known opposite."""
    parsed = Direction.from_string(direction)
    if parsed is None:
        return None
    return Direction.get_opposite(parsed).value
