"""
Shared fixtures for the world map tests.
"""

import sys
from pathlib import Path

import pytest

# Add the parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from worldmap.world import Exit, Location, World


def make_locations(graph: dict[str, list[tuple[str, str]]]) -> list[Location]:
    """Build locations from {id: [(direction, destination_id), ...]}.

    Location names equal their ids; order follows the dict.
    """
    return [
        Location(
            id=location_id,
            name=location_id,
            exits=[Exit(direction=d, destination_id=t) for d, t in exits],
        )
        for location_id, exits in graph.items()
    ]


@pytest.fixture
def build():
    """Factory fixture around make_locations."""
    return make_locations


@pytest.fixture
def town() -> list[Location]:
    """A small town with inconsistent and unusual exit labels."""
    return make_locations({
        "square": [
            ("north", "temple"),
            ("east", "market"),
            ("down", "cellar"),
            ("south", "gate"),
        ],
        "temple": [("south", "square"), ("through the nave", "crypt")],
        "market": [("west", "square"), ("UP", "tower"), ("east", "docks")],
        "cellar": [("up", "square"), ("e", "tunnel")],
        "gate": [("north", "square"), ("south", "road")],
        "tower": [("down", "market")],
        "docks": [("west", "market"), ("northeast", "lighthouse")],
        "tunnel": [("w", "cellar"), ("east", "docks")],
        "crypt": [("up", "temple")],
        "road": [("north", "gate"), ("south", "farm")],
        "farm": [("north", "road")],
        "lighthouse": [("sw", "docks")],
        "island": [("north", "lighthouse")],  # unreachable
    })


@pytest.fixture
def town_world(town) -> World:
    world = World(name="town")
    for location in town:
        world.put_location(location)
    return world
