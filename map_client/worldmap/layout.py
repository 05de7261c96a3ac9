"""
Grid layout - assigns integer grid coordinates to locations.

Uses BFS from a center location. Each exit's direction label gives the
offset to its destination; when that cell is taken, a fixed sequence of
nearby cells is probed. The result is deterministic for a given location
order and exit order.
"""

import logging
from typing import Optional, Iterable
from dataclasses import dataclass, field
from collections import deque

from .directions import direction_offset
from .errors import CenterNotFoundError
from .world import Location

logger = logging.getLogger(__name__)


# Probed relative to the blocked cell: orthogonal, diagonal, then distance 2.
# Changing this order changes every rendered map.
PROBE_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
    (2, 0), (-2, 0), (0, 2), (0, -2),
)

# Used unchecked when every probe is taken
FALLBACK_OFFSET = (3, 0)


@dataclass(frozen=True)
class Bounds:
    """Coordinate extent of a set of placed nodes."""
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def columns(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def rows(self) -> int:
        return self.max_y - self.min_y + 1

    def to_dict(self) -> dict:
        return {
            "min_x": self.min_x,
            "max_x": self.max_x,
            "min_y": self.min_y,
            "max_y": self.max_y,
        }


@dataclass
class MapNode:
    """A placed location."""
    id: str
    name: str
    x: int
    y: int

    # (direction, destination_id) for exits whose destination is also placed
    exits: list[tuple[str, str]] = field(default_factory=list)

    is_center: bool = False
    has_player: bool = False

    @property
    def label(self) -> str:
        """Display name, with the player marker."""
        return f"@{self.name}" if self.has_player else self.name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "exit_count": len(self.exits),
            "is_center": self.is_center,
            "has_player": self.has_player,
        }


@dataclass(frozen=True)
class MapConnection:
    """An undirected edge between two placed nodes, as first discovered."""
    from_id: str
    to_id: str
    direction: str

    def to_dict(self) -> dict:
        return {"from": self.from_id, "to": self.to_id, "direction": self.direction}


def compute_bounds(positions: dict[str, tuple[int, int]]) -> Bounds:
    """Get the bounding box of a non-empty coordinate mapping."""
    if not positions:
        raise ValueError("Cannot compute bounds of an empty layout")

    xs = [x for x, _ in positions.values()]
    ys = [y for _, y in positions.values()]
    return Bounds(min_x=min(xs), max_x=max(xs), min_y=min(ys), max_y=max(ys))


def find_free_spot(
    occupied: dict[tuple[int, int], str],
    x: int,
    y: int,
) -> tuple[int, int]:
    """Find the first free cell around (x, y) in probe order."""
    for dx, dy in PROBE_OFFSETS:
        spot = (x + dx, y + dy)
        if spot not in occupied:
            return spot

    fallback = (x + FALLBACK_OFFSET[0], y + FALLBACK_OFFSET[1])
    logger.debug(f"All probes around ({x}, {y}) taken, falling back to {fallback}")
    return fallback


def layout_grid(
    locations: Iterable[Location],
    center_id: str,
    radius: Optional[int] = None,
) -> dict[str, tuple[int, int]]:
    """
    Place the locations reachable from ``center_id`` on an integer grid.

    ``radius`` limits the BFS depth (graph hops, not distance); None means
    unbounded. Returns location_id -> (x, y) in placement order, with the
    center at (0, 0). Exits to ids that are not in ``locations`` are ignored.

    Raises CenterNotFoundError if the center is not among the locations.
    """
    by_id = {location.id: location for location in locations}
    if center_id not in by_id:
        raise CenterNotFoundError(center_id)

    placed: dict[str, tuple[int, int]] = {center_id: (0, 0)}
    occupied: dict[tuple[int, int], str] = {(0, 0): center_id}

    # (location_id, depth)
    queue = deque([(center_id, 0)])

    while queue:
        current_id, depth = queue.popleft()

        # Placed but not expanded
        if radius is not None and depth >= radius:
            continue

        cx, cy = placed[current_id]

        for exit_ in by_id[current_id].exits:
            target_id = exit_.destination_id
            if target_id in placed:
                continue
            if target_id not in by_id:
                logger.debug(f"Skipping exit '{exit_.direction}' from {current_id} to unknown {target_id}")
                continue

            dx, dy = direction_offset(exit_.direction)
            spot = (cx + dx, cy + dy)
            if spot in occupied:
                spot = find_free_spot(occupied, *spot)

            placed[target_id] = spot
            occupied[spot] = target_id
            queue.append((target_id, depth + 1))

    logger.debug(f"Placed {len(placed)} of {len(by_id)} locations around {center_id}")
    return placed
