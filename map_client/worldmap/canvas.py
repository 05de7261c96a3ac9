"""
ASCII canvas - draws placed map nodes and their connections as text.

Every grid coordinate owns a CELL_WIDTH x CELL_HEIGHT block of characters.
A node's box is three rows tall, centered horizontally in the top three rows
of its cell; the last row of the cell is left free for vertical connectors.

       +------+
       | Hall |
       +------+
           |
       +------+      +------+
       | Gate |------|@Road |
       +------+      +------+

Lines are drawn before boxes and only ever fill blank cells, so the first
line through a cell wins and boxes always sit cleanly on top. Connections
that are neither horizontal nor vertical are drawn as a single L (down or
up from the source, then across to the target) with no attempt to route
around other boxes or lines.
"""

from typing import Iterable

from .layout import Bounds, MapConnection, MapNode


CELL_WIDTH = 14
CELL_HEIGHT = 4

MIN_BOX_WIDTH = 8
MAX_BOX_WIDTH = CELL_WIDTH - 2

# Distance from a box center at which connectors start/stop
HORIZONTAL_INSET = 4
VERTICAL_SOURCE_INSET = 2
VERTICAL_TARGET_INSET = 1

BLANK = " "
HORIZONTAL = "-"
VERTICAL = "|"
CORNER = "+"

Canvas = list[list[str]]


# =============================================================================
# Canvas
# =============================================================================

def mk_canvas(width: int, height: int) -> Canvas:
    """Create a blank canvas, indexed canvas[row][column]."""
    return [[BLANK] * width for _ in range(height)]


def canvas_size_for(bounds: Bounds) -> tuple[int, int]:
    """(columns, rows) needed to draw everything inside ``bounds``."""
    return (
        bounds.columns * CELL_WIDTH + 1,
        bounds.rows * CELL_HEIGHT + 1,
    )


def canvas_to_string(canvas: Canvas) -> str:
    return "\n".join("".join(row).rstrip() for row in canvas)


def draw_text(canvas: Canvas, column: int, row: int, text: str) -> None:
    """Write text unconditionally, clipped to the canvas."""
    if not 0 <= row < len(canvas):
        return
    for i, ch in enumerate(text):
        if 0 <= column + i < len(canvas[row]):
            canvas[row][column + i] = ch


def put_line_char(canvas: Canvas, column: int, row: int, ch: str) -> None:
    """Write a line character only into a blank cell."""
    if 0 <= row < len(canvas) and 0 <= column < len(canvas[row]):
        if canvas[row][column] == BLANK:
            canvas[row][column] = ch


def draw_horizontal(canvas: Canvas, row: int, start: int, end: int) -> None:
    for column in range(start, end + 1):
        put_line_char(canvas, column, row, HORIZONTAL)


def draw_vertical(canvas: Canvas, column: int, start: int, end: int) -> None:
    for row in range(start, end + 1):
        put_line_char(canvas, column, row, VERTICAL)


# =============================================================================
# Geometry
# =============================================================================

def cell_origin(node: MapNode, bounds: Bounds) -> tuple[int, int]:
    """Top-left (column, row) of the node's cell."""
    return (
        (node.x - bounds.min_x) * CELL_WIDTH,
        (node.y - bounds.min_y) * CELL_HEIGHT,
    )


def box_center(node: MapNode, bounds: Bounds) -> tuple[int, int]:
    column, row = cell_origin(node, bounds)
    return column + CELL_WIDTH // 2, row + 1


def box_lines(label: str) -> list[str]:
    """The three rows of a node box, truncating the label to fit the cell."""
    # Tabs and newlines would break the row layout
    label = "".join(ch if ch.isprintable() else BLANK for ch in label)
    width = min(max(len(label) + 2, MIN_BOX_WIDTH), MAX_BOX_WIDTH)
    inner = width - 2
    label = label[:inner]

    left = (inner - len(label)) // 2
    right = inner - len(label) - left
    border = CORNER + HORIZONTAL * inner + CORNER

    return [
        border,
        VERTICAL + BLANK * left + label + BLANK * right + VERTICAL,
        border,
    ]


# =============================================================================
# Drawing
# =============================================================================

def draw_box(canvas: Canvas, node: MapNode, bounds: Bounds) -> None:
    column, row = cell_origin(node, bounds)
    lines = box_lines(node.label)
    left = column + (CELL_WIDTH - len(lines[0])) // 2

    for offset, line in enumerate(lines):
        draw_text(canvas, left, row + offset, line)


def draw_connection(
    canvas: Canvas,
    source: tuple[int, int],
    target: tuple[int, int],
) -> None:
    """Draw a connector between two box centers."""
    sx, sy = source
    tx, ty = target

    if (sx, sy) == (tx, ty):
        return

    if sy == ty:
        draw_horizontal(
            canvas,
            sy,
            min(sx, tx) + HORIZONTAL_INSET,
            max(sx, tx) - HORIZONTAL_INSET,
        )
    elif sx == tx:
        if ty > sy:
            draw_vertical(canvas, sx, sy + VERTICAL_SOURCE_INSET, ty - VERTICAL_TARGET_INSET)
        else:
            draw_vertical(canvas, sx, ty + VERTICAL_TARGET_INSET, sy - VERTICAL_SOURCE_INSET)
    else:
        # Leave the source vertically, then run along the target's row
        if ty > sy:
            draw_vertical(canvas, sx, sy + VERTICAL_SOURCE_INSET, ty)
        else:
            draw_vertical(canvas, sx, ty, sy - VERTICAL_SOURCE_INSET)

        if tx > sx:
            draw_horizontal(canvas, ty, sx, tx - HORIZONTAL_INSET)
        else:
            draw_horizontal(canvas, ty, tx + HORIZONTAL_INSET, sx)


def render_ascii(
    nodes: Iterable[MapNode],
    connections: Iterable[MapConnection],
    bounds: Bounds,
) -> str:
    """Render nodes and connections to a multi-line string."""
    nodes = list(nodes)
    by_id = {node.id: node for node in nodes}

    width, height = canvas_size_for(bounds)
    canvas = mk_canvas(width, height)

    for connection in connections:
        source = by_id.get(connection.from_id)
        target = by_id.get(connection.to_id)
        if source is None or target is None:
            continue
        draw_connection(canvas, box_center(source, bounds), box_center(target, bounds))

    for node in nodes:
        draw_box(canvas, node, bounds)

    return canvas_to_string(canvas)
