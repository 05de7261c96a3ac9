"""Tests for the ASCII canvas."""

from worldmap.canvas import (
    CELL_HEIGHT,
    CELL_WIDTH,
    box_lines,
    canvas_size_for,
    draw_connection,
    mk_canvas,
    canvas_to_string,
    render_ascii,
)
from worldmap.layout import Bounds, MapConnection, MapNode


def node(node_id: str, x: int, y: int, **kwargs) -> MapNode:
    return MapNode(id=node_id, name=node_id, x=x, y=y, **kwargs)


def bounds_of(*nodes: MapNode) -> Bounds:
    xs = [n.x for n in nodes]
    ys = [n.y for n in nodes]
    return Bounds(min(xs), max(xs), min(ys), max(ys))


class TestBoxLines:
    """Tests for node boxes."""

    def test_minimum_width(self):
        assert box_lines("A") == [
            "+------+",
            "|  A   |",
            "+------+",
        ]

    def test_exact_fit(self):
        assert box_lines("Tavern")[1] == "|Tavern|"

    def test_grows_with_name(self):
        lines = box_lines("Library")
        assert lines[0] == "+-------+"
        assert lines[1] == "|Library|"

    def test_truncates_to_cell(self):
        lines = box_lines("The Grand Cathedral")
        assert len(lines[0]) == CELL_WIDTH - 2
        assert lines[1] == "|The Grand |"

    def test_player_marker_counts_toward_width(self):
        assert box_lines("@B")[1] == "|  @B  |"
        assert box_lines("@Tavern")[1] == "|@Tavern|"


class TestCanvas:
    """Tests for canvas sizing and flattening."""

    def test_size(self):
        assert canvas_size_for(Bounds(0, 0, 0, 0)) == (CELL_WIDTH + 1, CELL_HEIGHT + 1)
        assert canvas_size_for(Bounds(-1, 1, 0, 2)) == (3 * CELL_WIDTH + 1, 3 * CELL_HEIGHT + 1)

    def test_rows_right_trimmed(self):
        canvas = mk_canvas(6, 2)
        canvas[0][1] = "x"
        assert canvas_to_string(canvas) == " x\n"

    def test_lines_only_fill_blanks(self):
        canvas = mk_canvas(20, 3)
        canvas[1][10] = "#"
        draw_connection(canvas, (2, 1), (18, 1))

        row = "".join(canvas[1])
        assert row[10] == "#"
        assert row[6:15] == "----#----"


class TestRenderAscii:
    """Tests for full renders."""

    def test_single_box(self):
        tavern = node("Tavern", 0, 0, is_center=True)
        text = render_ascii([tavern], [], bounds_of(tavern))

        assert text == "   +------+\n   |Tavern|\n   +------+\n\n"

    def test_vertical_connection(self):
        """Test stacked boxes joined through the gutter row."""
        a = node("A", 0, 0, is_center=True)
        b = node("B", 0, -1)
        text = render_ascii([a, b], [MapConnection("A", "B", "north")], bounds_of(a, b))

        assert text == (
            "   +------+\n"
            "   |  B   |\n"
            "   +------+\n"
            "       |\n"
            "   +------+\n"
            "   |  A   |\n"
            "   +------+\n"
            "\n"
        )

    def test_vertical_connection_either_direction(self):
        a = node("A", 0, 0)
        b = node("B", 0, -1)
        up = render_ascii([a, b], [MapConnection("A", "B", "north")], bounds_of(a, b))
        down = render_ascii([a, b], [MapConnection("B", "A", "south")], bounds_of(a, b))

        assert up == down

    def test_horizontal_connection(self):
        a = node("A", 0, 0)
        b = node("B", 1, 0)
        text = render_ascii([a, b], [MapConnection("A", "B", "east")], bounds_of(a, b))

        assert text.split("\n")[:3] == [
            "   +------+      +------+",
            "   |  A   |------|  B   |",
            "   +------+      +------+",
        ]

    def test_l_shaped_connection(self):
        """Test a diagonal exit goes down from the source then across."""
        a = node("A", 0, 0)
        b = node("B", 1, 1)
        rows = render_ascii([a, b], [MapConnection("A", "B", "se")], bounds_of(a, b)).split("\n")

        assert rows[3] == "       |"
        assert rows[4] == "       |" + " " * 9 + "+------+"
        assert rows[5] == "       |" + "-" * 9 + "|  B   |"
        assert rows[6] == " " * 17 + "+------+"

    def test_l_shaped_connection_upward(self):
        a = node("A", 1, 1)
        b = node("B", 0, 0)
        rows = render_ascii([a, b], [MapConnection("A", "B", "nw")], bounds_of(a, b)).split("\n")

        # Up the source column to B's row, then left to just past B's box
        assert rows[1] == "   |  B   |" + "-" * 10 + "|"
        assert rows[2] == "   +------+" + " " * 10 + "|"
        assert rows[3] == " " * 21 + "|"
        assert rows[4] == " " * 17 + "+------+"

    def test_self_loop_draws_nothing(self):
        a = node("A", 0, 0)
        text = render_ascii([a], [MapConnection("A", "A", "north")], bounds_of(a))

        assert "|" not in text.split("\n")[3]

    def test_player_marker(self):
        a = node("A", 0, 0)
        b = node("B", 0, -1, has_player=True)
        text = render_ascii([a, b], [], bounds_of(a, b))

        assert "|  @B  |" in text
        assert "@A" not in text

    def test_offset_bounds(self):
        """Test negative coordinates are shifted onto the canvas."""
        a = node("A", -3, 2)
        text = render_ascii([a], [], bounds_of(a))

        assert text.split("\n")[1] == "   |  A   |"

    def test_box_wins_over_lines(self):
        """Test a connector passing through a box is hidden by it."""
        a = node("A", 0, 0)
        b = node("B", 1, 0)
        c = node("C", 2, 0)
        text = render_ascii(
            [a, b, c],
            [MapConnection("A", "C", "east"), MapConnection("A", "B", "east")],
            bounds_of(a, b, c),
        )

        assert text.split("\n")[1] == "   |  A   |------|  B   |------|  C   |"

    def test_control_characters_in_name(self):
        """Test tabs and newlines in a name stay inside the box row."""
        a = MapNode(id="a", name="Hall\nway", x=0, y=0)
        text = render_ascii([a], [], bounds_of(a))

        assert text.split("\n")[:3] == [
            "  +--------+",
            "  |Hall way|",
            "  +--------+",
        ]
        assert box_lines("\tA")[1] == "|   A  |"
