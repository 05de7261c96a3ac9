"""Tests for the terminal front end."""

import io
import json

import pytest
from rich.console import Console

from worldmap.config import AppConfig
from worldmap.terminal_app import TerminalApp, main
from worldmap.world import World


def make_console() -> Console:
    return Console(file=io.StringIO(), width=120, highlight=False, color_system=None)


def output_of(app: TerminalApp) -> str:
    return app.console.file.getvalue()


@pytest.fixture
def app(town_world) -> TerminalApp:
    return TerminalApp(town_world, config=AppConfig(), console=make_console())


@pytest.fixture
def world_file(tmp_path, town_world):
    path = tmp_path / "town.json"
    town_world.save_json(path)
    return path


@pytest.fixture
def quiet_logging(tmp_path, monkeypatch):
    """Keep the file log out of the working directory."""
    monkeypatch.setenv("WORLDMAP_LOG_FILE", str(tmp_path / "worldmap.log"))
    monkeypatch.delenv("WORLDMAP_DEFAULT_RADIUS", raising=False)


class TestTerminalApp:
    """Tests for local commands."""

    def test_print_map(self, app):
        result = app.print_map()

        assert result.success is True
        assert app.last_result is result
        assert "12 locations" in output_of(app)

    def test_print_map_empty_world(self):
        app = TerminalApp(World(), console=make_console())
        result = app.print_map()

        assert result.success is False
        assert "/add <name>" in output_of(app)

    def test_center_by_name(self, app):
        app.handle_input("/center docks")

        assert app.center_id == "docks"
        assert app.last_result.center_id == "docks"

    def test_center_unknown(self, app):
        app.handle_input("/center atlantis")

        assert app.center_id is None
        assert "No location matching 'atlantis'" in output_of(app)

    def test_player_marker(self, app):
        app.handle_input("/player market")

        assert app.player_location_id == "market"
        assert app.last_result.get_node("market").has_player
        assert "@market" in output_of(app)

    def test_radius(self, app):
        app.handle_input("/radius 1")
        assert app.radius == 1

        app.handle_input("/map")
        assert len(app.last_result.nodes) == 5

        app.handle_input("/radius all")
        assert app.radius is None

    def test_radius_invalid(self, app):
        app.handle_input("/radius -2")
        app.handle_input("/radius far")

        assert app.radius is None
        assert "Radius must not be negative" in output_of(app)
        assert "Invalid radius: far" in output_of(app)

    def test_map_with_radius(self, app):
        app.handle_input("/m 0")

        assert app.radius == 0
        assert [n.id for n in app.last_result.nodes] == ["square"]

    def test_add_and_connect(self, app, town_world):
        app.handle_input("/add Bakery")
        bakery = town_world.find_location_by_name("Bakery")

        app.handle_input("/connect farm west Bakery")

        assert bakery is not None
        assert town_world.get_exits(bakery.id)[0].direction == "east"
        assert app._dirty is True

    def test_connect_with_way_back(self, app, town_world):
        app.handle_input("/connect farm ladder island climb")

        assert [e.direction for e in town_world.get_exits("island")] == ["north", "climb"]

    def test_delete(self, app, town_world):
        app.handle_input("/center docks")
        app.handle_input("/delete docks")

        assert town_world.get_location("docks") is None
        assert app.center_id is None
        assert app._dirty is True
        assert "Deleted location: docks" in output_of(app)

    def test_save(self, app, tmp_path):
        path = tmp_path / "saved.json"
        app.handle_input("/add Bakery")
        app.handle_input(f"/save {path}")

        assert app._dirty is False
        assert app.world_path == path
        assert len(json.loads(path.read_text())["locations"]) == 14

    def test_nodes_before_map(self, app):
        app.handle_input("/nodes")

        assert "No map rendered yet" in output_of(app)

    def test_quit(self, app):
        app._running = True
        app.handle_input("/q")

        assert app._running is False

    def test_unknown_command(self, app):
        app.handle_input("/teleport")

        assert "Unknown command: /teleport" in output_of(app)

    def test_plain_text(self, app):
        app.handle_input("look")

        assert "Commands start with /" in output_of(app)


class TestMain:
    """Tests for the command line entry point."""

    def test_once(self, world_file, quiet_logging, capsys):
        code = main([str(world_file), "--once", "--center", "gate", "--player", "road"])

        out = capsys.readouterr().out
        assert code == 0
        assert "@road" in out

    def test_once_with_radius(self, world_file, quiet_logging, capsys):
        code = main([str(world_file), "--once", "--radius", "0"])

        out = capsys.readouterr().out
        assert code == 0
        assert "1 locations" in out

    def test_missing_world_renders_empty(self, tmp_path, quiet_logging, capsys):
        code = main([str(tmp_path / "new.json"), "--once"])

        assert code == 1
        assert "No locations found" in capsys.readouterr().out

    def test_unknown_center(self, world_file, quiet_logging, capsys):
        code = main([str(world_file), "--once", "--center", "atlantis"])

        assert code == 1
        assert "atlantis" in capsys.readouterr().out

    def test_broken_world_file(self, tmp_path, quiet_logging, capsys):
        path = tmp_path / "broken.json"
        path.write_text("[{]")

        assert main([str(path), "--once"]) == 1

    def test_malformed_world_file(self, tmp_path, quiet_logging, capsys):
        path = tmp_path / "odd.json"
        path.write_text(json.dumps({"locations": [{"id": "a", "name": "A", "exits": ["north"]}]}))

        assert main([str(path), "--once"]) == 1
        assert "must be an object" in capsys.readouterr().out
