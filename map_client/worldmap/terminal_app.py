"""
Terminal World Map - browse and edit a world file from the terminal.

Renders the ASCII map of a world JSON file. In interactive mode, local
commands (prefixed with /) move the map center, change the radius, mark
the player, and add or connect locations.
"""

import sys
import logging
from typing import Optional, Callable
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.table import Table
from rich.prompt import Prompt
from rich.markup import escape
from rich import box

from .config import AppConfig
from .errors import WorldFileError
from .map_render import MapRenderResult, render_map
from .map_tools import MapToolExecutor
from .world import World

logger = logging.getLogger(__name__)


def configure_logging(config: AppConfig) -> None:
    """Log to a file only, keeping the terminal clean."""
    logging.basicConfig(
        level=config.log_level_value(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.FileHandler(config.log_file, mode='a')]
    )


class TerminalApp:
    """
    Terminal front end for the world map.

    Features:
    - ASCII map rendering in a rich panel
    - Centering on a location by id or name
    - Radius and player marker control
    - Adding and connecting locations, saving the world file
    """

    COLORS = {
        "primary": "#D4A574",
        "secondary": "#8B7355",
        "accent": "#C19A6B",
        "success": "#9CAF88",
        "error": "#CD5C5C",
        "info": "#87CEEB",
        "muted": "#696969",
        "command": "#98D8C8",
    }

    def __init__(
        self,
        world: World,
        world_path: Optional[str | Path] = None,
        config: Optional[AppConfig] = None,
        console: Optional[Console] = None,
    ):
        self.config = config or AppConfig()
        self.console = console or Console(highlight=False)
        self.world = world
        self.world_path = Path(world_path) if world_path else None
        self.tools = MapToolExecutor(
            world,
            world_path=self.world_path,
            auto_save=False,
            default_radius=self.config.default_radius,
        )

        # View state
        self.center_id: Optional[str] = None
        self.player_location_id: Optional[str] = None
        self.radius: Optional[int] = self.config.default_radius
        self.last_result: Optional[MapRenderResult] = None

        self._running = False
        self._dirty = False
        self._local_commands = self._register_commands()

    def _register_commands(self) -> dict[str, Callable[[list[str]], None]]:
        """Register local / commands."""
        return {
            "help": self._cmd_help,
            "h": self._cmd_help,
            "?": self._cmd_help,
            "map": self._cmd_map,
            "m": self._cmd_map,
            "center": self._cmd_center,
            "player": self._cmd_player,
            "radius": self._cmd_radius,
            "nodes": self._cmd_nodes,
            "locations": self._cmd_locations,
            "ls": self._cmd_locations,
            "add": self._cmd_add,
            "connect": self._cmd_connect,
            "delete": self._cmd_delete,
            "save": self._cmd_save,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
            "q": self._cmd_quit,
        }

    # ==================== Output ====================

    def _print_error(self, message: str) -> None:
        self.console.print(f"[{self.COLORS['error']}]✗ {message}[/]")

    def _print_success(self, message: str) -> None:
        self.console.print(f"[{self.COLORS['success']}]✓ {message}[/]")

    def _print_info(self, message: str) -> None:
        self.console.print(f"[{self.COLORS['info']}]ℹ {message}[/]")

    def _print_help(self) -> None:
        table = Table(
            title="[bold]Local Commands[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
            title_style=self.COLORS["primary"],
        )

        table.add_column("Command", style=self.COLORS["command"])
        table.add_column("Description", style="white")

        commands = [
            ("/map [radius], /m", "Render the map"),
            ("/center <id|name>", "Center the map on a location"),
            ("/player <id|name>", "Mark the player's location with @"),
            ("/radius <n|all>", "Limit the map to n exits from the center"),
            ("/nodes", "List the locations on the last map"),
            ("/locations, /ls", "List every location in the world"),
            ("/add <name>", "Create a location"),
            ("/connect <from> <dir> <to> [back]", "Connect two locations"),
            ("/delete <id|name>", "Delete a location and the exits leading to it"),
            ("/save", "Save the world file"),
            ("/help, /h, /?", "Show this help message"),
            ("/quit, /exit, /q", "Exit the application"),
        ]

        for cmd, desc in commands:
            table.add_row(cmd, desc)

        self.console.print(table)

    def print_map(self) -> Optional[MapRenderResult]:
        """Render the map with the current view state and print it."""
        result = render_map(
            self.world.snapshot(),
            center_id=self.center_id,
            radius=self.radius,
            player_location_id=self.player_location_id,
        )
        self.last_result = result

        if not result.success:
            self._print_error(result.message)
            if not self.world.locations:
                self._print_info("Create a location first with /add <name>")
            return result

        center = self.world.get_location(result.center_id)
        radius = "all" if self.radius is None else str(self.radius)
        self.console.print(Panel(
            Text(result.ascii),
            title=f"[bold]{self.world.name}[/bold]",
            subtitle=f"center: {center.name if center else result.center_id} • radius: {radius}",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
            expand=False,
        ))
        self.console.print(
            f"[{self.COLORS['muted']}]{len(result.nodes)} locations, "
            f"{len(result.connections)} connections[/]"
        )
        return result

    # ==================== Commands ====================

    def _resolve(self, reference: str) -> Optional[str]:
        location = self.world.resolve(reference)
        if not location:
            self._print_error(f"No location matching '{reference}'")
            return None
        return location.id

    def _cmd_help(self, args: list[str]) -> None:
        """Show help."""
        self._print_help()

    def _cmd_map(self, args: list[str]) -> None:
        """Render the map, optionally with a new radius."""
        if args:
            self._cmd_radius(args)
        self.print_map()

    def _cmd_center(self, args: list[str]) -> None:
        """Set the map center."""
        if not args:
            self.center_id = None
            self._print_info("Center reset to the player location or first location")
            return

        location_id = self._resolve(" ".join(args))
        if location_id:
            self.center_id = location_id
            self.print_map()

    def _cmd_player(self, args: list[str]) -> None:
        """Set the player location."""
        if not args:
            self.player_location_id = None
            self._print_info("Player marker cleared")
            return

        location_id = self._resolve(" ".join(args))
        if location_id:
            self.player_location_id = location_id
            self.print_map()

    def _cmd_radius(self, args: list[str]) -> None:
        """Set the radius."""
        if not args or args[0].lower() in ("all", "none"):
            self.radius = None
            self._print_info("Radius: all")
            return

        try:
            radius = int(args[0])
        except ValueError:
            self._print_error(f"Invalid radius: {args[0]}")
            return

        if radius < 0:
            self._print_error("Radius must not be negative")
            return

        self.radius = radius
        self._print_info(f"Radius: {radius}")

    def _cmd_nodes(self, args: list[str]) -> None:
        """List the nodes of the last map."""
        if not self.last_result or not self.last_result.success:
            self._print_info("No map rendered yet. Use /map first.")
            return

        table = Table(
            title="[bold]Map Nodes[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
        )

        table.add_column("Location", style=self.COLORS["primary"])
        table.add_column("Position", style=self.COLORS["accent"])
        table.add_column("Exits", style="white")
        table.add_column("", style=self.COLORS["muted"])

        for node in self.last_result.nodes:
            flags = []
            if node.is_center:
                flags.append("center")
            if node.has_player:
                flags.append("player")
            table.add_row(
                node.name[:30],
                f"({node.x}, {node.y})",
                str(len(node.exits)),
                ", ".join(flags),
            )

        self.console.print(table)

    def _cmd_locations(self, args: list[str]) -> None:
        """List every location."""
        if not self.world.locations:
            self._print_info("No locations yet.")
            return

        table = Table(
            title="[bold]Locations[/bold]",
            box=box.ROUNDED,
            border_style=self.COLORS["secondary"],
        )

        table.add_column("ID", style=self.COLORS["muted"])
        table.add_column("Name", style=self.COLORS["primary"])
        table.add_column("Exits", style="white")

        for location in self.world.locations.values():
            table.add_row(
                location.id,
                location.name,
                ", ".join(e.direction for e in location.exits[:6]),
            )

        self.console.print(table)

    def _cmd_add(self, args: list[str]) -> None:
        """Add a location."""
        if not args:
            self._print_error("Usage: /add <name>")
            return

        result = self.tools.execute_tool("add_location", {"name": " ".join(args)})
        if result.success:
            self._dirty = True
            self._print_success(f"{result.message} ({result.data['location_id']})")
        else:
            self._print_error(result.message)

    def _cmd_connect(self, args: list[str]) -> None:
        """Connect two locations."""
        if len(args) < 3:
            self._print_error("Usage: /connect <from> <direction> <to> [back-direction]")
            return

        from_id = self._resolve(args[0])
        to_id = self._resolve(args[2])
        if not from_id or not to_id:
            return

        arguments = {
            "from_location_id": from_id,
            "to_location_id": to_id,
            "from_direction": args[1],
        }
        if len(args) > 3:
            arguments["to_direction"] = args[3]

        result = self.tools.execute_tool("connect_locations", arguments)
        if result.success:
            self._dirty = True
            self._print_success(result.message)
        else:
            self._print_error(result.message)

    def _cmd_delete(self, args: list[str]) -> None:
        """Delete a location."""
        if not args:
            self._print_error("Usage: /delete <id|name>")
            return

        location_id = self._resolve(" ".join(args))
        if not location_id:
            return

        result = self.tools.execute_tool("delete_location", {"location_id": location_id})
        if not result.success:
            self._print_error(result.message)
            return

        if self.center_id == location_id:
            self.center_id = None
        if self.player_location_id == location_id:
            self.player_location_id = None
        self._dirty = True
        self._print_success(result.message)

    def _cmd_save(self, args: list[str]) -> None:
        """Save the world file."""
        path = Path(args[0]) if args else self.world_path
        if not path:
            self._print_error("No world file path. Usage: /save <path>")
            return

        try:
            self.world.save_json(path)
        except OSError as e:
            self._print_error(f"Failed to save: {e}")
            return

        self.world_path = path
        self._dirty = False
        self._print_success(f"Saved {len(self.world)} locations to {path}")

    def _cmd_quit(self, args: list[str]) -> None:
        """Quit."""
        if self._dirty:
            self._print_info("Unsaved changes discarded (use /save before /quit to keep them)")
        self._running = False

    # ==================== Main Loop ====================

    def handle_input(self, user_input: str) -> None:
        """Dispatch one line of input."""
        user_input = user_input.strip()
        if not user_input:
            return

        if not user_input.startswith("/"):
            self._print_info("Commands start with /. Type /help for a list.")
            return

        parts = user_input[1:].split()
        command = parts[0].lower() if parts else ""
        handler = self._local_commands.get(command)

        if handler is None:
            self._print_error(f"Unknown command: /{command}")
            return

        handler(parts[1:])

    def run(self) -> None:
        """Interactive loop."""
        self._running = True
        self.print_map()
        self.console.print(f"[{self.COLORS['muted']}]Type /help for commands[/]")

        while self._running:
            try:
                user_input = Prompt.ask(f"[{self.COLORS['command']}]map[/]")
            except (EOFError, KeyboardInterrupt):
                break
            self.handle_input(user_input)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the terminal app."""
    import argparse

    parser = argparse.ArgumentParser(description="World Map - ASCII maps of location graphs")
    parser.add_argument("world", help="Path to a world JSON file (created on /save if missing)")
    parser.add_argument("--center", help="Location ID or name to center on")
    parser.add_argument("--radius", type=int, help="Maximum exits to follow from the center")
    parser.add_argument("--player", help="Player location ID or name (marked with @)")
    parser.add_argument("--once", action="store_true",
                        help="Print the map and exit")

    args = parser.parse_args(argv)

    config = AppConfig.from_env()
    if args.radius is not None:
        if args.radius < 0:
            parser.error("--radius must not be negative")
        config.default_radius = args.radius
    configure_logging(config)

    world_path = Path(args.world)
    console = Console(highlight=False)

    if world_path.exists():
        try:
            world = World.load_json(world_path)
        except WorldFileError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            return 1
    else:
        world = World(name=world_path.stem)

    app = TerminalApp(world, world_path=world_path, config=config, console=console)

    for option, attr in ((args.center, "center_id"), (args.player, "player_location_id")):
        if option:
            location = world.resolve(option)
            if not location:
                console.print(f"[red]No location matching '{option}'[/red]")
                return 1
            setattr(app, attr, location.id)

    if args.once:
        result = app.print_map()
        return 0 if result and result.success else 1

    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
