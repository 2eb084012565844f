"""
Interactive patrol viewer.
Display a grid and step the guard through its patrol with keyboard commands.
"""

import logging
import sys
from pathlib import Path

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_patrol
from grid_parser import parse_grid
from patrol import PatrolTrace, find_obstructions, trace
from patrol_types import Coordinate, Grid, GuardState, Outcome


class InteractiveDemo:
    """Step through a guard patrol one decision at a time."""

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self.console = Console()
        self.show_obstructions = False
        self._obstructions: set[Coordinate] | None = None
        self.reset()
        self.status_message = "Ready"

    def reset(self) -> None:
        """Put the guard back at its starting state."""
        self.patrol: PatrolTrace = trace(self.grid)
        self.guard: GuardState | None = next(self.patrol)
        self.visited: set[Coordinate] = {self.grid.start.position}
        self.steps = 0
        self.status_message = "Patrol reset"

    @property
    def obstructions(self) -> set[Coordinate]:
        """Obstruction cells, searched on first use."""
        if self._obstructions is None:
            self._obstructions = find_obstructions(self.grid)
        return self._obstructions

    def step(self) -> bool:
        """Advance one decision. Returns False once the patrol has ended."""
        if self.patrol.outcome is not None:
            return False
        try:
            self.guard = next(self.patrol)
        except StopIteration:
            if self.patrol.outcome is Outcome.EXITED:
                self.guard = None
                self.status_message = f"Guard left the grid after {self.steps} decisions"
            else:
                self.status_message = f"Guard is looping after {self.steps} decisions"
            return False
        self.steps += 1
        self.visited.add(self.guard.position)
        self.status_message = f"Step {self.steps}"
        return True

    def finish(self) -> None:
        """Run the patrol to its end."""
        while self.step():
            pass

    def generate_display(self) -> Panel:
        """Generate the current display with grid and status."""
        overlay = self.obstructions if self.show_obstructions else set()
        grid_text = render_patrol(self.grid, self.visited, overlay, self.guard)

        status = Text()
        status.append("Guard: ", style="bold")
        if self.guard is None:
            status.append("off the grid\n")
        else:
            pos = self.guard.position
            status.append(f"({pos.row}, {pos.col}) facing {self.guard.direction.name}\n")
        status.append("Visited: ", style="bold")
        status.append(f"{len(self.visited)} cells\n")
        if self.show_obstructions:
            status.append("Obstructions: ", style="bold")
            status.append(f"{len(overlay)}\n")
        status.append("\n")

        # Convert ANSI-colored grid text to Rich Text
        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  N - Step\n")
        status.append("  F - Finish patrol\n")
        status.append("  O - Toggle obstruction overlay\n")
        status.append("  R - Reset\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Guard Patrol Viewer", border_style="green")

    def run(self) -> None:
        """Run the interactive viewer."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey().lower()

                    if key == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key == "r":
                        self.reset()
                    elif key == "n":
                        self.step()
                    elif key == "f":
                        self.finish()
                    elif key == "o":
                        self.show_obstructions = not self.show_obstructions
                    else:
                        self.status_message = f"Unknown key: {key!r}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


SAMPLE = """\
....#.....
.........#
..........
..#.......
.......#..
..........
.#..^.....
........#.
#.........
......#...
"""


def main(argv: list[str] | None = None) -> None:
    """Open the viewer on a map file, or on the sample map if none given."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    args = sys.argv[1:] if argv is None else argv
    text = Path(args[0]).read_text() if args else SAMPLE
    InteractiveDemo(parse_grid(text)).run()


if __name__ == "__main__":
    main()
