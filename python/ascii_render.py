"""
ASCII rendering for patrol grids.

Draws the grid as one character per cell, overlaying the guard's path,
obstruction candidates and the guard itself, optionally coloured.
"""

from __future__ import annotations

from typing import Callable, Collection

import simple_chalk as chalk  # type: ignore[import-untyped]

from patrol_types import CellState, Coordinate, Grid, GuardState

VISITED_CHAR = "X"
OBSTRUCTION_CHAR = "O"


def _cell_char(
    coord: Coordinate,
    state: CellState,
    visited: Collection[Coordinate],
    obstructions: Collection[Coordinate],
    guard: GuardState | None,
) -> tuple[str, str]:
    """Return (character, kind) for one cell; kind selects the colour."""
    if guard is not None and guard.position == coord:
        return guard.direction.value, "guard"
    if coord in obstructions:
        return OBSTRUCTION_CHAR, "obstruction"
    if state is CellState.WALL:
        return state.value, "wall"
    if coord in visited:
        return VISITED_CHAR, "visited"
    return state.value, "open"


_COLOURS: dict[str, Callable[[str], str]] = {
    "guard": chalk.bgWhite.black,
    "obstruction": chalk.redBright,
    "wall": chalk.white,
    "visited": chalk.yellow,
    "open": lambda s: s,
}


def render_patrol(
    grid: Grid,
    visited: Collection[Coordinate] = (),
    obstructions: Collection[Coordinate] = (),
    guard: GuardState | None = None,
    cell_width: int = 1,
    colour: bool = True,
) -> str:
    """
    Render a grid with the patrol overlaid.

    Args:
        grid: The grid to render
        visited: Cells drawn as 'X'
        obstructions: Cells drawn as 'O' (take precedence over walls)
        guard: Optional guard drawn as its direction arrow
        cell_width: Characters per cell (default 1)
        colour: Apply simple_chalk colours; False gives plain text

    Returns:
        The rendered grid, one line per row
    """
    lines: list[str] = []
    for r, row in enumerate(grid.cells):
        parts: list[str] = []
        for c, state in enumerate(row):
            char, kind = _cell_char(Coordinate(r, c), state, visited, obstructions, guard)
            content = char if cell_width == 1 else char.center(cell_width)
            parts.append(_COLOURS[kind](content) if colour else content)
        lines.append("".join(parts))
    return "\n".join(lines)


def render_plain(
    grid: Grid,
    visited: Collection[Coordinate] = (),
    obstructions: Collection[Coordinate] = (),
    guard: GuardState | None = None,
) -> str:
    """Uncoloured render_patrol() with one character per cell."""
    return render_patrol(grid, visited, obstructions, guard, colour=False)
