"""
Shared type definitions for the guard patrol system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


# =============================================================================
# Errors
# =============================================================================


class PatrolError(ValueError):
    """Base class for malformed grids and contract violations."""


class ParseError(PatrolError):
    """Grid text has ragged rows, unknown characters or several guards."""


class StartNotFound(ParseError):
    """Grid text contains no guard marker."""


class InvalidCoordinate(PatrolError):
    """A coordinate that must be inside the grid is not."""


# =============================================================================
# Orientation
# =============================================================================


class Direction(Enum):
    """Cardinal direction the guard faces."""

    UP = "^"  # decreasing row
    RIGHT = ">"  # increasing col
    DOWN = "v"  # increasing row
    LEFT = "<"  # decreasing col

    @property
    def delta(self) -> tuple[int, int]:
        """(row_delta, col_delta) of one step in this direction."""
        return _DELTAS[self]

    def turn(self) -> Direction:
        """Clockwise successor: UP -> RIGHT -> DOWN -> LEFT -> UP."""
        return _CLOCKWISE[self]


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}

_CLOCKWISE = {
    Direction.UP: Direction.RIGHT,
    Direction.RIGHT: Direction.DOWN,
    Direction.DOWN: Direction.LEFT,
    Direction.LEFT: Direction.UP,
}


class CellState(Enum):
    """What occupies a grid cell. The guard is not a cell state."""

    OPEN = "."
    WALL = "#"


class Outcome(Enum):
    """How a patrol ended."""

    EXITED = "exited"  # Stepped off the edge of the grid
    LOOPING = "looping"  # Hit the same wall from the same side twice


# =============================================================================
# Positions and guard state
# =============================================================================


@dataclass(frozen=True, order=True)
class Coordinate:
    """A (row, col) position. May lie outside the grid."""

    row: int
    col: int

    def step(self, direction: Direction) -> Coordinate:
        dr, dc = direction.delta
        return Coordinate(self.row + dr, self.col + dc)


@dataclass(frozen=True)
class GuardState:
    """Where the guard stands and which way it faces."""

    position: Coordinate
    direction: Direction

    def ahead(self) -> Coordinate:
        """The cell directly in front of the guard."""
        return self.position.step(self.direction)

    def moved(self) -> GuardState:
        return GuardState(self.ahead(), self.direction)

    def turned(self) -> GuardState:
        return GuardState(self.position, self.direction.turn())


@dataclass(frozen=True)
class TurnEvent:
    """A wall the guard bumped into and the direction it was facing."""

    wall: Coordinate
    direction: Direction


# =============================================================================
# Grid
# =============================================================================


@dataclass(frozen=True)
class Grid:
    """A rectangular grid of open cells and walls, plus the guard's start."""

    cells: tuple[tuple[CellState, ...], ...]
    start: GuardState

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def contains(self, coord: Coordinate) -> bool:
        return 0 <= coord.row < self.height and 0 <= coord.col < self.width

    def get(self, coord: Coordinate) -> CellState | None:
        """Cell state at coord, or None if coord is off the grid."""
        if not self.contains(coord):
            return None
        return self.cells[coord.row][coord.col]

    def __getitem__(self, coord: Coordinate) -> CellState:
        if not self.contains(coord):
            raise InvalidCoordinate(
                f"Coordinate ({coord.row}, {coord.col}) is outside "
                f"{self.height}x{self.width} grid"
            )
        return self.cells[coord.row][coord.col]

    def with_wall(self, coord: Coordinate) -> Grid:
        """
        Return a copy of this grid with a wall at coord.

        Only the affected row is rebuilt; the other rows are shared with the
        receiver, which is never modified.

        Raises:
            InvalidCoordinate: If coord is off the grid
        """
        if not self.contains(coord):
            raise InvalidCoordinate(
                f"Cannot place wall at ({coord.row}, {coord.col}): outside "
                f"{self.height}x{self.width} grid"
            )
        row = self.cells[coord.row]
        new_row = row[: coord.col] + (CellState.WALL,) + row[coord.col + 1 :]
        cells = self.cells[: coord.row] + (new_row,) + self.cells[coord.row + 1 :]
        return Grid(cells, self.start)

    def coordinates(self) -> Iterator[tuple[Coordinate, CellState]]:
        """Yield every (coordinate, state) pair in row-major order."""
        for r, row in enumerate(self.cells):
            for c, state in enumerate(row):
                yield Coordinate(r, c), state

    def open_cells(self) -> int:
        return sum(1 for _, state in self.coordinates() if state is CellState.OPEN)

    def wall_count(self) -> int:
        return sum(1 for _, state in self.coordinates() if state is CellState.WALL)
