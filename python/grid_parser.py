"""
Grid parsing for guard patrol maps.

Format:
- One line per grid row, all rows the same length
- '.' open cell, '#' wall, '^' the guard's starting cell (facing up)
- Exactly one '^' must appear
"""

from __future__ import annotations

import logging

from patrol_types import (
    CellState,
    Coordinate,
    Direction,
    Grid,
    GuardState,
    ParseError,
    StartNotFound,
)

__all__ = ["parse_grid", "GUARD_MARKER"]

logger = logging.getLogger(__name__)

GUARD_MARKER = "^"

_CELL_MARKERS = {
    ".": CellState.OPEN,
    "#": CellState.WALL,
}


def parse_grid(text: str) -> Grid:
    """
    Parse a patrol map into a Grid.

    The guard's starting cell is stored as OPEN; its position and facing
    direction are kept on Grid.start. Blank lines before and after the map
    are ignored, as are Windows line endings.

    Example:
        \"\"\"
        ..#
        .^.
        ...
        \"\"\"
        Creates a 3x3 grid with a wall at (0, 2) and the guard at (1, 1)
        facing up.

    Args:
        text: The whole map as one string

    Returns:
        Parsed Grid

    Raises:
        ParseError: If rows differ in length, a character is not one of
            '.', '#', '^', or more than one guard marker appears
        StartNotFound: If no guard marker appears
    """
    row_strings = text.strip("\r\n").splitlines()
    rows: list[tuple[CellState, ...]] = []
    start: GuardState | None = None

    for row_idx, row_str in enumerate(row_strings):
        cells: list[CellState] = []

        for col_idx, char in enumerate(row_str):
            if char == GUARD_MARKER:
                if start is not None:
                    raise ParseError(
                        f"Multiple guard markers\n"
                        f"  First at row {start.position.row}, column {start.position.col}\n"
                        f"  Another at row {row_idx}, column {col_idx}\n"
                        f"  Exactly one '{GUARD_MARKER}' is allowed"
                    )
                start = GuardState(Coordinate(row_idx, col_idx), Direction.UP)
                cells.append(CellState.OPEN)
            elif char in _CELL_MARKERS:
                cells.append(_CELL_MARKERS[char])
            else:
                raise ParseError(
                    f"Invalid character {char!r}\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Valid characters: '.' (open), '#' (wall), '{GUARD_MARKER}' (guard)"
                )

        rows.append(tuple(cells))

    # Validate all rows have same length
    if rows:
        cols = len(rows[0])
        mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != cols]
        if mismatched:
            error_msg = (
                f"Inconsistent row lengths\n"
                f"  Expected: {cols} columns (from row 0)\n"
                f"  Mismatched rows:\n"
            )
            for row_idx, actual_cols in mismatched:
                error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
            error_msg += "  All rows must have the same number of cells"
            raise ParseError(error_msg)

    if start is None:
        raise StartNotFound(f"No guard marker '{GUARD_MARKER}' found in {len(rows)}-row grid")

    grid = Grid(tuple(rows), start)
    logger.info(
        "Parsed %dx%d grid with %d walls, guard at (%d, %d)",
        grid.height,
        grid.width,
        grid.wall_count(),
        start.position.row,
        start.position.col,
    )
    return grid
