"""
Test rotation framework for systematic directional testing.

This module provides utilities to write patrol tests once and automatically
run them in all 4 rotations (0°, 90°, 180°, 270°). The grid, the guard's
start and the expected cells are rotated together, so every verdict must
come out the same in every orientation.
"""

from dataclasses import dataclass, field
from typing import Callable

from grid_parser import parse_grid
from patrol_types import Coordinate, Direction, Grid, GuardState, Outcome


# =============================================================================
# Rotation Utilities
# =============================================================================


def rotate_coordinate_90(coord: Coordinate, height: int) -> Coordinate:
    """
    Rotate a coordinate 90° clockwise within a grid of the given height.

    In an N×M grid rotated 90° clockwise, it becomes M×N.
    Position (row, col) → (col, N - 1 - row)
    """
    return Coordinate(coord.col, height - 1 - coord.row)


def rotate_direction_90(direction: Direction) -> Direction:
    """Rotate a direction 90° clockwise."""
    return direction.turn()


def rotate_grid_90(grid: Grid) -> Grid:
    """Rotate a Grid, including the guard's start, 90° clockwise."""
    height, width = grid.height, grid.width
    new_cells = [[None] * height for _ in range(width)]  # type: ignore

    for coord, state in grid.coordinates():
        rotated = rotate_coordinate_90(coord, height)
        new_cells[rotated.row][rotated.col] = state

    start = GuardState(
        rotate_coordinate_90(grid.start.position, height),
        rotate_direction_90(grid.start.direction),
    )
    return Grid(tuple(tuple(row) for row in new_cells), start)  # type: ignore


# =============================================================================
# Test Case Data Structures
# =============================================================================


@dataclass
class RotationalTestCase:
    """
    A patrol test case that will be run in all 4 rotations.

    Example usage:
        test = RotationalTestCase(
            name="corner_trap",
            grid_text="#.\\n^#\\n",
            outcome=Outcome.EXITED,
            obstructions=set(),
        )
    """

    name: str
    grid_text: str
    outcome: Outcome
    obstructions: set[Coordinate] = field(default_factory=set)

    __test__ = False

    def get_all_rotations(self) -> list[tuple[int, Grid, set[Coordinate]]]:
        """
        Generate all 4 rotations of this test case.

        Returns:
            List of (rotation_degrees, grid, expected_obstructions) tuples
        """
        results = []

        grid = parse_grid(self.grid_text)
        expected = set(self.obstructions)

        for rotation in [0, 90, 180, 270]:
            results.append((rotation, grid, expected))

            if rotation < 270:
                # Rotate expectations using the grid BEFORE rotation
                expected = {rotate_coordinate_90(c, grid.height) for c in expected}
                grid = rotate_grid_90(grid)

        return results


# =============================================================================
# Test Runner
# =============================================================================


def run_rotational_test(
    test_case: RotationalTestCase,
    simulate_fn: Callable[[Grid, GuardState], Outcome],
    search_fn: Callable[[Grid, GuardState], set[Coordinate]],
) -> None:
    """
    Run a rotational test case through all 4 rotations.

    Args:
        test_case: The test case to run
        simulate_fn: Exit-or-loop verdict for a grid and start
        search_fn: Obstruction search for a grid and start
    """
    for rotation, grid, expected in test_case.get_all_rotations():
        outcome = simulate_fn(grid, grid.start)
        assert outcome is test_case.outcome, (
            f"{test_case.name} at {rotation}°: expected {test_case.outcome}, got {outcome}"
        )

        found = search_fn(grid, grid.start)
        assert found == expected, (
            f"{test_case.name} at {rotation}°: expected obstructions {sorted(expected)}, "
            f"got {sorted(found)}"
        )
