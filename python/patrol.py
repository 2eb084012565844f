"""
Guard patrol simulation with wall-based loop detection.
Two operations: trace a patrol until it leaves the grid, and search for the
single extra walls that would trap the guard in a loop instead.
"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, Iterator

from patrol_types import (
    CellState,
    Coordinate,
    Grid,
    GuardState,
    Outcome,
    TurnEvent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchOptions:
    """Settings governing obstruction search."""

    workers: int = 1  # >1 runs trials in a process pool
    skip_repeats: bool = True  # Test each candidate cell once


# =============================================================================
# Tracing
# =============================================================================


class PatrolTrace:
    """
    Iterator wrapper for trace() that tracks how the patrol ended.

    Usage:
        patrol = trace(grid)
        for state in patrol:
            print(state)
        print(patrol.outcome)  # EXITED or LOOPING
    """

    def __init__(self, generator: Iterator[GuardState]):
        self._iterator = generator
        self.outcome: Outcome | None = None

    def __iter__(self) -> Iterator[GuardState]:
        return self

    def __next__(self) -> GuardState:
        return next(self._iterator)


def trace(grid: Grid, start: GuardState | None = None) -> PatrolTrace:
    """
    Walk the guard across the grid, yielding its state after every decision.

    The first state yielded is the start state. Each later state is the
    result of exactly one decision: a step onto the open cell ahead, or a
    clockwise turn in place when a wall is ahead. Iteration stops when the
    guard would step off the grid, or when it meets a wall it has already
    met from the same direction.

    Args:
        grid: The grid to patrol
        start: Starting state; defaults to grid.start

    Returns:
        PatrolTrace iterator yielding GuardState and recording the outcome
    """
    result = PatrolTrace.__new__(PatrolTrace)
    result.outcome = None
    result._iterator = _trace_generator(grid, start or grid.start, result)
    return result


def advance(grid: Grid, guard: GuardState, turns: set[TurnEvent]) -> GuardState | Outcome:
    """
    Make one patrol decision.

    Steps onto the open cell ahead, or turns clockwise in place when a wall
    is ahead, recording the turn in `turns`. Returns the terminal Outcome
    instead of a state when the guard would leave the grid, or when it meets
    a wall it has already turned at from the same direction.

    Args:
        grid: The grid being patrolled
        guard: Current guard state
        turns: TurnEvents seen so far in this patrol (updated in place)

    Returns:
        The next GuardState, or Outcome.EXITED / Outcome.LOOPING
    """
    ahead = guard.ahead()
    cell = grid.get(ahead)

    if cell is None:
        return Outcome.EXITED

    if cell is CellState.WALL:
        event = TurnEvent(ahead, guard.direction)
        if event in turns:
            return Outcome.LOOPING
        turns.add(event)
        return guard.turned()

    return guard.moved()


def _trace_generator(
    grid: Grid,
    start: GuardState,
    result: PatrolTrace,
) -> Iterator[GuardState]:
    """Internal generator for trace(). Do not call directly."""
    guard: GuardState | Outcome = start
    turns: set[TurnEvent] = set()

    while isinstance(guard, GuardState):
        yield guard
        guard = advance(grid, guard, turns)

    result.outcome = guard


def visited_cells(grid: Grid, start: GuardState | None = None) -> set[Coordinate]:
    """Distinct cells the guard stands on during its patrol, start included."""
    return {state.position for state in trace(grid, start)}


# =============================================================================
# Loop detection
# =============================================================================


def simulate(grid: Grid, start: GuardState) -> Outcome:
    """
    Run a patrol to completion and report whether it exits or loops.

    The guard's future is fully determined by its state and the grid, so
    bumping into the same wall from the same direction a second time means
    the whole trajectory since then repeats forever. Only these turn events
    are remembered, which bounds memory by four per wall no matter how long
    the loop is.

    Args:
        grid: The grid to patrol (not modified)
        start: Starting guard state

    Returns:
        Outcome.EXITED or Outcome.LOOPING
    """
    guard: GuardState | Outcome = start
    turns: set[TurnEvent] = set()

    while isinstance(guard, GuardState):
        guard = advance(grid, guard, turns)

    return guard


def has_loop(grid: Grid, start: GuardState | None = None) -> bool:
    return simulate(grid, start or grid.start) is Outcome.LOOPING


# =============================================================================
# Obstruction search
# =============================================================================


def candidate_cells(grid: Grid, start: GuardState | None = None) -> Iterator[Coordinate]:
    """
    Yield each open cell the unmodified patrol steps onto, in patrol order.

    A cell crossed more than once is yielded once per crossing. Turns in
    place yield nothing.
    """
    previous: GuardState | None = None
    patrol = trace(grid, start)
    for state in patrol:
        if previous is not None and state.position != previous.position:
            yield state.position
        previous = state

    if patrol.outcome is Outcome.LOOPING:
        logger.warning("Unmodified patrol never leaves the grid; stopped at first repeated turn")


def _trial_loops(grid: Grid, candidate: Coordinate, origin: GuardState) -> bool:
    return simulate(grid.with_wall(candidate), origin) is Outcome.LOOPING


def _search_chunk(grid: Grid, origin: GuardState, chunk: list[Coordinate]) -> set[Coordinate]:
    """Run trials for a batch of candidates. Module level so workers can pickle it."""
    return {candidate for candidate in chunk if _trial_loops(grid, candidate, origin)}


def _unique(candidates: Iterable[Coordinate]) -> Iterator[Coordinate]:
    tried: set[Coordinate] = set()
    for candidate in candidates:
        if candidate not in tried:
            tried.add(candidate)
            yield candidate


def find_obstructions(
    grid: Grid,
    start: GuardState | None = None,
    options: SearchOptions = SearchOptions(),
) -> set[Coordinate]:
    """
    Find every open cell where one extra wall makes the guard patrol forever.

    Follows the unmodified patrol and, for each cell it is about to step
    onto, asks whether a wall placed there from the very beginning would
    trap a guard starting from the original state.

    Args:
        grid: The base grid (not modified)
        start: Original guard state every trial starts from; defaults to
            grid.start
        options: SearchOptions controlling parallelism and repeat skipping

    Returns:
        Set of coordinates whose individual wall placement causes a loop
    """
    origin = start or grid.start
    candidates: Iterable[Coordinate] = candidate_cells(grid, origin)
    if options.skip_repeats:
        candidates = _unique(candidates)

    if options.workers > 1:
        return _find_obstructions_parallel(grid, origin, list(candidates), options.workers)

    obstructions: set[Coordinate] = set()
    tried = 0
    for candidate in candidates:
        tried += 1
        if _trial_loops(grid, candidate, origin):
            logger.debug("Wall at (%d, %d) traps the guard", candidate.row, candidate.col)
            obstructions.add(candidate)

    logger.info("Tried %d candidates, %d cause a loop", tried, len(obstructions))
    return obstructions


def _find_obstructions_parallel(
    grid: Grid,
    origin: GuardState,
    candidates: list[Coordinate],
    workers: int,
) -> set[Coordinate]:
    """Partition candidates across a process pool and merge the looping ones."""
    chunk_count = workers * 4
    chunks = [candidates[i::chunk_count] for i in range(chunk_count)]
    chunks = [chunk for chunk in chunks if chunk]

    obstructions: set[Coordinate] = set()
    with ProcessPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(_search_chunk, grid, origin, chunk): i for i, chunk in enumerate(chunks)}
        for future in as_completed(futures):
            found = future.result()
            logger.debug("Chunk %d: %d looping candidates", futures[future], len(found))
            obstructions |= found

    logger.info(
        "Tried %d candidates across %d workers, %d cause a loop",
        len(candidates),
        workers,
        len(obstructions),
    )
    return obstructions
