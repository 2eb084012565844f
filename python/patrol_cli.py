"""
Command-line entry point: count the cells where one extra wall traps the guard.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ascii_render import render_patrol
from grid_parser import parse_grid
from patrol import SearchOptions, find_obstructions, visited_cells
from patrol_types import Coordinate, PatrolError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Guard patrol: count obstruction cells that make the guard loop forever."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default="input.txt",
        help="Map file to read ('-' for stdin).",
    )
    parser.add_argument(
        "--visited",
        action="store_true",
        help="Print the number of cells the unmodified patrol visits instead.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Run trials in this many processes.",
    )
    parser.add_argument(
        "--no-skip-repeats",
        action="store_true",
        help="Re-test a candidate cell every time the patrol crosses it.",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Draw the grid with the patrol overlaid on stderr.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress (-v for INFO, -vv for DEBUG).",
    )
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    if args.workers < 1:
        print("error: --workers must be at least 1", file=sys.stderr)
        return 2

    try:
        grid = parse_grid(_read_input(args.path))
    except OSError as exc:
        print(f"error: cannot read {args.path}: {exc}", file=sys.stderr)
        return 1
    except PatrolError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    logger.info("Loaded map from %s", args.path)

    visited: set[Coordinate] = set()
    if args.visited or args.show:
        visited = visited_cells(grid)

    obstructions: set[Coordinate] = set()
    if args.visited:
        result = len(visited)
    else:
        options = SearchOptions(workers=args.workers, skip_repeats=not args.no_skip_repeats)
        obstructions = find_obstructions(grid, options=options)
        result = len(obstructions)

    if args.show:
        print(render_patrol(grid, visited, obstructions, grid.start), file=sys.stderr)

    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
