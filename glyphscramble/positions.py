"""Random placement of new animated units on a grid."""

from __future__ import annotations

import random
from typing import Collection, Optional

from glyphscramble.grid import Grid, Position

MAX_PLACEMENT_ATTEMPTS = 10


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _random_cell(grid: Grid, rng: random.Random) -> Optional[Position]:
    row = rng.randrange(grid.row_count)
    cols = len(grid.rows[row])
    if cols == 0:
        return None
    return row, rng.randrange(cols)


def select_position(
    grid: Grid,
    occupied: Collection[Position],
    min_separation: float,
    rng: random.Random,
    attempts: int = MAX_PLACEMENT_ATTEMPTS,
) -> Optional[Position]:
    """Pick a cell for a new unit, keeping clear of occupied cells where possible.

    Up to ``attempts`` uniform picks (row first, then column) are tried and
    any pick closer than ``min_separation`` (Manhattan) to an occupied cell
    is rejected. When every attempt fails the separation is dropped and a
    random free cell is returned instead, so a crowded grid still makes
    progress. Occupied cells themselves are never returned.

    Returns:
        A (row, col) tuple, or None if the grid has no free cells.
    """
    if grid.is_empty:
        return None

    occupied_set = set(occupied)
    for _ in range(attempts):
        pick = _random_cell(grid, rng)
        if pick is None or pick in occupied_set:
            continue
        if all(manhattan(pick, other) >= min_separation for other in occupied_set):
            return pick

    free = [pos for pos in grid.positions() if pos not in occupied_set]
    if not free:
        return None
    return free[rng.randrange(len(free))]
