"""Unit tests for unit placement."""

import random

import pytest

from glyphscramble.grid import format_grid
from glyphscramble.positions import manhattan, select_position


@pytest.mark.unit
def test_manhattan():
    assert manhattan((0, 0), (2, 3)) == 5
    assert manhattan((4, 1), (1, 4)) == 6


@pytest.mark.unit
def test_empty_grid_has_no_position():
    assert select_position(format_grid("", 128), [], 1, random.Random(0)) is None


@pytest.mark.unit
def test_full_grid_has_no_position():
    grid = format_grid("abcd", 64)
    assert select_position(grid, grid.positions(), 1, random.Random(0)) is None


@pytest.mark.unit
def test_never_returns_occupied_cell():
    grid = format_grid("x" * 40, 64)
    rng = random.Random(11)
    occupied = grid.positions()[:-3]
    for _ in range(50):
        pick = select_position(grid, occupied, 0, rng)
        assert pick is not None
        assert pick not in occupied


@pytest.mark.unit
def test_respects_separation_when_room_exists():
    grid = format_grid("x" * 400, 160)
    rng = random.Random(5)
    occupied = [(0, 0)]
    for _ in range(50):
        pick = select_position(grid, occupied, 3, rng, attempts=200)
        assert manhattan(pick, occupied[0]) >= 3


@pytest.mark.unit
def test_falls_back_to_free_cell_when_separation_impossible():
    grid = format_grid("abc", 64)
    pick = select_position(grid, [(0, 1)], 100, random.Random(2))
    assert pick in {(0, 0), (0, 2)}
