"""Per-unit state machine shared by the unit-based effects.

A unit moves strictly forward through ``GROWING -> ACTIVE -> FADING -> REMOVED``.
Spot-pulse units start ACTIVE on a single cell; radial-spread units start
GROWING and own a footprint of cells that fades out as a group.

Rendering and advancing happen in one call: each ``step_*`` function returns
what the unit shows this tick and then moves the unit's counters on, so a
unit with ``max_age=3`` and ``fade_total_steps=2`` is visible for exactly five
ticks.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

from glyphscramble.colors import distance_color, fade_toward_white, pulse_color
from glyphscramble.grid import Grid, Position


class Phase(IntEnum):
    """Unit phases, ordered so transitions can only increase the value."""

    GROWING = 0
    ACTIVE = 1
    FADING = 2
    REMOVED = 3


@dataclass(frozen=True)
class Cell:
    """A glyph with an optional color override."""

    glyph: str
    color: Optional[str] = None


@dataclass
class FootprintCell:
    row: int
    col: int
    glyph: str
    color: str


@dataclass
class AnimatedUnit:
    row: int
    col: int
    original_glyph: str
    current_glyph: str
    phase: Phase = Phase.ACTIVE
    age: int = 0
    max_age: int = 1
    pulse_position: float = 0.0
    pulse_direction: int = 1
    fade_step: int = 0
    fade_total_steps: int = 1
    footprint: List[FootprintCell] = field(default_factory=list)

    @property
    def position(self) -> Position:
        return self.row, self.col

    @property
    def pulse_speed(self) -> float:
        return 1 / self.max_age if self.max_age > 0 else 1.0

    @property
    def fade_progress(self) -> float:
        return self.fade_step / self.fade_total_steps if self.fade_total_steps else 1.0

    @property
    def is_live(self) -> bool:
        return self.phase is not Phase.REMOVED

    def transition(self, phase: Phase) -> None:
        if phase < self.phase:
            raise ValueError(f"Unit cannot move back from {self.phase.name} to {phase.name}")
        self.phase = phase

    def begin_fade(self, total_steps: int) -> None:
        self.transition(Phase.FADING)
        self.fade_step = 0
        self.fade_total_steps = max(1, total_steps)


def new_pulse_unit(grid: Grid, position: Position, max_age: int, rng: random.Random, char_set: str) -> AnimatedUnit:
    row, col = position
    return AnimatedUnit(
        row=row,
        col=col,
        original_glyph=grid.glyph(row, col),
        current_glyph=rng.choice(char_set),
        phase=Phase.ACTIVE,
        max_age=max(1, max_age),
    )


def new_spread_unit(grid: Grid, position: Position, spread_radius: int) -> AnimatedUnit:
    row, col = position
    glyph = grid.glyph(row, col)
    return AnimatedUnit(
        row=row,
        col=col,
        original_glyph=glyph,
        current_glyph=glyph,
        phase=Phase.GROWING,
        max_age=max(1, spread_radius),
    )


def _advance_pulse(unit: AnimatedUnit) -> None:
    unit.pulse_position += unit.pulse_direction * unit.pulse_speed
    if unit.pulse_position >= 1:
        unit.pulse_direction = -1
        unit.pulse_position = 1.0
    elif unit.pulse_position <= 0:
        unit.pulse_direction = 1
        unit.pulse_position = 0.0


def step_active(
    unit: AnimatedUnit,
    palette: Sequence[str],
    char_set: str,
    rng: random.Random,
    fade_steps: int,
) -> Cell:
    """Scramble and pulse an active unit for one tick."""
    _advance_pulse(unit)
    unit.age += 1
    unit.current_glyph = rng.choice(char_set)
    cell = Cell(unit.current_glyph, pulse_color(unit.pulse_position, palette))
    if unit.age >= unit.max_age:
        unit.begin_fade(fade_steps)
    return cell


def _fade_glyph(unit: AnimatedUnit, scrambled: str, original: str) -> str:
    # Two-stage reveal: scrambled glyph for the first half, original after.
    return scrambled if unit.fade_progress < 0.5 else original


def _finish_fade_step(unit: AnimatedUnit) -> None:
    unit.fade_step += 1
    if unit.fade_step >= unit.fade_total_steps:
        unit.transition(Phase.REMOVED)


def step_fading(unit: AnimatedUnit, palette: Sequence[str]) -> Optional[Cell]:
    """Fade a single-cell unit one step toward white and its original glyph.

    Returns None when the base color can't be faded; the cell then renders
    untouched for this tick.
    """
    base = pulse_color(unit.pulse_position, palette)
    color = fade_toward_white(base, unit.fade_step, unit.fade_total_steps)
    glyph = _fade_glyph(unit, unit.current_glyph, unit.original_glyph)
    _finish_fade_step(unit)
    if color is None:
        return None
    return Cell(glyph, color)


def step_growing(
    unit: AnimatedUnit,
    grid: Grid,
    palette: Sequence[str],
    char_set: str,
    rng: random.Random,
    fade_steps: int,
) -> Dict[Position, Cell]:
    """Grow a spreading unit's radius by one and scramble its neighborhood.

    Cells at distance ``d`` change with probability ``1 - d / (radius + 1)``
    and are colored brightest at the center.
    """
    unit.age += 1
    radius = unit.age
    unit.footprint = []
    cells: Dict[Position, Cell] = {}
    for r, c, distance in grid.neighborhood(unit.row, unit.col, radius):
        if rng.random() < 1 - distance / (radius + 1):
            glyph = rng.choice(char_set)
            color = distance_color(distance, radius, palette)
            unit.footprint.append(FootprintCell(r, c, glyph, color))
            cells[(r, c)] = Cell(glyph, color)
    if unit.age >= unit.max_age:
        unit.begin_fade(fade_steps)
    return cells


def step_footprint_fade(unit: AnimatedUnit, grid: Grid) -> Dict[Position, Cell]:
    """Fade every footprint cell of a spreading unit with the unit's shared step."""
    cells: Dict[Position, Cell] = {}
    for fp in unit.footprint:
        color = fade_toward_white(fp.color, unit.fade_step, unit.fade_total_steps)
        if color is None:
            continue
        cells[(fp.row, fp.col)] = Cell(_fade_glyph(unit, fp.glyph, grid.glyph(fp.row, fp.col)), color)
    _finish_fade_step(unit)
    return cells


def occupied_positions(units: Sequence[AnimatedUnit]) -> List[Tuple[int, int]]:
    return [unit.position for unit in units if unit.is_live]
