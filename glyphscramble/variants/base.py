"""Base classes for glyph-scramble effect variants."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Dict, List, Optional, Protocol, Type

from loguru import logger

from glyphscramble.config.schema import EffectConfig, EffectKind
from glyphscramble.grid import Grid, Position, Surface, format_grid
from glyphscramble.lifecycle import AnimatedUnit, Cell, Phase, occupied_positions
from glyphscramble.positions import select_position
from glyphscramble.render import Frame, render_grid


class SpawnHost(Protocol):
    """What a variant needs from its owning effect instance."""

    def schedule_spawn(self, delay_ms: float, callback: Callable[[], None]) -> None: ...

    @property
    def pending_spawns(self) -> int: ...


class EffectVariant(ABC):
    """Abstract base class for all effect variants.

    A variant owns the effect state and knows how to advance it by one tick.
    Timers belong to the effect instance; a variant only asks it for delayed
    spawn callbacks through ``host``.
    """

    kind: ClassVar[EffectKind]
    config_class: ClassVar[Type[EffectConfig]]

    def __init__(self, source_text: str, surface: Surface, config: EffectConfig, rng: random.Random) -> None:
        """
        Args:
            source_text: Text the effect scrambles.
            surface: Render area used for grid sizing.
            config: Validated options for this variant.
            rng: Random source for positions, glyphs and colors.
        """
        self.source_text = source_text
        self.surface = surface.normalized()
        self.config = config
        self.rng = rng
        self.host: Optional[SpawnHost] = None

    @property
    @abstractmethod
    def is_empty(self) -> bool:
        """True when there is nothing to animate."""

    @property
    def live_units(self) -> int:
        return 0

    @property
    def max_units(self) -> int:
        return 0

    def begin(self, host: SpawnHost) -> None:
        """Attach to the owning instance and start any initial spawning."""
        self.host = host

    @abstractmethod
    def step(self) -> Frame:
        """Advance the effect by one tick and return the new frame."""

    @abstractmethod
    def render(self) -> Frame:
        """Frame for the current state, without advancing."""

    @abstractmethod
    def reset(self) -> None:
        """Return to the initial state, keeping the configuration."""

    def random_glyph(self) -> str:
        return self.rng.choice(self.config.char_set)


class UnitPoolVariant(EffectVariant):
    """Grid effect built from independently spawned and retired units.

    Each tick advances every live unit once, composes their cells into a
    sparse overlay over the immutable base grid and drops units that reached
    REMOVED. Every removal schedules a replacement after a random pause, and
    a spawn chain keeps topping the pool up to ``fill_target``.
    """

    def __init__(self, source_text: str, surface: Surface, config: EffectConfig, rng: random.Random) -> None:
        super().__init__(source_text, surface, config, rng)
        self.grid: Grid = format_grid(source_text, self.surface.width_px)
        self.units: List[AnimatedUnit] = []
        self._overlay: Dict[Position, Cell] = {}

    @property
    def is_empty(self) -> bool:
        return self.grid.is_empty

    @property
    def live_units(self) -> int:
        return sum(1 for unit in self.units if unit.is_live)

    @property
    def fill_target(self) -> int:
        """Pool size the spawn chain keeps topping up to."""
        return self.max_units

    @property
    @abstractmethod
    def min_separation(self) -> float:
        """Minimum Manhattan distance between unit anchors (best effort)."""

    @abstractmethod
    def pause_ms(self) -> int:
        """Random delay before the next spawn."""

    @abstractmethod
    def new_unit(self, position: Position) -> AnimatedUnit: ...

    @abstractmethod
    def advance(self, unit: AnimatedUnit) -> Dict[Position, Cell]:
        """Step one unit and return the cells it shows this tick."""

    def begin(self, host: SpawnHost) -> None:
        super().begin(host)
        self.replenish()

    def replenish(self) -> None:
        # A dropped spawn ends the chain; the periodic check in step() retries.
        if self.spawn_one() is None:
            return
        if self.live_units < self.fill_target:
            self.schedule_replenish()

    def schedule_replenish(self) -> None:
        """Queue one spawn unless live plus queued units already reach ``max_units``."""
        if self.host is None or self.is_empty:
            return
        if self.live_units + self.host.pending_spawns >= self.max_units:
            return
        self.host.schedule_spawn(self.pause_ms(), self.replenish)

    def spawn_one(self) -> Optional[AnimatedUnit]:
        if self.is_empty or self.live_units >= self.max_units:
            return None
        position = select_position(self.grid, occupied_positions(self.units), self.min_separation, self.rng)
        if position is None:
            logger.debug("Spawn dropped, no free cell", kind=self.kind.value, live=self.live_units)
            return None
        unit = self.new_unit(position)
        self.units.append(unit)
        logger.debug("Unit spawned", kind=self.kind.value, row=unit.row, col=unit.col, phase=unit.phase.name)
        return unit

    def step(self) -> Frame:
        overlay: Dict[Position, Cell] = {}
        for unit in self.units:
            overlay.update(self.advance(unit))

        removed = [unit for unit in self.units if unit.phase is Phase.REMOVED]
        self.units = [unit for unit in self.units if unit.is_live]
        for _ in removed:
            self.schedule_replenish()

        # Recover from dropped spawns once nothing else is queued.
        if self.host is not None and self.live_units < self.fill_target and self.host.pending_spawns == 0:
            self.schedule_replenish()

        self._overlay = overlay
        return self.render()

    def render(self) -> Frame:
        return render_grid(self.grid.rows, self._overlay)

    def reset(self) -> None:
        self.units = []
        self._overlay = {}
