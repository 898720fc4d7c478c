"""Radial-spread: bursts grow outward from random points, then fade as a group."""

from __future__ import annotations

from typing import Dict

from glyphscramble.config.schema import EffectKind, RadialSpreadConfig
from glyphscramble.grid import Position
from glyphscramble.lifecycle import AnimatedUnit, Cell, Phase, new_spread_unit, step_footprint_fade, step_growing
from glyphscramble.variants.base import UnitPoolVariant


class RadialSpread(UnitPoolVariant):
    """Each point widens its Manhattan radius by one per tick.

    Closer cells scramble more often and glow brighter. Once the radius hits
    ``spread_radius`` the cells touched on the last growth step fade toward
    white together, and a replacement point is scheduled when the fade ends.
    """

    kind = EffectKind.RADIAL_SPREAD
    config_class = RadialSpreadConfig
    config: RadialSpreadConfig

    @property
    def max_units(self) -> int:
        return self.config.max_active_points

    @property
    def min_separation(self) -> float:
        return self.config.min_separation

    def pause_ms(self) -> int:
        low, high = self.config.pause_range
        return self.rng.randint(low, high)

    def new_unit(self, position: Position) -> AnimatedUnit:
        return new_spread_unit(self.grid, position, self.config.spread_radius)

    def advance(self, unit: AnimatedUnit) -> Dict[Position, Cell]:
        if unit.phase is Phase.GROWING:
            return step_growing(
                unit, self.grid, self.config.colors, self.config.char_set, self.rng, self.config.fade_steps
            )
        if unit.phase is Phase.FADING:
            return step_footprint_fade(unit, self.grid)
        return {}
