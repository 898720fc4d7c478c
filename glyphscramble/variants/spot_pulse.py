"""Spot-pulse: single cells flicker through random glyphs, then fade back."""

from __future__ import annotations

from typing import Dict

from glyphscramble.config.schema import EffectKind, SpotPulseConfig
from glyphscramble.grid import Position
from glyphscramble.lifecycle import AnimatedUnit, Cell, Phase, new_pulse_unit, step_active, step_fading
from glyphscramble.variants.base import UnitPoolVariant


class SpotPulse(UnitPoolVariant):
    kind = EffectKind.SPOT_PULSE
    config_class = SpotPulseConfig
    config: SpotPulseConfig

    @property
    def max_units(self) -> int:
        return self.config.active_range[1]

    @property
    def fill_target(self) -> int:
        return self.config.active_range[0]

    @property
    def min_separation(self) -> float:
        # Distinct cells only; spot units may sit side by side.
        return 1

    def pause_ms(self) -> int:
        low, high = self.config.pause_range
        return self.rng.randint(low, high)

    def new_unit(self, position: Position) -> AnimatedUnit:
        low, high = self.config.change_range
        return new_pulse_unit(self.grid, position, self.rng.randint(low, high), self.rng, self.config.char_set)

    def advance(self, unit: AnimatedUnit) -> Dict[Position, Cell]:
        if unit.phase is Phase.ACTIVE:
            cell = step_active(unit, self.config.colors, self.config.char_set, self.rng, self.config.fade_steps)
            return {unit.position: cell}
        if unit.phase is Phase.FADING:
            cell = step_fading(unit, self.config.colors)
            return {unit.position: cell} if cell is not None else {}
        return {}
