"""Sprinkle: a few random characters of the untouched text are swapped each tick."""

from __future__ import annotations

import math
import random
from typing import Dict

from glyphscramble.colors import random_color
from glyphscramble.config.schema import EffectKind, SprinkleConfig
from glyphscramble.grid import Surface
from glyphscramble.lifecycle import Cell
from glyphscramble.render import LINE_BREAK, Frame, render_cells
from glyphscramble.variants.base import EffectVariant

_SKIPPED = (" ", LINE_BREAK)


class Sprinkle(EffectVariant):
    kind = EffectKind.SPRINKLE
    config_class = SprinkleConfig
    config: SprinkleConfig

    def __init__(self, source_text: str, surface: Surface, config: SprinkleConfig, rng: random.Random) -> None:
        super().__init__(source_text, surface, config, rng)
        self._overlay: Dict[int, Cell] = {}

    @property
    def is_empty(self) -> bool:
        return not self.source_text

    @property
    def replace_count(self) -> int:
        return max(self.config.min_fragments, math.floor(len(self.source_text) * self.config.density))

    def step(self) -> Frame:
        if self.is_empty:
            return []
        overlay: Dict[int, Cell] = {}
        for _ in range(self.replace_count):
            index = self.rng.randrange(len(self.source_text))
            if self.source_text[index] in _SKIPPED:
                continue
            overlay[index] = Cell(self.random_glyph(), random_color(self.config.colors, self.rng))
        self._overlay = overlay
        return self.render()

    def render(self) -> Frame:
        if self.is_empty:
            return []
        return render_cells([self._overlay.get(i) or Cell(glyph) for i, glyph in enumerate(self.source_text)])

    def reset(self) -> None:
        self._overlay = {}
