"""Global-fuzz: the whole text is replaced by noise that keeps churning."""

from __future__ import annotations

import math
import random
from typing import List

from glyphscramble.colors import random_color
from glyphscramble.config.schema import EffectKind, GlobalFuzzConfig
from glyphscramble.grid import Surface
from glyphscramble.lifecycle import Cell
from glyphscramble.render import LINE_BREAK, Frame, render_cells
from glyphscramble.variants.base import EffectVariant


class GlobalFuzz(EffectVariant):
    """Flat sequence of (glyph, color) cells overwritten at random every tick.

    With ``preserve_line_breaks`` each non-blank source line becomes a run of
    noise as long as the trimmed line, and line breaks stay in place.
    Otherwise the effect is ``char_count`` cells of noise on one line.
    """

    kind = EffectKind.GLOBAL_FUZZ
    config_class = GlobalFuzzConfig
    config: GlobalFuzzConfig

    def __init__(self, source_text: str, surface: Surface, config: GlobalFuzzConfig, rng: random.Random) -> None:
        super().__init__(source_text, surface, config, rng)
        self.cells: List[Cell] = []
        self._init_cells()

    @property
    def is_empty(self) -> bool:
        return not any(cell.glyph != LINE_BREAK for cell in self.cells)

    def _noise(self) -> Cell:
        return Cell(self.random_glyph(), random_color(self.config.colors, self.rng))

    def _init_cells(self) -> None:
        self.cells = []
        if not self.source_text:
            return
        if not self.config.preserve_line_breaks:
            self.cells = [self._noise() for _ in range(self.config.char_count)]
            return

        lines = self.source_text.split("\n")
        for index, line in enumerate(lines):
            trimmed = line.strip()
            if not trimmed:
                self.cells.append(Cell(LINE_BREAK))
                continue
            self.cells.extend(self._noise() for _ in trimmed)
            if index < len(lines) - 1:
                self.cells.append(Cell(LINE_BREAK))

    @property
    def change_count(self) -> int:
        return max(1, math.floor(len(self.cells) * self.config.change_rate))

    def step(self) -> Frame:
        if self.is_empty:
            return []
        for _ in range(self.change_count):
            index = self.rng.randrange(len(self.cells))
            # Picks that land on a line break are spent, not retried.
            if self.cells[index].glyph != LINE_BREAK:
                self.cells[index] = self._noise()
        return self.render()

    def render(self) -> Frame:
        if self.is_empty:
            return []
        return render_cells(self.cells)

    def reset(self) -> None:
        self._init_cells()
