"""Linear-scan: scrambled tails travel through the text and wrap around."""

from __future__ import annotations

import random
from typing import Dict, List

from glyphscramble.colors import tail_color
from glyphscramble.config.schema import EffectKind, LinearScanConfig
from glyphscramble.grid import Surface, strip_whitespace
from glyphscramble.lifecycle import Cell
from glyphscramble.render import LINE_BREAK, Frame, render_cells
from glyphscramble.variants.base import EffectVariant


class LinearScan(EffectVariant):
    """Two cursors sweep the text in opposite directions.

    ``forward`` starts on the first character and ``backward`` on the last.
    Each tick the ``tail_length`` cells starting at a cursor (in its direction
    of travel) show random glyphs on a gradient that is brightest at the
    cursor, then both cursors move ``travel_speed`` cells. Cells outside the
    tails show the original text again; nothing lingers.
    """

    kind = EffectKind.LINEAR_SCAN
    config_class = LinearScanConfig
    config: LinearScanConfig

    def __init__(self, source_text: str, surface: Surface, config: LinearScanConfig, rng: random.Random) -> None:
        super().__init__(source_text, surface, config, rng)
        if config.preserve_layout:
            self.structure: List[str] = list(source_text)
        else:
            self.structure = list(strip_whitespace(source_text))
        # Linear position -> index into structure, skipping line breaks.
        self.positions: List[int] = [i for i, glyph in enumerate(self.structure) if glyph != LINE_BREAK]
        self.forward = 0
        self.backward = len(self.positions) - 1
        self._overlay: Dict[int, Cell] = {}

    @property
    def is_empty(self) -> bool:
        return not self.positions

    @property
    def length(self) -> int:
        return len(self.positions)

    def _paint_tail(self, overlay: Dict[int, Cell], head: int, direction: int) -> None:
        tail = self.config.tail_length
        for offset in range(tail):
            linear = (head + direction * offset) % self.length
            color = tail_color(tail - offset, tail, self.config.colors)
            overlay[self.positions[linear]] = Cell(self.random_glyph(), color)

    def step(self) -> Frame:
        if self.is_empty:
            return []
        overlay: Dict[int, Cell] = {}
        self._paint_tail(overlay, self.forward, 1)
        if self.config.bidirectional:
            self._paint_tail(overlay, self.backward, -1)

        speed = self.config.travel_speed
        self.forward = (self.forward + speed) % self.length
        if self.config.bidirectional:
            self.backward = (self.backward - speed) % self.length

        self._overlay = overlay
        return self.render()

    def render(self) -> Frame:
        if self.is_empty:
            return []
        return render_cells([self._overlay.get(i) or Cell(glyph) for i, glyph in enumerate(self.structure)])

    def reset(self) -> None:
        self.forward = 0
        self.backward = len(self.positions) - 1
        self._overlay = {}
