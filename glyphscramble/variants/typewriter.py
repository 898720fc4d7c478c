"""Typewriter: messages are typed out and erased behind a trail of noise."""

from __future__ import annotations

import random
from enum import Enum
from typing import List, Tuple

from glyphscramble.colors import random_color
from glyphscramble.config.schema import EffectKind, TypewriterConfig
from glyphscramble.grid import Surface
from glyphscramble.lifecycle import Cell
from glyphscramble.render import Frame, render_cells
from glyphscramble.variants.base import EffectVariant


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class Typewriter(EffectVariant):
    """Cycles through messages one character at a time.

    Every ``step + 1`` ticks the cursor either types the next character,
    waits out ``delay_between_messages`` at the end of a message, deletes a
    character, or moves on to the next message. Every tick the typed text is
    followed by up to ``tail_length`` random glyphs, never more than the
    characters still left to type.
    """

    kind = EffectKind.TYPEWRITER
    config_class = TypewriterConfig
    config: TypewriterConfig

    def __init__(self, source_text: str, surface: Surface, config: TypewriterConfig, rng: random.Random) -> None:
        super().__init__(source_text, surface, config, rng)
        messages = config.messages or (source_text,)
        self.messages: Tuple[str, ...] = tuple(message for message in messages if message)
        self._tail: List[Cell] = []
        self._init_state()

    def _init_state(self) -> None:
        self.text = ""
        self.message_index = 0
        self.char_index = 0
        self.direction = Direction.FORWARD
        self.delay = self.config.delay_between_messages
        self.countdown = self.config.step
        self._tail = []

    @property
    def is_empty(self) -> bool:
        return not self.messages

    @property
    def message(self) -> str:
        return self.messages[self.message_index]

    def _next_message_index(self) -> int:
        if self.config.randomize_messages:
            return self.rng.randrange(len(self.messages))
        return (self.message_index + 1) % len(self.messages)

    def _advance_cursor(self, message: str) -> None:
        if self.direction is Direction.FORWARD:
            if self.char_index < len(message):
                self.text += message[self.char_index]
                self.char_index += 1
            elif self.delay:
                self.delay -= 1
            else:
                self.direction = Direction.BACKWARD
                self.delay = self.config.delay_between_messages
        elif self.char_index > 0:
            self.text = self.text[:-1]
            self.char_index -= 1
        else:
            self.message_index = self._next_message_index()
            self.direction = Direction.FORWARD

    def step(self) -> Frame:
        if self.is_empty:
            return []
        message = self.message
        if self.countdown:
            self.countdown -= 1
        else:
            self.countdown = self.config.step
            self._advance_cursor(message)

        tail = min(self.config.tail_length, len(self.message) - self.char_index)
        self._tail = [
            Cell(self.random_glyph(), random_color(self.config.colors, self.rng)) for _ in range(max(0, tail))
        ]
        return self.render()

    def render(self) -> Frame:
        if self.is_empty:
            return []
        return render_cells([Cell(glyph) for glyph in self.text] + self._tail)

    def reset(self) -> None:
        self._init_state()
