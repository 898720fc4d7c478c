"""Character grid layout for grid-based effects."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

# Fallbacks used when the surface reports no size (unmounted or hidden).
DEFAULT_SURFACE_WIDTH_PX = 128
DEFAULT_SURFACE_HEIGHT_PX = 100

ESTIMATED_CHAR_WIDTH_PX = 8
MIN_COLUMNS = 8

_WHITESPACE = re.compile(r"\s+")

Position = Tuple[int, int]


@dataclass(frozen=True)
class Surface:
    """Size of the area an effect renders into."""

    width_px: int = DEFAULT_SURFACE_WIDTH_PX
    height_px: int = DEFAULT_SURFACE_HEIGHT_PX

    def normalized(self) -> "Surface":
        """Replace zero or negative dimensions with the default fallbacks."""
        return Surface(
            width_px=self.width_px if self.width_px > 0 else DEFAULT_SURFACE_WIDTH_PX,
            height_px=self.height_px if self.height_px > 0 else DEFAULT_SURFACE_HEIGHT_PX,
        )


@dataclass(frozen=True)
class Grid:
    """Immutable rectangular-ish grid of single characters.

    Every row holds ``columns`` characters except possibly the last one.
    """

    rows: Tuple[Tuple[str, ...], ...]
    columns: int

    # Cached position list
    _positions: Optional[List[Position]] = field(default=None, init=False, repr=False, compare=False)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def cell_count(self) -> int:
        return sum(len(row) for row in self.rows)

    @property
    def is_empty(self) -> bool:
        return self.cell_count == 0

    def glyph(self, row: int, col: int) -> str:
        return self.rows[row][col]

    def positions(self) -> List[Position]:
        if self._positions is None:
            object.__setattr__(
                self, "_positions", [(r, c) for r, row in enumerate(self.rows) for c in range(len(row))]
            )
        return self._positions  # type: ignore[return-value]

    def neighborhood(self, row: int, col: int, radius: int) -> Iterator[Tuple[int, int, int]]:
        """Yield (row, col, manhattan_distance) for cells within ``radius`` of a point."""
        for r in range(max(0, row - radius), min(len(self.rows) - 1, row + radius) + 1):
            width = len(self.rows[r])
            for c in range(max(0, col - radius), min(width - 1, col + radius) + 1):
                distance = abs(r - row) + abs(c - col)
                if distance <= radius:
                    yield r, c, distance


def strip_whitespace(text: str) -> str:
    return _WHITESPACE.sub("", text)


def column_count(
    surface_width_px: int,
    estimated_char_width_px: int = ESTIMATED_CHAR_WIDTH_PX,
    min_columns: int = MIN_COLUMNS,
) -> int:
    if surface_width_px <= 0:
        surface_width_px = DEFAULT_SURFACE_WIDTH_PX
    if estimated_char_width_px <= 0:
        return min_columns
    return max(min_columns, surface_width_px // estimated_char_width_px)


def format_grid(
    text: str,
    surface_width_px: int,
    estimated_char_width_px: int = ESTIMATED_CHAR_WIDTH_PX,
    min_columns: int = MIN_COLUMNS,
) -> Grid:
    """Chunk whitespace-free text into rows that fit the surface width.

    Args:
        text: Source text; all whitespace is removed first.
        surface_width_px: Width of the render surface in pixels.
        estimated_char_width_px: Approximate monospace glyph width.
        min_columns: Lower bound on the number of columns.

    Returns:
        A Grid with ``columns`` characters per row; the last row may be shorter.
        Empty text yields a grid with zero rows.
    """
    clean = strip_whitespace(text)
    columns = column_count(surface_width_px, estimated_char_width_px, min_columns)
    rows = tuple(tuple(clean[i : i + columns]) for i in range(0, len(clean), columns))
    return Grid(rows=rows, columns=columns)


def generate_random_text(length: int, char_set: str, rng: random.Random) -> str:
    """String of ``length`` glyphs drawn uniformly from ``char_set``."""
    if length <= 0 or not char_set:
        return ""
    return "".join(rng.choice(char_set) for _ in range(length))
