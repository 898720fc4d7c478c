"""Color palette management for glyph-scramble effects.

Palettes are ordered lists of ``#rrggbb`` strings. Colors returned here are
plain hex strings that can be dropped straight into a Rich ``Style``.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence

# ---------------------------------------------------------------------------
# 24-bit TrueColor utilities
# ---------------------------------------------------------------------------


def hex_to_rgb(hex_str: str) -> tuple[int, int, int]:
    """Convert #RRGGBB hex string to (r, g, b) integer tuple.

    Raises:
        ValueError: If the string is not exactly six hex digits after the ``#``.
    """
    h = hex_str.lstrip("#")
    if len(h) != 6:
        raise ValueError(f"Expected 6 hex digits, got {hex_str!r}")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert (r, g, b) integers to #RRGGBB string."""
    return f"#{r:02x}{g:02x}{b:02x}"


def pulse_color(position: float, palette: Sequence[str]) -> str:
    """Map a pulse position in [0, 1] onto the palette through a sine wave.

    The wave is a half-period of sine shifted onto [0, 1]: position 0 picks
    the first entry, 0.5 the middle one and 1 the last, easing in and out at
    both ends.
    """
    position = max(0.0, min(1.0, position))
    # Shifted half-period: plain sin(p * pi) never drops below the middle entry, so 0 must map to palette[0].
    wave = (math.sin((position - 0.5) * math.pi) + 1) / 2
    index = math.floor(wave * (len(palette) - 1))
    return palette[index]


def fade_toward_white(color: str, step: int, total_steps: int) -> Optional[str]:
    """Blend a hex color linearly toward white.

    Args:
        color: Start color as #RRGGBB.
        step: Current fade step; 0 returns the color unchanged.
        total_steps: Number of steps until white is reached.

    Returns:
        The blended #RRGGBB string, or None when the color can't be parsed
        or the step count is unusable.
    """
    try:
        r, g, b = hex_to_rgb(color)
    except (ValueError, TypeError, AttributeError):
        return None
    if total_steps <= 0:
        return None

    # Integer floor division keeps the final step exactly on 255.
    def _channel(value: int) -> int:
        return min(255, value + (step * (255 - value)) // total_steps)

    return rgb_to_hex(_channel(r), _channel(g), _channel(b))


def tail_color(position: int, tail_length: int, palette: Sequence[str]) -> str:
    """Linear gradient lookup for scan tails; higher positions are brighter."""
    index = math.floor((position / tail_length) * len(palette))
    return palette[min(index, len(palette) - 1)]


def distance_color(distance: int, max_distance: int, palette: Sequence[str]) -> str:
    """Palette lookup keyed to distance from a burst center (brightest at center)."""
    if max_distance <= 0:
        return palette[-1]
    index = math.floor(((max_distance - distance) / max_distance) * len(palette))
    return palette[max(0, min(len(palette) - 1, index))]


def random_color(palette: Sequence[str], rng: random.Random) -> str:
    return palette[rng.randrange(len(palette))]


# Nine-step grey ramp, darkest first. Pulse and gradient lookups treat the
# last entry as the brightest.
GRAYSCALE = (
    "#666666",
    "#777777",
    "#888888",
    "#999999",
    "#aaaaaa",
    "#bbbbbb",
    "#cccccc",
    "#dddddd",
    "#ffffff",
)

FUZZ_GRAYS = ("#8f8f8f", "#a0a0a0", "#b0b0b0", "#ffffff")

# lightgray, gray, darkgray, white
SPRINKLE_GRAYS = ("#d3d3d3", "#808080", "#a9a9a9", "#ffffff")


class HexPalette:
    """Named, ordered palette of hex colors."""

    def __init__(self, name: str, colors: Sequence[str]) -> None:
        if not colors:
            raise ValueError("HexPalette requires at least one color.")
        self.name = name
        self._colors = tuple(colors)

    @property
    def colors(self) -> tuple[str, ...]:
        return self._colors

    def __len__(self) -> int:
        return len(self._colors)


class PaletteRegistry:
    """Registry for available color palettes."""

    def __init__(self) -> None:
        self._palettes: dict[str, HexPalette] = {}

    def register(self, palette: HexPalette) -> None:
        self._palettes[palette.name] = palette

    def get(self, name: str) -> Optional[HexPalette]:
        return self._palettes.get(name)

    def names(self) -> list[str]:
        return sorted(self._palettes)


# Global registry
palette_registry = PaletteRegistry()
palette_registry.register(HexPalette("grayscale", GRAYSCALE))
palette_registry.register(HexPalette("fuzz", FUZZ_GRAYS))
palette_registry.register(HexPalette("sprinkle", SPRINKLE_GRAYS))
palette_registry.register(
    HexPalette("phosphor", ("#0b3d0b", "#145214", "#1e7a1e", "#29a329", "#33cc33", "#66ff66", "#ccffcc"))
)
palette_registry.register(
    HexPalette("amber", ("#4d2600", "#804000", "#b35900", "#e67300", "#ff9933", "#ffcc80", "#fff2e0"))
)
palette_registry.register(HexPalette("ice", ("#1a2a3a", "#2e4a66", "#4a7399", "#6fa0cc", "#a6cfee", "#e0f2ff")))
