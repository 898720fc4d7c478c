"""Public package surface."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from loguru import logger

from glyphscramble.config import EffectKind
from glyphscramble.engine import EffectInstance, create_effect
from glyphscramble.grid import Surface, format_grid, generate_random_text
from glyphscramble.render import Frame, Segment, frame_to_plain, frame_to_text
from glyphscramble.timers import AsyncioTimerHost, ManualTimerHost

# Library logging stays silent until an application opts in.
logger.disable("glyphscramble")


try:
    __version__ = version("glyph-scramble")
except PackageNotFoundError:
    # Running from a source checkout without an install.
    __version__ = "0.0.0+unknown"

__all__ = [
    "AsyncioTimerHost",
    "EffectInstance",
    "EffectKind",
    "Frame",
    "ManualTimerHost",
    "Segment",
    "Surface",
    "__version__",
    "create_effect",
    "format_grid",
    "frame_to_plain",
    "frame_to_text",
    "generate_random_text",
]
