"""Turn grids and overlays into colored text segments.

A frame is a list of rows; each row is a list of ``Segment`` runs where
neighbouring characters with the same color are merged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from rich.style import Style
from rich.text import Text

from glyphscramble.lifecycle import Cell

LINE_BREAK = "\n"


@dataclass(frozen=True)
class Segment:
    text: str
    color: Optional[str] = None


Row = List[Segment]
Frame = List[Row]


def _merge(cells: Iterable[Tuple[str, Optional[str]]]) -> Row:
    row: Row = []
    current_text = ""
    current_color: Optional[str] = None
    for glyph, color in cells:
        if current_text and color != current_color:
            row.append(Segment(current_text, current_color))
            current_text = ""
        current_color = color
        current_text += glyph
    if current_text:
        row.append(Segment(current_text, current_color))
    return row


def render_grid(rows: Sequence[Sequence[str]], overlay: Mapping[Tuple[int, int], Cell]) -> Frame:
    """Apply a sparse (row, col) overlay to base rows and group color runs."""
    frame: Frame = []
    for r, base_row in enumerate(rows):
        cells = []
        for c, glyph in enumerate(base_row):
            cell = overlay.get((r, c))
            cells.append((cell.glyph, cell.color) if cell is not None else (glyph, None))
        frame.append(_merge(cells))
    return frame


def render_cells(cells: Sequence[Cell]) -> Frame:
    """Render a flat cell sequence, starting a new row at every line break cell."""
    if not cells:
        return []
    frame: Frame = []
    pending: List[Tuple[str, Optional[str]]] = []
    for cell in cells:
        if cell.glyph == LINE_BREAK:
            frame.append(_merge(pending))
            pending = []
        else:
            pending.append((cell.glyph, cell.color))
    frame.append(_merge(pending))
    return frame


def frame_to_plain(frame: Frame) -> str:
    return "\n".join("".join(segment.text for segment in row) for row in frame)


def frame_to_text(frame: Frame) -> Text:
    """Convert a frame into a Rich Text renderable."""
    text = Text()
    for index, row in enumerate(frame):
        if index:
            text.append("\n")
        for segment in row:
            text.append(segment.text, style=Style(color=segment.color) if segment.color else None)
    return text
