"""Unit tests for frame rendering."""

import pytest

from glyphscramble.lifecycle import Cell
from glyphscramble.render import (
    LINE_BREAK,
    Segment,
    frame_to_plain,
    frame_to_text,
    render_cells,
    render_grid,
)


@pytest.mark.unit
def test_render_grid_applies_overlay_and_merges_runs():
    rows = [tuple("abcd"), tuple("ef")]
    overlay = {(0, 1): Cell("X", "#ffffff"), (0, 2): Cell("Y", "#ffffff"), (1, 1): Cell("Z", "#000000")}
    frame = render_grid(rows, overlay)
    assert frame == [
        [Segment("a"), Segment("XY", "#ffffff"), Segment("d")],
        [Segment("e"), Segment("Z", "#000000")],
    ]
    assert frame_to_plain(frame) == "aXYd\neZ"


@pytest.mark.unit
def test_render_grid_without_overlay_is_source_text():
    frame = render_grid([tuple("HELLOWORLD")], {})
    assert frame == [[Segment("HELLOWORLD")]]


@pytest.mark.unit
def test_render_cells_splits_rows_on_line_breaks():
    cells = [Cell("a", "#111111"), Cell(LINE_BREAK), Cell(LINE_BREAK), Cell("b")]
    frame = render_cells(cells)
    assert frame == [[Segment("a", "#111111")], [], [Segment("b")]]
    assert frame_to_plain(frame) == "a\n\nb"
    assert render_cells([]) == []


@pytest.mark.unit
def test_frame_to_text_styles_colored_segments():
    text = frame_to_text([[Segment("ab"), Segment("c", "#ff0000")], [Segment("d")]])
    assert text.plain == "abc\nd"
    colored = [span for span in text.spans if span.style]
    assert len(colored) == 1
    assert (colored[0].start, colored[0].end) == (2, 3)
    assert colored[0].style.color.name == "#ff0000"
