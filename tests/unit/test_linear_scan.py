"""Unit tests for the linear-scan effect."""

import random

import pytest

from glyphscramble import ManualTimerHost, create_effect, frame_to_plain
from glyphscramble.config import LinearScanConfig
from glyphscramble.grid import Surface
from glyphscramble.variants import LinearScan


def _scan(text, **options):
    return LinearScan(text, Surface(), LinearScanConfig(**options), random.Random(6))


@pytest.mark.unit
def test_cursor_wraps_modulo_length():
    scan = _scan("ABCDEFGHIJ", travel_speed=3, bidirectional=False)
    scan.step()
    assert scan.forward == 3
    for _ in range(3):
        scan.step()
    assert scan.forward == 2


@pytest.mark.unit
def test_backward_cursor_starts_at_end_and_wraps():
    scan = _scan("ABCDEFGHIJ", travel_speed=4)
    assert scan.backward == 9
    scan.step()
    assert scan.backward == 5
    scan.step()
    scan.step()
    assert scan.backward == 7


@pytest.mark.unit
def test_tail_covers_cells_ahead_of_cursor():
    scan = _scan("ABCDEFGHIJ", tail_length=3, bidirectional=False)
    frame = scan.step()
    plain = frame_to_plain(frame)
    assert plain[3:] == "DEFGHIJ"
    colored = [seg for row in frame for seg in row if seg.color]
    assert sum(len(seg.text) for seg in colored) == 3


@pytest.mark.unit
def test_tail_is_brightest_at_cursor():
    palette = ("#000000", "#555555", "#aaaaaa", "#ffffff")
    scan = _scan("ABCDEFGHIJ", tail_length=4, bidirectional=False, colors=palette)
    scan.step()
    assert scan._overlay[0].color == "#ffffff"
    assert scan._overlay[3].color == "#555555"


@pytest.mark.unit
def test_cells_behind_the_tail_revert():
    scan = _scan("ABCDEFGHIJ", tail_length=2, bidirectional=False)
    scan.step()
    frame = scan.step()
    plain = frame_to_plain(frame)
    assert plain[0] == "A"
    assert plain[4:] == "EFGHIJ"


@pytest.mark.unit
def test_whitespace_is_stripped_unless_layout_preserved():
    assert _scan("AB CD\nEF").length == 6
    scan = _scan("AB CD\nEF", preserve_layout=True, tail_length=1, bidirectional=False)
    # The space is a scannable cell; the line break is skipped.
    assert scan.length == 7
    frame = scan.step()
    assert len(frame) == 2
    assert frame_to_plain(frame)[1:] == "B CD\nEF"


@pytest.mark.unit
def test_effect_resets_cursors():
    timers = ManualTimerHost()
    effect = create_effect("linear_scan", "ABCDEFGHIJ", config={"travelSpeed": 3}, timers=timers, seed=1)
    timers.advance(80 * 2)
    assert effect.variant.forward == 6
    effect.reset()
    assert effect.variant.forward == 0
    assert effect.variant.backward == 9
    assert frame_to_plain(effect.last_frame) == "ABCDEFGHIJ"
