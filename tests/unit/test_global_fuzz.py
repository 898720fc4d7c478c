"""Unit tests for the global-fuzz effect."""

import random

import pytest

from glyphscramble import ManualTimerHost, create_effect, frame_to_plain
from glyphscramble.config import GlobalFuzzConfig
from glyphscramble.grid import Surface
from glyphscramble.render import LINE_BREAK
from glyphscramble.variants import GlobalFuzz


def _fuzz(text, **options):
    return GlobalFuzz(text, Surface(), GlobalFuzzConfig(**options), random.Random(8))


@pytest.mark.unit
def test_preserves_line_structure():
    fuzz = _fuzz("ab\n\n  cd  \nefg")
    frame = fuzz.render()
    assert [sum(len(seg.text) for seg in row) for row in frame] == [2, 0, 2, 3]
    assert all(seg.color for row in frame for seg in row)


@pytest.mark.unit
def test_fixed_char_count_without_line_breaks():
    fuzz = _fuzz("ab\ncd", preserve_line_breaks=False, char_count=30)
    frame = fuzz.render()
    assert len(frame) == 1
    assert len(frame_to_plain(frame)) == 30


@pytest.mark.unit
def test_changes_at_most_rate_share_per_tick():
    fuzz = _fuzz("x" * 50, change_rate=0.1)
    assert fuzz.change_count == 5
    before = list(fuzz.cells)
    fuzz.step()
    changed = sum(1 for old, new in zip(before, fuzz.cells) if old is not new)
    assert 1 <= changed <= 5


@pytest.mark.unit
def test_at_least_one_change_for_tiny_text():
    assert _fuzz("ab", change_rate=0.0).change_count == 1


@pytest.mark.unit
def test_line_breaks_never_change():
    fuzz = _fuzz("a\nb\nc", change_rate=1.0)
    for _ in range(20):
        fuzz.step()
    assert [cell.glyph for cell in fuzz.cells][1::2] == [LINE_BREAK, LINE_BREAK]


@pytest.mark.unit
def test_effect_ticks_and_resets():
    timers = ManualTimerHost()
    effect = create_effect("global_fuzz", "hello\nworld", timers=timers, seed=4)
    assert frame_to_plain(effect.last_frame).count("\n") == 1
    timers.advance(100)
    assert effect.frame_count == 1
    effect.reset()
    assert len(effect.variant.cells) == 11
