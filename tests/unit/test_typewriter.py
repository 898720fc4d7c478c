"""Unit tests for the typewriter effect."""

import random

import pytest

from glyphscramble import ManualTimerHost, create_effect, frame_to_plain
from glyphscramble.config import TypewriterConfig
from glyphscramble.grid import Surface
from glyphscramble.variants import Typewriter
from glyphscramble.variants.typewriter import Direction


def _typewriter(text="", **options):
    return Typewriter(text, Surface(), TypewriterConfig(**options), random.Random(13))


@pytest.mark.unit
def test_types_waits_erases_and_moves_on():
    writer = _typewriter(messages=("ab", "cd"), step=0, delay_between_messages=1, tail_length=5)
    plains = [frame_to_plain(writer.step()) for _ in range(8)]

    assert plains[0][0] == "a" and len(plains[0]) == 2
    assert plains[1] == "ab"
    # Delay tick, then the direction flips.
    assert plains[2] == "ab"
    assert plains[3] == "ab"
    assert writer.message_index == 0
    assert plains[4][0] == "a" and len(plains[4]) == 2
    assert len(plains[5]) == 2
    # Erased: the next message starts.
    assert writer.message_index == 1
    assert writer.direction is Direction.FORWARD
    assert plains[7][0] == "c"


@pytest.mark.unit
def test_step_slows_the_cursor():
    writer = _typewriter(messages=("abc",), step=2, tail_length=0)
    plains = [frame_to_plain(writer.step()) for _ in range(6)]
    assert plains == ["", "", "a", "a", "a", "ab"]


@pytest.mark.unit
def test_tail_never_longer_than_remaining_text():
    writer = _typewriter(messages=("abcdef",), step=0, tail_length=3)
    lengths = [len(frame_to_plain(writer.step())) for _ in range(6)]
    assert lengths == [4, 5, 6, 6, 6, 6]


@pytest.mark.unit
def test_source_text_is_the_default_message():
    writer = _typewriter("hi", step=0, tail_length=0)
    writer.step()
    assert frame_to_plain(writer.step()) == "hi"


@pytest.mark.unit
def test_randomized_messages_stay_in_range():
    writer = _typewriter(messages=("a", "b", "c"), step=0, delay_between_messages=0, randomize_messages=True)
    for _ in range(50):
        writer.step()
        assert 0 <= writer.message_index < 3


@pytest.mark.unit
def test_effect_reset_starts_over():
    timers = ManualTimerHost()
    effect = create_effect("typewriter", "hello", config={"step": 0}, timers=timers, seed=1)
    timers.advance(80 * 3)
    assert effect.variant.text == "hel"
    effect.reset()
    assert effect.variant.text == ""
    assert effect.last_frame == []
