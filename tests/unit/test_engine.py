"""Unit tests for effect instances: scheduling, reset, stop and crash handling."""

import pytest

from glyphscramble import EffectKind, ManualTimerHost, create_effect, frame_to_plain
from glyphscramble.config import SpotPulseConfig

TEXT = "The quick brown fox jumps over the lazy dog. " * 4


def _spot(timers, **options):
    return create_effect(EffectKind.SPOT_PULSE, TEXT, config=options or None, timers=timers, seed=42)


class TestLifecycle:
    @pytest.mark.unit
    def test_start_arms_tick_and_emits_plain_frame(self):
        frames = []
        timers = ManualTimerHost()
        effect = create_effect("spot_pulse", "HELLO", timers=timers, seed=1, on_frame=frames.append)
        assert effect.is_running
        assert effect.kind is EffectKind.SPOT_PULSE
        assert frame_to_plain(frames[0]) == "HELLO"
        timers.advance(80 * 3)
        assert effect.frame_count == 3
        assert len(frames) == 4

    @pytest.mark.unit
    def test_autostart_false_waits_for_start(self):
        timers = ManualTimerHost()
        effect = create_effect("sprinkle", "HELLO", timers=timers, autostart=False)
        assert not effect.is_running
        assert timers.pending == 0
        effect.start()
        assert timers.pending == 1

    @pytest.mark.unit
    def test_string_and_model_configs(self):
        timers = ManualTimerHost()
        effect = create_effect("spot_pulse", "HELLO", config=SpotPulseConfig(fade_steps=2), timers=timers)
        assert effect.config.fade_steps == 2
        with pytest.raises(ValueError):
            create_effect("wobble", "HELLO", timers=timers)


class TestStop:
    @pytest.mark.unit
    def test_stop_cancels_everything_and_restores(self):
        restored = []
        timers = ManualTimerHost()
        effect = create_effect(EffectKind.SPOT_PULSE, TEXT, timers=timers, seed=3, on_restore=restored.append)
        timers.advance(5000)
        assert timers.pending > 0

        effect.stop()
        assert restored == [TEXT]
        assert timers.pending == 0
        assert effect.pending_spawns == 0
        assert timers.advance(60_000) == 0

    @pytest.mark.unit
    def test_stop_is_idempotent_and_freezes_state(self):
        restored = []
        timers = ManualTimerHost()
        effect = create_effect(EffectKind.RADIAL_SPREAD, TEXT, timers=timers, on_restore=restored.append)
        effect.stop()
        effect.stop()
        assert restored == [TEXT]
        assert effect.update() is None
        effect.reset()
        effect.start()
        assert not effect.is_running
        assert timers.pending == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("kind", list(EffectKind))
    def test_every_variant_restores_on_stop(self, kind):
        restored = []
        timers = ManualTimerHost()
        effect = create_effect(kind, TEXT, timers=timers, seed=9, on_restore=restored.append)
        timers.advance(3000)
        effect.stop()
        assert restored == [TEXT]
        assert timers.pending == 0


class TestReset:
    @pytest.mark.unit
    def test_reset_clears_units_and_respawns(self):
        timers = ManualTimerHost()
        effect = _spot(timers)
        timers.advance(2000)
        assert effect.live_units > 0
        effect.reset()
        # begin() places one unit straight away and queues the rest
        assert effect.live_units == 1
        assert all(segment.color is None for row in effect.last_frame for segment in row)
        assert effect.is_running


class TestInvariants:
    @pytest.mark.unit
    def test_live_units_never_exceed_max(self):
        timers = ManualTimerHost()
        effect = _spot(timers, minPauseDuration=0, maxPauseDuration=10)
        peak = 0
        for _ in range(300):
            timers.advance(80)
            assert effect.live_units <= effect.max_units
            peak = max(peak, effect.live_units)
        assert peak >= effect.config.active_range[0]

    @pytest.mark.unit
    def test_pool_refills_after_units_retire(self):
        timers = ManualTimerHost()
        effect = _spot(timers, minChangeCount=1, maxChangeCount=2, fadeSteps=1)
        timers.advance(80 * 200)
        assert effect.live_units + effect.pending_spawns > 0

    @pytest.mark.unit
    @pytest.mark.parametrize("kind", list(EffectKind))
    def test_empty_text_is_a_no_op(self, kind):
        timers = ManualTimerHost()
        effect = create_effect(kind, "", timers=timers)
        timers.advance(1000)
        assert effect.last_frame == []
        assert effect.live_units == 0
        assert effect.pending_spawns == 0

    @pytest.mark.unit
    def test_concurrent_instances_are_independent(self):
        timers = ManualTimerHost()
        first = _spot(timers)
        second = create_effect(EffectKind.SPOT_PULSE, "another text entirely", timers=timers, seed=1)
        timers.advance(1000)
        first.stop()
        timers.advance(80)
        assert first.is_stopped
        assert second.is_running
        assert second.frame_count == first.frame_count + 1


class TestCrashHandling:
    @pytest.mark.unit
    def test_step_exception_stops_effect(self):
        restored = []
        timers = ManualTimerHost()
        effect = create_effect("linear_scan", "HELLOWORLD", timers=timers, on_restore=restored.append)

        def _boom():
            raise RuntimeError("tick failed")

        effect.variant.step = _boom
        assert effect.update() is None
        assert effect.is_stopped
        assert restored == ["HELLOWORLD"]
        assert timers.pending == 0

    @pytest.mark.unit
    def test_frame_callback_exception_stops_effect(self):
        timers = ManualTimerHost()

        def _bad_frame(frame):
            raise RuntimeError("host went away")

        effect = create_effect("sprinkle", "HELLO", timers=timers, on_frame=_bad_frame)
        assert effect.is_stopped
        assert timers.pending == 0

    @pytest.mark.unit
    def test_restore_callback_exception_is_contained(self):
        timers = ManualTimerHost()

        def _bad_restore(text):
            raise RuntimeError("restore failed")

        effect = create_effect("sprinkle", "HELLO", timers=timers, on_restore=_bad_restore)
        effect.stop()
        assert effect.is_stopped
