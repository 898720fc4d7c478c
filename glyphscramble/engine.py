"""Effect scheduling: one tick loop per effect plus delayed spawn timers."""

from __future__ import annotations

import random
from typing import Any, Callable, Mapping, Optional, Set, Union

from loguru import logger
from pydantic import BaseModel

from glyphscramble.config.loader import resolve_config
from glyphscramble.config.schema import EffectConfig, EffectKind
from glyphscramble.grid import Surface
from glyphscramble.render import Frame
from glyphscramble.timers import AsyncioTimerHost, TimerHandle, TimerHost
from glyphscramble.variants import VARIANTS, EffectVariant

FrameCallback = Callable[[Frame], None]
RestoreCallback = Callable[[str], None]


class EffectInstance:
    """Owns one running effect: its variant state, tick timer and spawn timers.

    All state changes happen inside the tick or a spawn callback, both run
    by the timer host on a single thread. Every outstanding timer handle is
    tracked so ``stop()`` leaves nothing behind that could fire later.
    """

    def __init__(
        self,
        variant: EffectVariant,
        timers: TimerHost,
        on_frame: Optional[FrameCallback] = None,
        on_restore: Optional[RestoreCallback] = None,
    ) -> None:
        self.variant = variant
        self.timers = timers
        # Called with every rendered frame
        self.on_frame = on_frame
        # Called once with the untouched source text when the effect stops
        self.on_restore = on_restore
        self.frame_count = 0
        self._tick_handle: Optional[TimerHandle] = None
        self._spawn_handles: Set[TimerHandle] = set()
        self._last_frame: Frame = []
        self._running = False
        self._stopped = False

    @property
    def kind(self) -> EffectKind:
        return self.variant.kind

    @property
    def config(self) -> EffectConfig:
        return self.variant.config

    @property
    def original_text(self) -> str:
        return self.variant.source_text

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def live_units(self) -> int:
        """Active plus fading units."""
        return self.variant.live_units

    @property
    def max_units(self) -> int:
        return self.variant.max_units

    @property
    def pending_spawns(self) -> int:
        return len(self._spawn_handles)

    @property
    def last_frame(self) -> Frame:
        return self._last_frame

    def start(self) -> None:
        """Begin spawning, arm the tick timer and emit the first frame."""
        if self._running or self._stopped:
            return
        self._running = True
        if self.variant.is_empty:
            logger.debug("Effect has nothing to animate", kind=self.kind.value)

        if not self._guard(lambda: self.variant.begin(self), "begin"):
            return
        self._tick_handle = self.timers.call_every(self.config.update_interval, self._on_tick)
        logger.debug("Effect started", kind=self.kind.value, interval_ms=self.config.update_interval)
        self._emit(self.variant.render())

    def update(self) -> Optional[Frame]:
        """Force one tick now. Returns the new frame, or None once stopped."""
        if self._stopped:
            return None
        return self._tick()

    def reset(self) -> None:
        """Drop all units and pending spawns and start spawning from scratch."""
        if self._stopped:
            return
        self._cancel_spawns()

        def _restart() -> None:
            self.variant.reset()
            if self._running:
                self.variant.begin(self)

        if self._guard(_restart, "reset"):
            logger.debug("Effect reset", kind=self.kind.value)
            self._emit(self.variant.render())

    def stop(self) -> None:
        """Cancel every timer and ask the caller to restore the original text."""
        if self._stopped:
            return
        self._stopped = True
        self._running = False
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        self._cancel_spawns()
        logger.debug("Effect stopped", kind=self.kind.value, frames=self.frame_count)
        if self.on_restore:
            try:
                self.on_restore(self.original_text)
            except Exception:
                logger.exception("Restore callback failed", kind=self.kind.value)

    def schedule_spawn(self, delay_ms: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` after ``delay_ms`` unless the effect is stopped or reset first."""
        if self._stopped:
            return

        def _fire() -> None:
            self._spawn_handles.discard(handle)
            if self._stopped:
                return
            self._guard(callback, "spawn")

        handle = self.timers.call_later(delay_ms, _fire)
        self._spawn_handles.add(handle)

    def _cancel_spawns(self) -> None:
        for handle in self._spawn_handles:
            handle.cancel()
        self._spawn_handles.clear()

    def _on_tick(self) -> None:
        if self._stopped:
            return
        self._tick()

    def _tick(self) -> Optional[Frame]:
        frame: Frame = []

        def _step() -> None:
            nonlocal frame
            frame = self.variant.step()

        if not self._guard(_step, "tick"):
            return None
        self.frame_count += 1
        self._emit(frame)
        return frame

    def _emit(self, frame: Frame) -> None:
        self._last_frame = frame
        if self.on_frame and not self._stopped:
            self._guard(lambda: self.on_frame(frame), "frame callback")  # type: ignore[misc]

    def _guard(self, action: Callable[[], None], stage: str) -> bool:
        """Run ``action``; on any exception log it and stop the effect."""
        try:
            action()
        except Exception:
            logger.exception(
                "Effect crashed, stopping",
                kind=self.kind.value,
                stage=stage,
                frame=self.frame_count,
            )
            self.stop()
            return False
        return True


def create_effect(
    kind: Union[EffectKind, str],
    source_text: str,
    surface: Optional[Surface] = None,
    config: Union[Mapping[str, Any], BaseModel, None] = None,
    *,
    timers: Optional[TimerHost] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    on_frame: Optional[FrameCallback] = None,
    on_restore: Optional[RestoreCallback] = None,
    autostart: bool = True,
) -> EffectInstance:
    """Build an effect over ``source_text`` and (by default) start it.

    Args:
        kind: Effect variant, as an EffectKind or its string value.
        source_text: Text to scramble.
        surface: Render area for grid sizing; defaults to 128x100 px.
        config: Options mapping (camelCase or snake_case) or a config model.
            Invalid or unknown options fall back to defaults.
        timers: Timer host; defaults to the running asyncio loop.
        rng: Random source; defaults to ``random.Random(seed)``.
        seed: Seed for the default random source.
        on_frame: Called with every rendered frame.
        on_restore: Called with the original text when the effect stops.
        autostart: Start immediately.

    Returns:
        The effect instance, the only handle to its timers and state.
    """
    kind = EffectKind(kind)
    variant_class = VARIANTS[kind]
    resolved = resolve_config(variant_class.config_class, config)
    variant = variant_class(source_text, surface or Surface(), resolved, rng or random.Random(seed))
    instance = EffectInstance(
        variant,
        timers if timers is not None else AsyncioTimerHost(),
        on_frame=on_frame,
        on_restore=on_restore,
    )
    if autostart:
        instance.start()
    return instance
