"""Timer hosts that drive effect ticks and delayed spawns.

The engine never sleeps. It asks a host for one-shot and repeating timers
and keeps the returned handles so everything can be cancelled at once.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple

from loguru import logger

Callback = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class TimerHost(Protocol):
    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle: ...

    def call_every(self, interval_ms: float, callback: Callback) -> TimerHandle: ...


class _AsyncioRepeatingTimer:
    """Re-arms a one-shot loop timer after each callback so runs never overlap."""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval_ms: float, callback: Callback) -> None:
        self._loop = loop
        self._interval_s = interval_ms / 1000
        self._callback = callback
        self._cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = None
        self._arm()

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval_s, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        try:
            self._callback()
        finally:
            if not self._cancelled:
                self._arm()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class _AsyncioOneShot:
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioTimerHost:
    """Timer host backed by an asyncio event loop.

    Must be created while a loop is running unless a loop is passed in.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        return _AsyncioOneShot(self._loop.call_later(max(0.0, delay_ms) / 1000, callback))

    def call_every(self, interval_ms: float, callback: Callback) -> TimerHandle:
        return _AsyncioRepeatingTimer(self._loop, interval_ms, callback)


class ManualTimer:
    def __init__(self, due_ms: float, callback: Callback, interval_ms: Optional[float]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.interval_ms = interval_ms
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval_ms is not None


class ManualTimerHost:
    """Virtual clock for deterministic runs.

    Time only moves when ``advance`` is called. Due timers fire in deadline
    order, ties in the order they were scheduled. A repeating timer is re-armed
    relative to its own deadline, so advancing 250ms over an 80ms tick fires
    three ticks.
    """

    def __init__(self) -> None:
        self._now_ms = 0.0
        self._seq = itertools.count()
        self._queue: List[Tuple[float, int, ManualTimer]] = []

    @property
    def now_ms(self) -> float:
        return self._now_ms

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def _push(self, timer: ManualTimer) -> None:
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))

    def call_later(self, delay_ms: float, callback: Callback) -> ManualTimer:
        timer = ManualTimer(self._now_ms + max(0.0, delay_ms), callback, None)
        self._push(timer)
        return timer

    def call_every(self, interval_ms: float, callback: Callback) -> ManualTimer:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = ManualTimer(self._now_ms + interval_ms, callback, interval_ms)
        self._push(timer)
        return timer

    def advance(self, ms: float) -> int:
        """Move the clock forward, firing every timer that falls due.

        Returns:
            Number of callbacks fired.
        """
        target = self._now_ms + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now_ms = due
            if timer.repeating:
                timer.due_ms = due + timer.interval_ms  # type: ignore[operator]
                self._push(timer)
            fired += 1
            timer.callback()
        self._now_ms = target
        return fired

    def run_until_idle(self, limit_ms: float = 60_000) -> int:
        """Fire one-shot timers until none remain or ``limit_ms`` elapses."""
        fired = 0
        deadline = self._now_ms + limit_ms
        while True:
            one_shots = [due for due, _, timer in self._queue if not timer.cancelled and not timer.repeating]
            if not one_shots:
                break
            next_due = min(one_shots)
            if next_due > deadline:
                logger.debug("Manual clock idle limit reached", now_ms=self._now_ms, limit_ms=limit_ms)
                break
            fired += self.advance(next_due - self._now_ms)
        return fired
