"""Timer sources the playback engine schedules against.

The engine only needs ``set_timer`` and ``set_interval`` returning handles with
``stop()``. Textual's ``App`` and widgets already provide that shape, so they
can be passed in directly; the classes here cover headless use.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import heapq
import itertools
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], object]


class TimerHandle(Protocol):
    def stop(self) -> object: ...


class Scheduler(Protocol):
    def set_timer(self, delay: float, callback: Callback) -> TimerHandle: ...

    def set_interval(self, interval: float, callback: Callback) -> TimerHandle: ...


class _LoopTimer:
    """Handle for a one-shot or repeating ``loop.call_later`` chain."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        delay: float,
        callback: Callback,
        *,
        repeat: bool = False,
    ) -> None:
        self._loop = loop
        self._delay = max(0.0, delay)
        self._callback = callback
        self._repeat = repeat
        self._stopped = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_later(
            self._delay, self._fire
        )

    def _fire(self) -> None:
        if self._stopped:
            return
        if self._repeat:
            self._handle = self._loop.call_later(self._delay, self._fire)
        else:
            self._handle = None
        self._callback()

    def stop(self) -> None:
        self._stopped = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def set_timer(self, delay: float, callback: Callback) -> _LoopTimer:
        return _LoopTimer(self._get_loop(), delay, callback)

    def set_interval(self, interval: float, callback: Callback) -> _LoopTimer:
        return _LoopTimer(self._get_loop(), interval, callback, repeat=True)


@dataclass(order=True)
class _Entry:
    due_ms: int
    seq: int
    timer: "VirtualTimer" = field(compare=False)


class VirtualTimer:
    def __init__(self, callback: Callback, interval_ms: Optional[int]) -> None:
        self.callback = callback
        self.interval_ms = interval_ms
        self.active = True

    def stop(self) -> None:
        self.active = False


class VirtualScheduler:
    """Deterministic scheduler driven by an explicit millisecond clock.

    Timers due at the same instant fire in the order they were created.
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._queue: list[_Entry] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if entry.timer.active)

    def _push(self, due_ms: int, timer: VirtualTimer) -> None:
        heapq.heappush(self._queue, _Entry(due_ms, next(self._seq), timer))

    def set_timer(self, delay: float, callback: Callback) -> VirtualTimer:
        timer = VirtualTimer(callback, None)
        self._push(self._now_ms + max(0, round(delay * 1000)), timer)
        return timer

    def set_interval(self, interval: float, callback: Callback) -> VirtualTimer:
        interval_ms = max(1, round(interval * 1000))
        timer = VirtualTimer(callback, interval_ms)
        self._push(self._now_ms + interval_ms, timer)
        return timer

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing every timer that comes due."""
        target = self._now_ms + max(0, ms)
        while self._queue and self._queue[0].due_ms <= target:
            entry = heapq.heappop(self._queue)
            timer = entry.timer
            if not timer.active:
                continue
            self._now_ms = entry.due_ms
            if timer.interval_ms is not None:
                self._push(entry.due_ms + timer.interval_ms, timer)
            else:
                timer.active = False
            timer.callback()
        self._now_ms = target

    def run_until_idle(self, *, limit_ms: int = 3_600_000) -> int:
        """Fire timers until none remain; return the clock value reached."""
        start = self._now_ms
        while True:
            live = [entry for entry in self._queue if entry.timer.active]
            if not live:
                break
            next_due = min(entry.due_ms for entry in live)
            if next_due - start > limit_ms:
                logger.warning("Virtual scheduler stopped after %d ms", limit_ms)
                break
            self.advance(next_due - self._now_ms)
        return self._now_ms
