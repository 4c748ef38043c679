"""Counter widget that eases up to a target number."""

from __future__ import annotations

import time
from typing import Callable, Optional

from textual.timer import Timer
from textual.widgets import Static


def ease_out_cubic(progress: float) -> float:
    progress = min(1.0, max(0.0, progress))
    return 1 - (1 - progress) ** 3


def counter_value(target: int, elapsed_ms: float, duration_ms: int) -> int:
    """Return the eased counter value after elapsed_ms."""
    if duration_ms <= 0:
        return target
    progress = elapsed_ms / duration_ms
    return int(target * ease_out_cubic(progress))


def format_counter(value: int, *, done: bool) -> str:
    return f"{value:,}+" if done else f"{value:,}"


class StatCounter(Static):
    """Animated numeric stat shown next to a label."""

    def __init__(
        self,
        target: int,
        *,
        label: str = "",
        duration_ms: int = 2000,
        step_interval: float = 1 / 30,
        now: Callable[[], float] = time.monotonic,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__("", name=name, id=id, classes=classes)
        self._target = max(0, target)
        self._label = label
        self._duration_ms = duration_ms
        self._step_interval = step_interval
        self._now = now
        self._started: Optional[float] = None
        self._timer: Optional[Timer] = None
        self._current_text = format_counter(0, done=False)

    @property
    def current_text(self) -> str:
        return self._current_text

    @property
    def done(self) -> bool:
        return self._current_text.endswith("+")

    def on_mount(self) -> None:
        self.start()

    def on_unmount(self) -> None:
        self._stop_timer()

    def start(self) -> None:
        self._stop_timer()
        self._started = self._now()
        self._render_frame()
        self._timer = self.set_interval(self._step_interval, self._tick)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _tick(self) -> None:
        self._render_frame()
        if self.done:
            self._stop_timer()

    def _render_frame(self) -> None:
        started = self._started if self._started is not None else self._now()
        elapsed_ms = (self._now() - started) * 1000.0
        if elapsed_ms >= self._duration_ms:
            self._current_text = format_counter(self._target, done=True)
        else:
            value = counter_value(self._target, elapsed_ms, self._duration_ms)
            self._current_text = format_counter(value, done=False)
        text = self._current_text
        if self._label:
            text = f"{text} {self._label}"
        self.update(text)
