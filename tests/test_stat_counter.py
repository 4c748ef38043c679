from __future__ import annotations

from terminal_demo.ui.stat_counter import (
    StatCounter,
    counter_value,
    ease_out_cubic,
    format_counter,
)


class _Clock:
    def __init__(self) -> None:
        self.value = 100.0

    def __call__(self) -> float:
        return self.value


def test_ease_out_cubic_bounds() -> None:
    assert ease_out_cubic(0.0) == 0.0
    assert ease_out_cubic(1.0) == 1.0
    assert ease_out_cubic(2.0) == 1.0
    assert ease_out_cubic(0.5) == 0.875


def test_counter_value_eases_toward_target() -> None:
    assert counter_value(10000, 0, 2000) == 0
    assert counter_value(10000, 1000, 2000) == 8750
    assert counter_value(10000, 5000, 2000) == 10000
    assert counter_value(10, 1, 0) == 10


def test_format_counter() -> None:
    assert format_counter(1234, done=False) == "1,234"
    assert format_counter(10000, done=True) == "10,000+"


def test_stat_counter_finishes_with_plus() -> None:
    clock = _Clock()
    counter = StatCounter(10000, duration_ms=2000, now=clock)
    counter._started = clock()
    counter._render_frame()
    assert counter.current_text == "0"
    assert counter.done is False

    clock.value += 1.0
    counter._render_frame()
    assert counter.current_text == "8,750"

    clock.value += 1.0
    counter._tick()
    assert counter.current_text == "10,000+"
    assert counter.done is True
