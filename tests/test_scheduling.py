"""Tests for the scheduler implementations."""

from __future__ import annotations

import asyncio

import pytest

from terminal_demo.scheduling import AsyncioScheduler, VirtualScheduler


def test_virtual_timers_fire_in_due_order() -> None:
    scheduler = VirtualScheduler()
    fired: list[str] = []
    scheduler.set_timer(0.2, lambda: fired.append("late"))
    scheduler.set_timer(0.1, lambda: fired.append("early"))

    scheduler.advance(150)
    assert fired == ["early"]
    assert scheduler.now_ms == 150

    scheduler.advance(50)
    assert fired == ["early", "late"]


def test_virtual_ties_fire_in_creation_order() -> None:
    scheduler = VirtualScheduler()
    fired: list[int] = []
    for index in range(5):
        scheduler.set_timer(0.1, lambda index=index: fired.append(index))

    scheduler.advance(100)

    assert fired == [0, 1, 2, 3, 4]


def test_virtual_stopped_timer_never_fires() -> None:
    scheduler = VirtualScheduler()
    fired: list[str] = []
    timer = scheduler.set_timer(0.05, lambda: fired.append("x"))
    timer.stop()

    scheduler.advance(1000)

    assert fired == []
    assert scheduler.pending == 0


def test_virtual_interval_repeats_until_stopped() -> None:
    scheduler = VirtualScheduler()
    ticks: list[int] = []
    timer = scheduler.set_interval(0.018, lambda: ticks.append(scheduler.now_ms))

    scheduler.advance(60)
    assert ticks == [18, 36, 54]

    timer.stop()
    scheduler.advance(100)
    assert ticks == [18, 36, 54]


def test_virtual_timer_created_in_callback_fires_same_advance() -> None:
    scheduler = VirtualScheduler()
    fired: list[str] = []

    def first() -> None:
        fired.append("first")
        scheduler.set_timer(0, lambda: fired.append("chained"))

    scheduler.set_timer(0.01, first)
    scheduler.advance(10)

    assert fired == ["first", "chained"]


def test_run_until_idle_returns_final_clock() -> None:
    scheduler = VirtualScheduler()
    scheduler.set_timer(1.7, lambda: None)
    scheduler.set_timer(0.3, lambda: None)

    assert scheduler.run_until_idle() == 1700
    assert scheduler.pending == 0


def test_run_until_idle_respects_limit() -> None:
    scheduler = VirtualScheduler()
    scheduler.set_interval(1.0, lambda: None)

    reached = scheduler.run_until_idle(limit_ms=5000)

    assert reached == 5000
    assert scheduler.pending == 1


@pytest.mark.realtime
def test_asyncio_scheduler_timer_and_stop() -> None:
    fired: list[str] = []

    async def runner() -> None:
        scheduler = AsyncioScheduler()
        scheduler.set_timer(0.01, lambda: fired.append("kept"))
        dropped = scheduler.set_timer(0.01, lambda: fired.append("dropped"))
        dropped.stop()
        await asyncio.sleep(0.05)

    asyncio.run(runner())
    assert fired == ["kept"]


@pytest.mark.realtime
def test_asyncio_scheduler_interval_repeats() -> None:
    ticks: list[int] = []

    async def runner() -> None:
        scheduler = AsyncioScheduler()
        timer = scheduler.set_interval(0.005, lambda: ticks.append(1))
        await asyncio.sleep(0.06)
        timer.stop()
        count = len(ticks)
        await asyncio.sleep(0.03)
        assert len(ticks) == count

    asyncio.run(runner())
    assert len(ticks) >= 2


def test_asyncio_scheduler_requires_running_loop() -> None:
    with pytest.raises(RuntimeError):
        AsyncioScheduler().set_timer(0.01, lambda: None)
