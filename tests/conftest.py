"""Pytest configuration for TerminalDemo."""

from __future__ import annotations

import os

import pytest

from terminal_demo.catalog import DemoCatalog, default_catalog
from terminal_demo.scheduling import VirtualScheduler
from terminal_demo.session import PlaybackEngine
from terminal_demo.surface import BufferSurface


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("TERMINAL_DEMO_CI") != "1":
        return
    skip_realtime = pytest.mark.skip(reason="Skipping wall-clock tests in CI.")
    for item in items:
        if "realtime" in item.keywords:
            item.add_marker(skip_realtime)


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def catalog() -> DemoCatalog:
    return default_catalog()


@pytest.fixture
def engine(catalog: DemoCatalog, scheduler: VirtualScheduler) -> PlaybackEngine:
    return PlaybackEngine(catalog, scheduler)


@pytest.fixture
def surface() -> BufferSurface:
    return BufferSurface()
