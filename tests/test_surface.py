"""Tests for playback surfaces."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from terminal_demo.surface import (
    BufferSurface,
    LiveSurface,
    RenderedLine,
    SurfaceNotFound,
    SurfaceRegistry,
    render_lines,
)


def test_buffer_surface_appends_and_clears() -> None:
    surface = BufferSurface(viewport_height=2)
    surface.append_line("one", "#fff")
    node = surface.append_typing_node("#000")
    surface.append_char(node, "$")
    surface.append_line("three", "#fff")
    surface.scroll_to_bottom()

    assert surface.texts() == ["one", "$", "three"]
    assert surface.scroll_top == 1
    assert surface.plain() == "one\n$\nthree\n"

    surface.clear()
    assert surface.lines == []
    assert surface.scroll_top == 0


def test_render_lines_applies_styles() -> None:
    text = render_lines([RenderedLine("ok", "#4ade80"), RenderedLine("", "#8899b3")])
    assert text.plain == "ok\n\n"
    assert str(text.spans[0].style) == "#4ade80"


def test_registry_resolves_registered_surface() -> None:
    registry = SurfaceRegistry()
    surface = BufferSurface()
    registry.register("out", surface)
    assert registry.resolve("out") is surface

    registry.unregister("out")
    with pytest.raises(SurfaceNotFound):
        registry.resolve("out")


def test_registry_uses_lookup_fallback() -> None:
    surface = BufferSurface()
    registry = SurfaceRegistry(lambda key: surface if key == "dyn" else None)
    assert registry.resolve("dyn") is surface
    with pytest.raises(SurfaceNotFound):
        registry.resolve("other")


def test_registry_lookup_errors_become_not_found() -> None:
    def lookup(_key: str) -> BufferSurface:
        raise KeyError("missing")

    with pytest.raises(SurfaceNotFound):
        SurfaceRegistry(lookup).resolve("x")


def test_live_surface_writes_final_content() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=60)
    with LiveSurface(console) as surface:
        surface.append_line("hello", "#d6e0f0")
        node = surface.append_typing_node("#d6e0f0")
        surface.append_char(node, "!")
        surface.scroll_to_bottom()

    assert "hello" in buffer.getvalue()
    assert "!" in buffer.getvalue()
