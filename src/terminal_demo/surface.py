"""Rendering surfaces the playback engine writes to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

from rich.console import Console
from rich.live import Live
from rich.text import Text


class SurfaceNotFound(LookupError):
    """Raised when a surface id does not resolve to a surface."""


class Surface(Protocol):
    def append_line(self, text: str, color: str) -> None: ...

    def append_typing_node(self, color: str) -> int: ...

    def append_char(self, node: int, ch: str) -> None: ...

    def scroll_to_bottom(self) -> None: ...

    def clear(self) -> None: ...


@dataclass
class RenderedLine:
    text: str
    color: str
    typed: bool = False


def render_lines(lines: Iterable[RenderedLine]) -> Text:
    """Join rendered lines into a single styled Rich text."""
    content = Text()
    for line in lines:
        content.append(line.text, style=line.color)
        content.append("\n")
    return content


class BufferSurface:
    """In-memory surface keeping rendered lines and a scroll offset."""

    def __init__(self, *, viewport_height: int = 0) -> None:
        self.lines: list[RenderedLine] = []
        self.viewport_height = viewport_height
        self.scroll_top = 0
        self.scroll_requests = 0

    @property
    def scroll_height(self) -> int:
        return len(self.lines)

    def texts(self) -> list[str]:
        return [line.text for line in self.lines]

    def plain(self) -> str:
        return render_lines(self.lines).plain

    def append_line(self, text: str, color: str) -> None:
        self.lines.append(RenderedLine(text=text, color=color))
        self._changed()

    def append_typing_node(self, color: str) -> int:
        self.lines.append(RenderedLine(text="", color=color, typed=True))
        self._changed()
        return len(self.lines) - 1

    def append_char(self, node: int, ch: str) -> None:
        self.lines[node].text += ch
        self._changed()

    def scroll_to_bottom(self) -> None:
        self.scroll_requests += 1
        self.scroll_top = max(0, self.scroll_height - self.viewport_height)

    def clear(self) -> None:
        self.lines.clear()
        self.scroll_top = 0
        self._changed()

    def _changed(self) -> None:
        """Hook for subclasses that mirror the buffer somewhere visible."""


class LiveSurface(BufferSurface):
    """Buffer surface mirrored to a console through a Rich ``Live`` display."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()
        super().__init__(viewport_height=self._console.size.height)
        self._live = Live(
            Text(),
            console=self._console,
            auto_refresh=False,
            vertical_overflow="visible",
        )

    def __enter__(self) -> "LiveSurface":
        self._live.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._live.update(render_lines(self.lines), refresh=True)
        self._live.stop()

    def _changed(self) -> None:
        self._live.update(render_lines(self.lines))

    def scroll_to_bottom(self) -> None:
        super().scroll_to_bottom()
        self._live.refresh()


class SurfaceRegistry:
    """Resolve surface ids to surfaces.

    Explicit registrations win; otherwise the optional ``lookup`` callable is
    asked and may return None.
    """

    def __init__(self, lookup: Optional[Callable[[str], Optional[Surface]]] = None):
        self._surfaces: dict[str, Surface] = {}
        self._lookup = lookup

    def register(self, surface_id: str, surface: Surface) -> None:
        self._surfaces[surface_id] = surface

    def unregister(self, surface_id: str) -> None:
        self._surfaces.pop(surface_id, None)

    def resolve(self, surface_id: str) -> Surface:
        surface = self._surfaces.get(surface_id)
        if surface is None and self._lookup is not None:
            try:
                surface = self._lookup(surface_id)
            except LookupError:
                surface = None
        if surface is None:
            raise SurfaceNotFound(surface_id)
        return surface
