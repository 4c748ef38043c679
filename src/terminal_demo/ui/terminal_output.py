"""Terminal output widget that acts as a playback surface."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from terminal_demo.surface import BufferSurface, RenderedLine, render_lines


class TerminalOutput(VerticalScroll):
    """Scrollable block of coloured terminal lines."""

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self._buffer = BufferSurface()
        self._body = Static("", classes="terminal_body")

    def compose(self) -> ComposeResult:
        yield self._body

    @property
    def lines(self) -> list[RenderedLine]:
        return self._buffer.lines

    @property
    def plain(self) -> str:
        return self._buffer.plain()

    def append_line(self, text: str, color: str) -> None:
        self._buffer.append_line(text, color)
        self._refresh_body()

    def append_typing_node(self, color: str) -> int:
        node = self._buffer.append_typing_node(color)
        self._refresh_body()
        return node

    def append_char(self, node: int, ch: str) -> None:
        self._buffer.append_char(node, ch)
        self._refresh_body()

    def scroll_to_bottom(self) -> None:
        self._buffer.scroll_to_bottom()
        if self.is_attached:
            self.scroll_end(animate=False)

    def clear(self) -> None:
        self._buffer.clear()
        self._refresh_body()
        if self.is_attached:
            self.scroll_home(animate=False)

    def _refresh_body(self) -> None:
        self._body.update(render_lines(self._buffer.lines))
