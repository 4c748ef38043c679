"""Line renderer for terminal demos."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from terminal_demo.catalog import Line
from terminal_demo.colors import resolve_color
from terminal_demo.surface import Surface

if TYPE_CHECKING:
    from terminal_demo.session import PlaybackSession

logger = logging.getLogger(__name__)

TYPING_INTERVAL_MS = 18


class LineRenderer:
    """Append demo lines to a surface, typing out the command line."""

    def __init__(self, *, typing_interval_ms: int = TYPING_INTERVAL_MS) -> None:
        self.typing_interval_ms = max(1, typing_interval_ms)

    def render(
        self,
        surface: Surface,
        line: Line,
        is_first: bool,
        session: "PlaybackSession",
    ) -> None:
        color = resolve_color(line.color)
        if not is_first:
            surface.append_line(line.text, color)
            surface.scroll_to_bottom()
            return
        node = surface.append_typing_node(color)
        surface.scroll_to_bottom()
        self._start_typing(surface, node, line.text, session)

    def _start_typing(
        self,
        surface: Surface,
        node: int,
        text: str,
        session: "PlaybackSession",
    ) -> None:
        if not text:
            return
        position = 0
        token: Optional[int] = None

        def type_char() -> None:
            nonlocal position
            surface.append_char(node, text[position])
            position += 1
            surface.scroll_to_bottom()
            if position >= len(text) and token is not None:
                session.release(token)

        # First character goes out immediately, the rest on the interval.
        type_char()
        if position < len(text):
            token = session.schedule_repeating(self.typing_interval_ms, type_char)
            logger.debug(
                "Typing %d chars every %d ms", len(text), self.typing_interval_ms
            )
