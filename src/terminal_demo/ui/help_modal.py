"""Help modal for TerminalDemo."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from rich.text import Text
from textual.app import ComposeResult
from textual import events
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static


_SECTION_ACTIONS: dict[str, list[str]] = {
    "Playback": [
        "replay",
        "copy_command",
    ],
    "General": [
        "show_help",
        "quit_app",
    ],
}

_ACTION_OVERRIDES: dict[str, str] = {
    "show_help": "Open help",
}


def _format_key(key: str) -> str:
    key_map = {
        "space": "Space",
        "enter": "Enter",
    }
    if key in key_map:
        return key_map[key]
    parts = key.split("+")
    formatted: list[str] = []
    for part in parts:
        if len(part) == 1:
            formatted.append(part.upper())
        else:
            formatted.append(part.capitalize())
    return "+".join(formatted)


def build_help_text(bindings: Iterable[Binding], demo_names: Sequence[str]) -> Text:
    by_action: dict[str, list[str]] = defaultdict(list)
    by_desc: dict[str, str] = {}
    for binding in bindings:
        by_action[binding.action].append(binding.key)
        if binding.description:
            by_desc[binding.action] = binding.description

    content = Text()
    content.append("Demos\n", style="bold #60a5fa")
    for index, name in enumerate(demo_names):
        keys = by_action.get(f"select_demo({index})")
        if not keys:
            content.append(f"  {name}\n")
            continue
        content.append(f"{', '.join(_format_key(k) for k in keys)} — {name}\n")

    for section, actions in _SECTION_ACTIONS.items():
        content.append("\n")
        content.append(f"{section}\n", style="bold #60a5fa")
        for action in actions:
            keys = by_action.get(action)
            if not keys:
                continue
            key_text = ", ".join(_format_key(key) for key in keys)
            label = _ACTION_OVERRIDES.get(action, by_desc.get(action, action))
            content.append(f"{key_text} — {label}\n")

    content.append(
        "\nLogs — %LOCALAPPDATA%/TerminalDemo/logs or ~/.terminal_demo/logs\n"
    )
    return content


class HelpModal(ModalScreen[None]):
    """Help modal listing keybinds and demos."""

    def __init__(self, bindings: Iterable[Binding], demo_names: Sequence[str]) -> None:
        super().__init__()
        self._help_bindings = list(bindings)
        self._demo_names = list(demo_names)

    def compose(self) -> ComposeResult:
        content = build_help_text(self._help_bindings, self._demo_names)
        with Vertical(id="help_modal"):
            yield Static("TerminalDemo Help", id="help_title")
            with VerticalScroll(id="help_scroll"):
                yield Static(content, id="help_content")
            with Horizontal(id="help_footer"):
                yield Static("Esc/q — Close", id="help_hint")
                yield Button("Close", id="help_close")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "help_close":
            self.dismiss(None)

    def on_key(self, event: events.Key) -> None:
        if event.key in {"escape", "q"}:
            self.dismiss(None)
