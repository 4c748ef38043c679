"""Textual-based TUI for TerminalDemo."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

try:
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, Vertical
    from textual.css.query import NoMatches
    from textual.widgets import Button, Header, Static
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from terminal_demo.catalog import DemoCatalog, default_catalog
from terminal_demo.config import AppConfig, load_config
from terminal_demo.logging_setup import set_console_level
from terminal_demo.renderer import LineRenderer
from terminal_demo.session import PlaybackEngine, PlaybackSession
from terminal_demo.surface import Surface, SurfaceRegistry
from terminal_demo.ui.help_modal import HelpModal
from terminal_demo.ui.stat_counter import StatCounter
from terminal_demo.ui.terminal_output import TerminalOutput

logger = logging.getLogger(__name__)

HERO_SURFACE = "terminal-output"
DEMO_SURFACE = "demo-output"


class TerminalDemoApp(App):
    """Smart Organizer terminal demo application."""

    CSS_PATH = "app.tcss"
    TITLE = "Smart Organizer"

    BINDINGS = [
        *(
            Binding(str(n), f"select_demo({n - 1})", f"Demo {n}", show=False)
            for n in range(1, 10)
        ),
        Binding("r", "replay", "Replay Demo"),
        Binding("c", "copy_command", "Copy Command"),
        Binding("?", "show_help", "Help"),
        Binding("f1", "show_help", "Help"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(
        self,
        *,
        catalog: Optional[DemoCatalog] = None,
        config: Optional[AppConfig] = None,
        initial_demo: Optional[str] = None,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self._config = config or load_config()
        self.catalog = catalog or default_catalog()
        self._now = now
        self._active_demo = initial_demo or self._config.default_demo
        self._status_text = ""
        self.engine = PlaybackEngine(
            self.catalog,
            self,
            registry=SurfaceRegistry(self._lookup_surface),
            renderer=LineRenderer(
                typing_interval_ms=self._config.typing_interval_ms
            ),
        )

    # --- Layout ---
    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main"):
            with Vertical(id="hero_panel", classes="panel"):
                yield TerminalOutput(id=HERO_SURFACE)
            with Vertical(id="demo_panel", classes="panel"):
                with Horizontal(id="demo_buttons"):
                    for index, name in enumerate(self.catalog.names()):
                        yield Button(
                            name,
                            name=name,
                            id=f"demo_btn_{index}",
                            classes="cmd-btn",
                        )
                yield TerminalOutput(id=DEMO_SURFACE)
        with Horizontal(id="footer_bar"):
            yield StatCounter(
                self._config.stat_target,
                label="files organized",
                duration_ms=self._config.stat_duration_ms,
                now=self._now,
                id="stat-files",
            )
            yield Static("", id="status_line")

    def on_mount(self) -> None:
        self.query_one("#hero_panel").border_title = "smart-organizer"
        self.query_one("#demo_panel").border_title = "Try it"
        logger.info("TUI mounted with %d demo(s)", len(self.catalog))
        self.engine.play_demo(HERO_SURFACE, self._config.hero_demo)
        self.run_demo(self._active_demo)

    def _lookup_surface(self, surface_id: str) -> Optional[Surface]:
        try:
            return self.query_one(f"#{surface_id}", TerminalOutput)
        except NoMatches:
            return None

    # --- Demo control ---
    @property
    def active_demo(self) -> str:
        return self._active_demo

    def run_demo(self, name: str) -> Optional[PlaybackSession]:
        session = self.engine.play_demo(
            DEMO_SURFACE, name, on_complete=self._on_demo_complete
        )
        if session is None:
            self._set_message(f"Unknown demo: {name}", level="warning")
            return None
        self._highlight_button(name)
        self._active_demo = name
        self._set_message(f"Running {name}…")
        return session

    def _highlight_button(self, name: str) -> None:
        for button in self.query(".cmd-btn").results(Button):
            button.set_class(button.name == name, "active")

    def _on_demo_complete(self, session: PlaybackSession) -> None:
        self._set_message(f"{session.demo.name} finished")

    @property
    def status_text(self) -> str:
        return self._status_text

    def _set_message(self, message: str, level: str = "info") -> None:
        self._status_text = message
        try:
            status = self.query_one("#status_line", Static)
        except NoMatches:
            return
        status.set_class(level == "warning", "warning")
        status.set_class(level == "error", "error")
        status.update(message)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.has_class("cmd-btn") and event.button.name:
            self.run_demo(event.button.name)

    # --- Actions ---
    def action_select_demo(self, index: int) -> None:
        names = self.catalog.names()
        if 0 <= index < len(names):
            self.run_demo(names[index])

    def action_replay(self) -> None:
        self.run_demo(self._active_demo)

    def action_copy_command(self) -> None:
        demo = self.catalog.get(self._active_demo)
        if demo is None or not demo.command:
            return
        command = demo.command.lstrip("$ ")
        try:
            self.copy_to_clipboard(command)
        except Exception:
            logger.exception("Clipboard copy failed")
            self._set_message(command)
            return
        self._set_message("✓ Copied!")

    def action_show_help(self) -> None:
        self.push_screen(HelpModal(self.BINDINGS, self.catalog.names()))

    def action_quit_app(self) -> None:
        for surface_id in (HERO_SURFACE, DEMO_SURFACE):
            surface = self._lookup_surface(surface_id)
            if surface is not None:
                self.engine.cancel(surface)
        self.exit()


def run_tui(
    *,
    catalog: Optional[DemoCatalog] = None,
    config: Optional[AppConfig] = None,
    demo_name: Optional[str] = None,
) -> int:
    """Run the Textual app and return an exit code."""
    set_console_level(logging.WARNING)
    app = TerminalDemoApp(catalog=catalog, config=config, initial_demo=demo_name)
    app.run()
    return 0
