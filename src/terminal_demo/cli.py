"""Command-line interface for TerminalDemo."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console

from terminal_demo.catalog import (
    CatalogError,
    Demo,
    DemoCatalog,
    default_catalog,
    load_catalog,
)
from terminal_demo.config import AppConfig, load_config
from terminal_demo.logging_setup import init_logging, set_console_level
from terminal_demo.renderer import LineRenderer
from terminal_demo.scheduling import AsyncioScheduler, VirtualScheduler
from terminal_demo.session import PlaybackEngine
from terminal_demo.surface import BufferSurface, LiveSurface, render_lines

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="term-demo", description="Smart Organizer terminal demos"
    )
    parser.add_argument(
        "demo",
        nargs="?",
        default=None,
        help="Demo to play (defaults to the configured demo)",
    )
    parser.add_argument("--list", action="store_true", help="List demos and exit")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--stream",
        action="store_true",
        help="Play the demo on stdout in real time",
    )
    mode.add_argument(
        "--instant",
        action="store_true",
        help="Print the demo's final output without waiting",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="JSON file with demo definitions",
    )
    parser.add_argument(
        "--typing-ms",
        type=int,
        default=None,
        help="Delay between typed characters of the command line",
    )
    return parser


def _load_catalog(path: Optional[Path], config: AppConfig) -> DemoCatalog:
    if path is None and config.catalog_path:
        path = Path(config.catalog_path).expanduser()
    if path is None:
        return default_catalog()
    return load_catalog(path)


def _list_demos(catalog: DemoCatalog) -> int:
    for name in catalog.names():
        demo = catalog[name]
        print(f"{name:<12} {len(demo):>3} lines  {demo.duration_ms / 1000:.1f}s")
    return 0


def play_instant(
    demo: Demo, renderer: LineRenderer, console: Optional[Console] = None
) -> BufferSurface:
    """Play a demo against a virtual clock and print the final content."""
    scheduler = VirtualScheduler()
    engine = PlaybackEngine(DemoCatalog([demo]), scheduler, renderer=renderer)
    surface = BufferSurface()
    engine.start(surface, demo)
    elapsed = scheduler.run_until_idle()
    logger.debug("Instant playback of %s covered %d ms", demo.name, elapsed)
    (console or Console()).print(render_lines(surface.lines), end="")
    return surface


async def play_stream(
    demo: Demo, renderer: LineRenderer, console: Optional[Console] = None
) -> None:
    """Play a demo in real time on a Rich live display."""
    done = asyncio.Event()
    engine = PlaybackEngine(
        DemoCatalog([demo]), AsyncioScheduler(), renderer=renderer
    )
    with LiveSurface(console) as surface:
        engine.start(surface, demo, on_complete=lambda _session: done.set())
        try:
            await done.wait()
        finally:
            engine.cancel(surface)


def _run_tui(
    catalog: DemoCatalog, config: AppConfig, demo_name: Optional[str]
) -> int:
    try:
        from terminal_demo.tui import run_tui
    except RuntimeError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_tui(catalog=catalog, config=config, demo_name=demo_name)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()
    logger.info("App start")

    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    config = load_config()

    try:
        catalog = _load_catalog(args.catalog, config)
    except CatalogError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if args.list:
        return _list_demos(catalog)

    if not (args.stream or args.instant):
        exit_code = _run_tui(catalog, config, args.demo)
        logger.info("App exit code=%s", exit_code)
        return exit_code

    demo_name = args.demo or config.default_demo
    demo = catalog.get(demo_name)
    if demo is None:
        print(f"Unknown demo: {demo_name}", file=sys.stderr)
        return 1
    typing_ms = config.typing_interval_ms
    if args.typing_ms is not None:
        typing_ms = args.typing_ms
    renderer = LineRenderer(typing_interval_ms=typing_ms)

    set_console_level(logging.WARNING)
    if args.instant:
        play_instant(demo, renderer)
        return 0
    try:
        asyncio.run(play_stream(demo, renderer))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
