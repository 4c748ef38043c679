"""Demo catalog: named, ordered sequences of timestamped terminal lines."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Sequence

from terminal_demo.colors import DEFAULT_TAG

logger = logging.getLogger(__name__)


class DemoNotFound(KeyError):
    """Raised when a demo key is not present in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown demo: {self.name!r}"


class CatalogError(ValueError):
    """Raised when catalog data cannot be parsed."""


@dataclass(frozen=True)
class Line:
    """One line of terminal output scheduled at an absolute offset."""

    text: str
    color: str = DEFAULT_TAG
    delay_ms: int = 0

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {self.delay_ms}")


@dataclass(frozen=True)
class Demo:
    name: str
    lines: tuple[Line, ...]

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    @property
    def command(self) -> str:
        """Text of the first line, the typed command."""
        return self.lines[0].text if self.lines else ""

    @property
    def duration_ms(self) -> int:
        return max((line.delay_ms for line in self.lines), default=0)


class DemoCatalog(Mapping[str, Demo]):
    """Read-only mapping of demo name to demo."""

    def __init__(self, demos: Mapping[str, Sequence[Line]] | Sequence[Demo]) -> None:
        items: dict[str, Demo] = {}
        if isinstance(demos, Mapping):
            for name, lines in demos.items():
                items[name] = Demo(name=name, lines=tuple(lines))
        else:
            for demo in demos:
                items[demo.name] = demo
        self._demos = items

    def __getitem__(self, name: str) -> Demo:
        try:
            return self._demos[name]
        except KeyError:
            raise DemoNotFound(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._demos)

    def __len__(self) -> int:
        return len(self._demos)

    def require(self, name: str) -> Demo:
        """Return the demo for name or raise DemoNotFound."""
        return self[name]

    def names(self) -> list[str]:
        return list(self._demos)


def _line_from_mapping(raw: Any, *, demo: str, index: int) -> Line:
    if not isinstance(raw, dict):
        raise CatalogError(f"{demo}[{index}]: expected an object")
    text = raw.get("text", "")
    if not isinstance(text, str):
        raise CatalogError(f"{demo}[{index}]: 'text' must be a string")
    color = raw.get("color") or DEFAULT_TAG
    if not isinstance(color, str):
        raise CatalogError(f"{demo}[{index}]: 'color' must be a string")
    delay = raw.get("delay", raw.get("delay_ms", 0))
    if isinstance(delay, bool) or not isinstance(delay, int) or delay < 0:
        raise CatalogError(f"{demo}[{index}]: 'delay' must be a non-negative integer")
    return Line(text=text, color=color, delay_ms=delay)


def catalog_from_mapping(raw: Any) -> DemoCatalog:
    """Build a catalog from decoded JSON data."""
    if not isinstance(raw, dict):
        raise CatalogError("catalog must be a JSON object of demo name to lines")
    demos: dict[str, list[Line]] = {}
    for name, lines in raw.items():
        if not isinstance(lines, list):
            raise CatalogError(f"{name}: expected a list of lines")
        demos[str(name)] = [
            _line_from_mapping(item, demo=str(name), index=index)
            for index, item in enumerate(lines)
        ]
    return DemoCatalog(demos)


def load_catalog(path: Path) -> DemoCatalog:
    """Load a catalog from a JSON file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogError(f"Cannot read catalog {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Invalid JSON in catalog {path}: {exc}") from exc
    catalog = catalog_from_mapping(raw)
    logger.info("Loaded %d demo(s) from %s", len(catalog), path)
    return catalog


def _demo(*rows: tuple[str, Optional[str], int]) -> list[Line]:
    return [
        Line(text=text, color=color or DEFAULT_TAG, delay_ms=delay)
        for text, color, delay in rows
    ]


_RULE = "═══════════════════════════════════════"
_BANNER = "      Smart File Organizer  v1.1"

BUILTIN_DEMOS: dict[str, list[Line]] = {
    "hero": _demo(
        ("$ smart-organizer --path ~/Downloads", "white", 0),
        (_RULE, "cyan", 400),
        (_BANNER, "cyan", 500),
        (_RULE, "cyan", 600),
        ("", None, 700),
        ("📁 Target: /home/user/Downloads", "white", 800),
        ("", None, 900),
        ("  → vacation.jpg         → Images/", "gray", 1000),
        ("  → report.pdf           → Documents/", "gray", 1100),
        ("  → song.mp3             → Music/", "gray", 1200),
        ("  → screenshot.png       → Images/", "gray", 1300),
        ("  → movie.mp4            → Videos/", "gray", 1400),
        ("  → archive.zip          → Archives/", "gray", 1500),
        ("", None, 1600),
        ("✓ Organized 6 file(s)", "green", 1700),
        ("  See organizer_log.txt for details.", "dimgray", 1800),
    ),
    "basic": _demo(
        ("$ smart-organizer --path ~/Downloads", "white", 0),
        (_RULE, "cyan", 300),
        (_BANNER, "cyan", 400),
        (_RULE, "cyan", 500),
        ("", None, 600),
        ("📁 Target: /home/user/Downloads", "white", 700),
        ("", None, 750),
        ("  → photo_001.jpg        → Images/", "gray", 800),
        ("  → photo_002.png        → Images/", "gray", 880),
        ("  → thesis.pdf           → Documents/", "gray", 960),
        ("  → budget.xlsx          → Documents/", "gray", 1040),
        ("  → podcast.mp3          → Music/", "gray", 1120),
        ("  → trailer.mp4          → Videos/", "gray", 1200),
        ("  → backup.zip           → Archives/", "gray", 1280),
        ("  → app.js               → Code/", "gray", 1360),
        ("", None, 1500),
        ("✓ Organized 8 file(s)", "green", 1600),
        ("  See organizer_log.txt for details.", "dimgray", 1700),
    ),
    "dryrun": _demo(
        ("$ smart-organizer --dry-run --path ~/Desktop", "white", 0),
        (_RULE, "cyan", 300),
        (_BANNER, "cyan", 400),
        (_RULE, "cyan", 500),
        ("", None, 600),
        ("📋 PREVIEW MODE — no files will be moved", "yellow", 700),
        ("   Remove --dry-run to organize for real.", "yellow", 800),
        ("", None, 850),
        ("📁 Target: /home/user/Desktop", "white", 900),
        ("", None, 950),
        ("  → wallpaper.png     [would move] → Images/", "gray", 1000),
        ("  → resume.docx       [would move] → Documents/", "gray", 1080),
        ("  → demo.mp4          [would move] → Videos/", "gray", 1160),
        ("  → notes.txt         [would move] → Documents/", "gray", 1240),
        ("  → style.css         [would move] → Code/", "gray", 1320),
        ("", None, 1450),
        ("✓ Preview complete: 5 file(s) would be moved", "green", 1550),
        ("   Run again without --dry-run to apply changes.", "yellow", 1650),
    ),
    "duplicates": _demo(
        ("$ smart-organizer --find-duplicates --path ~/Files", "white", 0),
        (_RULE, "cyan", 300),
        (_BANNER, "cyan", 400),
        (_RULE, "cyan", 500),
        ("", None, 600),
        ("📁 Target: /home/user/Files", "white", 700),
        ("", None, 750),
        ("  → report.pdf           → Documents/", "gray", 850),
        ("  → report.pdf           ⚠ DUPLICATE (skipped)", "yellow", 950),
        ("  → photo.jpg            → Images/", "gray", 1050),
        ("  → photo.jpg            ⚠ DUPLICATE (skipped)", "yellow", 1150),
        ("  → song.flac            → Music/", "gray", 1250),
        ("  → archive.tar.gz       → Archives/", "gray", 1350),
        ("", None, 1500),
        ("✓ Organized 4 file(s)", "green", 1600),
        ("   2 duplicate(s) skipped", "yellow", 1700),
        ("  See organizer_log.txt for details.", "dimgray", 1800),
    ),
    "full": _demo(
        (
            "$ smart-organizer --dry-run --find-duplicates --keep-structure "
            "--path ~/Projects",
            "white",
            0,
        ),
        (_RULE, "cyan", 300),
        (_BANNER, "cyan", 400),
        (_RULE, "cyan", 500),
        ("", None, 600),
        ("📋 PREVIEW MODE — no files will be moved", "yellow", 700),
        ("   Remove --dry-run to organize for real.", "yellow", 800),
        ("", None, 850),
        ("📁 Target: /home/user/Projects", "white", 900),
        ("", None, 950),
        ("  → web/index.html       [would move] → Code/web/", "gray", 1050),
        ("  → web/style.css        [would move] → Code/web/", "gray", 1150),
        ("  → design/logo.png      [would move] → Images/design/", "gray", 1250),
        ("  → design/logo.png      ⚠ DUPLICATE (would skip)", "yellow", 1350),
        ("  → docs/readme.pdf      [would move] → Documents/docs/", "gray", 1450),
        ("  → assets/intro.mp4     [would move] → Videos/assets/", "gray", 1550),
        ("", None, 1700),
        ("✓ Preview complete: 5 file(s) would be moved", "green", 1800),
        ("   1 duplicate(s) detected", "yellow", 1900),
        ("   Run again without --dry-run to apply changes.", "yellow", 2000),
    ),
}


def default_catalog() -> DemoCatalog:
    """Return the catalog of built-in demos."""
    return DemoCatalog(BUILTIN_DEMOS)
