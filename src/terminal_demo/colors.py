"""Colour tags used by terminal demo lines."""

from __future__ import annotations

from typing import Mapping

DEFAULT_TAG = "gray"

COLOR_MAP: Mapping[str, str] = {
    "white": "#d6e0f0",
    "cyan": "#60a5fa",
    "green": "#4ade80",
    "yellow": "#facc15",
    "red": "#f87171",
    "gray": "#8899b3",
    "dimgray": "#4a6080",
}


def resolve_color(tag: str | None) -> str:
    """Return the display colour for a tag, falling back to gray."""
    if tag is None:
        return COLOR_MAP[DEFAULT_TAG]
    return COLOR_MAP.get(tag, COLOR_MAP[DEFAULT_TAG])
