"""Configuration persistence for TerminalDemo."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Immutable user configuration loaded from disk."""

    default_demo: str = "basic"
    hero_demo: str = "hero"
    typing_interval_ms: int = 18
    catalog_path: Optional[str] = None
    stat_target: int = 10000
    stat_duration_ms: int = 2000


def get_config_dir(app_name: str = "terminal-demo") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            root = Path(base)
        else:
            root = Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    elif os.name == "posix":
        if _is_macos():
            return _ensure_dir(
                Path.home() / "Library" / "Application Support" / app_name
            )
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
        return _ensure_dir(root / app_name)
    else:
        return _ensure_dir(Path.home() / ".config" / app_name)


def load_config() -> AppConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _config_from_mapping(raw)


def save_config(cfg: AppConfig) -> None:
    """Persist configuration to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    data = {
        "default_demo": cfg.default_demo,
        "hero_demo": cfg.hero_demo,
        "typing_interval_ms": cfg.typing_interval_ms,
        "catalog_path": cfg.catalog_path,
        "stat_target": cfg.stat_target,
        "stat_duration_ms": cfg.stat_duration_ms,
    }
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Fetch an integer value with optional clamping."""
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        value = default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


def _get_str(
    raw: dict[str, Any],
    key: str,
    default: str,
    *,
    allow_empty: bool = False,
) -> str:
    """Fetch a string value, optionally allowing empty strings."""
    value = raw.get(key, default)
    if not isinstance(value, str):
        return default
    if not value and not allow_empty:
        return default
    return value


def _config_from_mapping(raw: dict[str, Any]) -> AppConfig:
    """Normalize raw JSON data into an AppConfig."""
    catalog_path = raw.get("catalog_path")
    if catalog_path is not None and not isinstance(catalog_path, str):
        catalog_path = None
    return AppConfig(
        default_demo=_get_str(raw, "default_demo", "basic"),
        hero_demo=_get_str(raw, "hero_demo", "hero"),
        typing_interval_ms=_get_int(
            raw, "typing_interval_ms", 18, min_value=1, max_value=1000
        ),
        catalog_path=catalog_path or None,
        stat_target=_get_int(raw, "stat_target", 10000, min_value=0),
        stat_duration_ms=_get_int(raw, "stat_duration_ms", 2000, min_value=1),
    )
