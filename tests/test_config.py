"""Tests for config persistence."""

from __future__ import annotations

import json
import os
from pathlib import Path

from terminal_demo import config


def test_load_defaults_when_missing(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    loaded = config.load_config()
    assert loaded == config.AppConfig()


def test_load_defaults_when_corrupt(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    config_path = tmp_path / "config.json"
    config_path.write_text("{not-json", encoding="utf-8")
    loaded = config.load_config()
    assert loaded == config.AppConfig()


def test_load_defaults_when_not_an_object(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    (tmp_path / "config.json").write_text("[1, 2]", encoding="utf-8")
    assert config.load_config() == config.AppConfig()


def test_save_load_round_trip(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    original = config.AppConfig(
        default_demo="dryrun",
        hero_demo="basic",
        typing_interval_ms=30,
        catalog_path="/tmp/demos.json",
        stat_target=500,
        stat_duration_ms=1000,
    )
    config.save_config(original)
    loaded = config.load_config()
    assert loaded == original


def test_save_config_atomic_write(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    replaced: list[tuple[Path, Path]] = []

    def fake_replace(src: Path, dest: Path) -> None:
        replaced.append((src, dest))
        assert src.exists()
        data = json.loads(src.read_text(encoding="utf-8"))
        assert "typing_interval_ms" in data
        dest.write_text(json.dumps(data), encoding="utf-8")

    monkeypatch.setattr(config.os, "replace", fake_replace)
    config.save_config(config.AppConfig())
    assert replaced
    src, dest = replaced[0]
    assert src.suffix == ".tmp"
    assert dest.name == "config.json"


def test_config_from_mapping_sanitizes_values() -> None:
    raw = {
        "default_demo": "",
        "hero_demo": 5,
        "typing_interval_ms": "fast",
        "catalog_path": 123,
        "stat_target": -10,
        "stat_duration_ms": True,
    }
    cfg = config._config_from_mapping(raw)
    assert cfg.default_demo == "basic"
    assert cfg.hero_demo == "hero"
    assert cfg.typing_interval_ms == 18
    assert cfg.catalog_path is None
    assert cfg.stat_target == 0
    assert cfg.stat_duration_ms == 2000


def test_typing_interval_is_clamped() -> None:
    cfg = config._config_from_mapping({"typing_interval_ms": 0})
    assert cfg.typing_interval_ms == 1
    cfg = config._config_from_mapping({"typing_interval_ms": 50_000})
    assert cfg.typing_interval_ms == 1000


def test_get_config_dir_os_defaults(monkeypatch, tmp_path: Path) -> None:
    if os.name == "nt":
        monkeypatch.setenv("APPDATA", str(tmp_path))
        path = config.get_config_dir("demo")
        assert path == tmp_path / "demo"
    else:
        monkeypatch.setattr(config, "_is_macos", lambda: False)
        xdg = tmp_path / "xdg"
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
        path = config.get_config_dir("demo")
        assert path == xdg / "demo"
        assert path.is_dir()
